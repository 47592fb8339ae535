"""Admin user management: list, change role, remove profile."""

from typing import Annotated, NoReturn

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.v1.auth import require_admin
from app.core.firebase import get_firestore
from app.schemas.auth import Identity
from app.schemas.user import (
    AppUser,
    RoleChangeRequest,
    UserDeletedResponse,
    UserListItem,
    UsersListResponse,
)
from app.services import users
from app.services.presentation import role_label, user_initials

router = APIRouter()

AdminIdentity = Annotated[Identity, Depends(require_admin("/admin/users", on_forbidden="deny"))]


def _raise_for_user_error(e: Exception) -> NoReturn:
    if isinstance(e, (users.FirestoreNotConfiguredError, users.UserStoreError)):
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message) from e
    if isinstance(e, users.UserNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    if isinstance(e, users.RoleChangeRejected):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    raise e


@router.get("/users", response_model=UsersListResponse)
def list_users(
    _admin: AdminIdentity,
    db: Annotated[object, Depends(get_firestore)],
) -> UsersListResponse:
    """List all users, newest first (admin only)."""
    result = users.fetch_users(db)
    if result.error:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=result.error)
    items = [
        UserListItem(
            **u.model_dump(),
            initials=user_initials(u.display_name, u.email),
            role_label=role_label(u.role),
        )
        for u in result.data
    ]
    return UsersListResponse(users=items, total=len(items))


@router.patch("/users/{uid}/role", response_model=AppUser)
def change_role(
    uid: str,
    body: RoleChangeRequest,
    admin: AdminIdentity,
    db: Annotated[object, Depends(get_firestore)],
) -> AppUser:
    """
    Change a user's role.

    Rejected with 409 when an admin demotes themself or when the target is the
    last remaining admin.
    """
    try:
        return users.change_user_role(db, admin.uid, uid, body.role)
    except (
        users.FirestoreNotConfiguredError,
        users.UserStoreError,
        users.UserNotFoundError,
        users.RoleChangeRejected,
    ) as e:
        _raise_for_user_error(e)


@router.delete("/users/{uid}", response_model=UserDeletedResponse)
def delete_user(
    uid: str,
    _admin: AdminIdentity,
    db: Annotated[object, Depends(get_firestore)],
) -> UserDeletedResponse:
    """
    Remove a user's profile document.

    The authentication identity is not deleted; that needs a privileged backend
    call and is reported in the response.
    """
    try:
        users.delete_user_profile(db, uid)
    except (users.FirestoreNotConfiguredError, users.UserStoreError, users.UserNotFoundError) as e:
        _raise_for_user_error(e)
    return UserDeletedResponse(uid=uid, detail=users.ORPHANED_CREDENTIAL_NOTICE)
