"""Account settings: profile, appearance placeholder and account deletion."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.api.v1.auth import get_session, require_identity
from app.core.config import settings
from app.core.firebase import get_firestore
from app.schemas.auth import Identity, LogoutResponse
from app.schemas.settings import AppearanceResponse, ProfileResponse, ProfileUpdate
from app.services import users
from app.services.identity import AuthProviderError, FirebaseNotConfiguredError
from app.services.session import SessionContext

router = APIRouter()

SettingsIdentity = Annotated[Identity, Depends(require_identity("/settings"))]


@router.get("/profile", response_model=ProfileResponse)
def get_profile(
    identity: SettingsIdentity,
    db: Annotated[object, Depends(get_firestore)],
) -> ProfileResponse:
    """Profile tab. Falls back to the session identity when no profile document exists."""
    try:
        profile = users.get_user_profile(db, identity.uid) if db is not None else None
    except users.UserStoreError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message) from e
    if profile is None:
        return ProfileResponse(
            uid=identity.uid,
            email=identity.email,
            display_name=identity.display_name,
            company=None,
            role=None,
        )
    return ProfileResponse(
        uid=profile.uid,
        email=profile.email or identity.email,
        display_name=profile.display_name or identity.display_name,
        company=profile.company,
        role=profile.role,
    )


@router.patch("/profile", response_model=ProfileResponse)
def update_profile(
    body: ProfileUpdate,
    identity: SettingsIdentity,
    session: Annotated[SessionContext, Depends(get_session)],
) -> ProfileResponse:
    """Save display name and company."""
    try:
        profile = session.update_profile(identity, body.display_name, body.company)
    except (FirebaseNotConfiguredError, users.UserStoreError) as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message) from e
    except users.UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except AuthProviderError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"No se pudo guardar tu perfil: {e.message}",
        ) from e
    return ProfileResponse(
        uid=profile.uid,
        email=profile.email,
        display_name=profile.display_name,
        company=profile.company,
        role=profile.role,
    )


@router.get("/appearance", response_model=AppearanceResponse)
def get_appearance(_identity: SettingsIdentity) -> AppearanceResponse:
    return AppearanceResponse(
        message="El tema (Claro/Oscuro) sigue las preferencias del sistema. Próximamente.",
    )


@router.delete("/account", response_model=LogoutResponse)
def delete_account(
    response: Response,
    identity: SettingsIdentity,
    session: Annotated[SessionContext, Depends(get_session)],
) -> LogoutResponse:
    """Permanently delete the caller's account and sign out."""
    try:
        target = session.delete_account(identity)
    except (FirebaseNotConfiguredError, users.UserStoreError) as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message) from e
    except AuthProviderError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"No se pudo eliminar tu cuenta: {e.message}",
        ) from e
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return LogoutResponse(redirect_to=target, message="Tu cuenta ha sido eliminada permanentemente.")
