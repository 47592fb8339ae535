"""Pydantic schemas for application user profiles (users/{uid})."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

UserRole = Literal["admin", "editor", "user"]

USER_ROLES: tuple[str, ...] = ("admin", "editor", "user")


class AppUser(BaseModel):
    """Profile document of a signed-up user. Built by app.services.normalize.parse_app_user."""

    uid: str
    email: str | None = None
    display_name: str | None = None
    role: UserRole = "user"
    company: str | None = None
    created_at: datetime
    photo_url: str | None = None


class UserListItem(AppUser):
    """User row for the admin table, with display helpers."""

    initials: str
    role_label: str


class UsersListResponse(BaseModel):
    """Response for GET /admin/users (admin only)."""

    users: list[UserListItem]
    total: int


class RoleChangeRequest(BaseModel):
    """New role for a user."""

    role: UserRole


class UserDeletedResponse(BaseModel):
    """Result of removing a user's profile document."""

    uid: str
    profile_deleted: bool = True
    credential_deleted: bool = Field(
        default=False,
        description="Always False: the authentication identity is left in place.",
    )
    detail: str
