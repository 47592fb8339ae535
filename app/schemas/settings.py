"""Schemas for the account settings page."""

from pydantic import BaseModel, Field, field_validator


class ProfileResponse(BaseModel):
    """Profile tab contents. Email is read-only."""

    uid: str
    email: str | None
    display_name: str | None
    company: str | None
    role: str | None = Field(description="Current role, None when no profile document exists.")


class ProfileUpdate(BaseModel):
    """Editable profile fields."""

    display_name: str = Field(..., min_length=1, max_length=255)
    company: str | None = Field(default=None, max_length=255)

    @field_validator("display_name")
    @classmethod
    def display_name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("El nombre completo es obligatorio.")
        return v.strip()


class AppearanceResponse(BaseModel):
    """Appearance tab; not yet configurable."""

    enabled: bool = False
    theme: str = "system"
    compact_mode: bool = False
    message: str
