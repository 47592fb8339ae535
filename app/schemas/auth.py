"""Request/response schemas for sign-in, sign-up and the session identity."""

from pydantic import BaseModel, Field, model_validator

from app.core.security import EMAIL_MAX_LEN, PASSWORD_MAX_LEN, PASSWORD_MIN_LEN


class Identity(BaseModel):
    """Signed-in identity carried in the session token."""

    uid: str
    email: str | None = None
    display_name: str | None = None
    role: str = "user"


class LoginRequest(BaseModel):
    """Credentials for sign-in."""

    email: str = Field(
        ..., min_length=3, max_length=EMAIL_MAX_LEN, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
    )
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)


class RegisterRequest(LoginRequest):
    """Credentials for sign-up; confirm_password must match password."""

    confirm_password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN
    )

    @model_validator(mode="after")
    def passwords_match(self) -> "RegisterRequest":
        if self.password != self.confirm_password:
            raise ValueError("Las contraseñas no coinciden.")
        return self


class SessionResponse(BaseModel):
    """Session token returned after sign-in or sign-up."""

    access_token: str = Field(..., description="Session JWT")
    token_type: str = Field(default="bearer", description="Token type")
    identity: Identity
    redirect_to: str = Field(default="/", description="Where the client navigates next")
    message: str


class LogoutResponse(BaseModel):
    """Response after sign-out or account deletion."""

    redirect_to: str = "/auth/login"
    message: str


class RouteCheckResponse(BaseModel):
    """Whether a front-end path may render for the caller, or where to go instead."""

    path: str
    allowed: bool
    redirect_to: str | None = None
