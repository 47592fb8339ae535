"""Session token creation/verification for identities signed in through Firebase."""

from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from app.core.config import settings

# Firebase email/password constraints mirrored by the sign-in and sign-up forms.
EMAIL_MAX_LEN = 254
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128


def create_session_token(
    uid: str,
    role: str,
    email: str | None = None,
    display_name: str | None = None,
) -> str:
    """Create a JWT with sub (Firebase uid), role, profile claims and exp."""
    now = datetime.now(UTC)
    expire = now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": uid,
        "role": role,
        "email": email,
        "name": display_name,
        "exp": expire,
        "iat": now,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_session_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a session JWT; return payload (sub, role, email, name, exp, iat).
    Raises jwt.PyJWTError on invalid or expired token.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.decode(
        token,
        secret,
        algorithms=[settings.JWT_ALGORITHM],
    )
