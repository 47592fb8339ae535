"""Session context: sign-in, sign-up, sign-out and account changes for one application instance."""

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

import jwt
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from app.core.guards import DASHBOARD_PATH, SIGN_IN_PATH
from app.core.security import create_session_token, decode_session_token
from app.schemas.auth import Identity
from app.schemas.user import AppUser
from app.services import users
from app.services.identity import (
    AuthProviderError,
    FirebaseNotConfiguredError,
    IdentityProvider,
)

if TYPE_CHECKING:
    from google.cloud.firestore import Client

logger = logging.getLogger(__name__)

IdentityListener = Callable[[Identity | None], None]

# Localized messages for the sign-in and sign-up forms, keyed by provider error code.
_LOGIN_MESSAGES: dict[str, str] = {
    "auth/user-not-found": "Correo electrónico o contraseña incorrectos.",
    "auth/wrong-password": "Correo electrónico o contraseña incorrectos.",
    "auth/invalid-credential": "Correo electrónico o contraseña incorrectos.",
    "auth/invalid-email": "El formato del correo electrónico no es válido.",
    "auth/user-disabled": "Esta cuenta ha sido deshabilitada.",
    "auth/too-many-requests": "Demasiados intentos. Inténtalo de nuevo más tarde.",
}
_REGISTER_MESSAGES: dict[str, str] = {
    "auth/email-already-in-use": "Este correo electrónico ya está registrado.",
    "auth/invalid-email": "El formato del correo electrónico no es válido.",
    "auth/weak-password": "La contraseña es demasiado débil.",
}
_LOGIN_FALLBACK = "Error al iniciar sesión. Por favor, verifica tus credenciales."
_REGISTER_FALLBACK = "Error al registrar. Por favor, inténtalo de nuevo."


def login_error_message(error: Exception) -> str:
    """User-facing message for a failed sign-in."""
    if isinstance(error, FirebaseNotConfiguredError):
        return error.message
    if isinstance(error, AuthProviderError):
        return _LOGIN_MESSAGES.get(error.code, _LOGIN_FALLBACK)
    return _LOGIN_FALLBACK


def register_error_message(error: Exception) -> str:
    """User-facing message for a failed sign-up."""
    if isinstance(error, FirebaseNotConfiguredError):
        return error.message
    if isinstance(error, AuthProviderError):
        return _REGISTER_MESSAGES.get(error.code, _REGISTER_FALLBACK)
    return _REGISTER_FALLBACK


class SessionResult(BaseModel):
    """Outcome of a successful sign-in or sign-up."""

    identity: Identity
    token: str
    redirect_to: str = DASHBOARD_PATH


class SessionContext:
    """
    Identity state for one application instance.

    Created in the application lifespan and closed on shutdown. The caller's
    identity is resolved per request from its session token; listeners are told
    about every identity change made through this context.
    """

    def __init__(self, provider: IdentityProvider, db: "Client | None") -> None:
        self._provider = provider
        self._db = db
        self._listeners: list[IdentityListener] = []

    @property
    def enabled(self) -> bool:
        return self._provider.enabled

    def subscribe(self, listener: IdentityListener) -> Callable[[], None]:
        """Register listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, identity: Identity | None) -> None:
        for listener in list(self._listeners):
            listener(identity)

    def close(self) -> None:
        self._listeners.clear()

    def current_identity(self, token: str | None) -> Identity | None:
        """Identity carried by a session token, or None when absent, invalid or expired."""
        if not token:
            return None
        try:
            payload = decode_session_token(token)
        except jwt.PyJWTError:
            return None
        sub = payload.get("sub")
        if not sub:
            return None
        return Identity(
            uid=str(sub),
            email=payload.get("email"),
            display_name=payload.get("name"),
            role=payload.get("role") or users.DEFAULT_ROLE,
        )

    def _start_session(self, identity: Identity) -> SessionResult:
        token = create_session_token(
            identity.uid,
            identity.role,
            email=identity.email,
            display_name=identity.display_name,
        )
        self._notify(identity)
        return SessionResult(identity=identity, token=token)

    async def _load_profile(self, uid: str) -> AppUser | None:
        if self._db is None:
            return None
        return await run_in_threadpool(users.get_user_profile, self._db, uid)

    async def login(self, email: str, password: str) -> SessionResult:
        """Sign in; provider errors and users.UserStoreError propagate unchanged."""
        try:
            user = await self._provider.sign_in(email, password)
        except (AuthProviderError, FirebaseNotConfiguredError) as e:
            logger.warning("Sign-in failed for %s: %s", email, e)
            raise
        profile = await self._load_profile(user.uid)
        identity = Identity(
            uid=user.uid,
            email=user.email or email,
            display_name=(profile.display_name if profile else None) or user.display_name,
            role=profile.role if profile else users.DEFAULT_ROLE,
        )
        return self._start_session(identity)

    async def register(self, email: str, password: str) -> SessionResult:
        """Sign up and create the profile document with the default role."""
        try:
            user = await self._provider.sign_up(email, password)
        except (AuthProviderError, FirebaseNotConfiguredError) as e:
            logger.warning("Sign-up failed for %s: %s", email, e)
            raise
        profile = None
        if self._db is not None:
            profile = await run_in_threadpool(
                users.create_user_profile, self._db, user.uid, user.email or email, user.display_name
            )
        identity = Identity(
            uid=user.uid,
            email=user.email or email,
            display_name=user.display_name,
            role=profile.role if profile else users.DEFAULT_ROLE,
        )
        return self._start_session(identity)

    def logout(self, identity: Identity | None = None) -> str:
        """End the session and return where the client goes next."""
        if not self.enabled:
            logger.warning("Firebase is not configured; session closed locally.")
        self._notify(None)
        return SIGN_IN_PATH

    def update_profile(self, identity: Identity, display_name: str, company: str | None) -> AppUser:
        """
        Update the profile document, then the auth display name when it changed.

        A failed profile write (users.UserStoreError) leaves the auth identity untouched.
        """
        if not self.enabled:
            raise FirebaseNotConfiguredError()
        profile = users.get_user_profile(self._db, identity.uid)
        if profile is None:
            raise users.UserNotFoundError(identity.uid)
        users.update_user_profile(self._db, identity.uid, display_name, company)
        if identity.display_name != display_name:
            self._provider.update_display_name(identity.uid, display_name)
        self._notify(identity.model_copy(update={"display_name": display_name}))
        return profile.model_copy(update={"display_name": display_name, "company": company or None})

    def delete_account(self, identity: Identity) -> str:
        """Delete the caller's profile and authentication identity, then sign out."""
        if not self.enabled:
            raise FirebaseNotConfiguredError()
        try:
            users.delete_user_profile(self._db, identity.uid)
        except users.UserNotFoundError:
            logger.info("No profile document for uid=%s; deleting credential only", identity.uid)
        self._provider.delete_user(identity.uid)
        return self.logout(identity)


def log_identity_change(identity: Identity | None) -> None:
    """Session listener that records identity changes."""
    if identity is None:
        logger.info("Session identity cleared")
    else:
        logger.info("Session identity set: uid=%s role=%s", identity.uid, identity.role)
