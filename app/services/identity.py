"""Firebase Authentication: email/password sign-in and sign-up, profile and account changes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx
from firebase_admin import auth as firebase_auth
from firebase_admin import exceptions as firebase_exceptions
from pydantic import BaseModel

if TYPE_CHECKING:
    import firebase_admin

    from app.core.config import Settings

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = (
    "Firebase no está configurado correctamente. "
    "Defina FIREBASE_API_KEY, FIREBASE_AUTH_DOMAIN y FIREBASE_PROJECT_ID."
)

# Identity Toolkit error messages -> Firebase client SDK error codes.
_REST_ERROR_CODES: dict[str, str] = {
    "EMAIL_NOT_FOUND": "auth/user-not-found",
    "INVALID_PASSWORD": "auth/wrong-password",
    "INVALID_LOGIN_CREDENTIALS": "auth/invalid-credential",
    "USER_DISABLED": "auth/user-disabled",
    "INVALID_EMAIL": "auth/invalid-email",
    "MISSING_EMAIL": "auth/invalid-email",
    "EMAIL_EXISTS": "auth/email-already-in-use",
    "WEAK_PASSWORD": "auth/weak-password",
    "MISSING_PASSWORD": "auth/missing-password",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "auth/too-many-requests",
    "OPERATION_NOT_ALLOWED": "auth/operation-not-allowed",
}

INTERNAL_ERROR = "auth/internal-error"
NETWORK_ERROR = "auth/network-request-failed"


class FirebaseNotConfiguredError(Exception):
    """Raised when an auth operation is invoked while Firebase is disabled."""

    def __init__(self, message: str = NOT_CONFIGURED_MESSAGE) -> None:
        self.message = message
        super().__init__(message)


class AuthProviderError(Exception):
    """Error reported by Firebase Authentication, with a client-SDK style code (auth/...)."""

    def __init__(self, code: str, message: str | None = None) -> None:
        self.code = code
        self.message = message or code
        super().__init__(self.message)


class ProviderUser(BaseModel):
    """User returned by a successful sign-in or sign-up."""

    uid: str
    email: str | None = None
    display_name: str | None = None
    id_token: str | None = None


def _error_code_from_response(response: httpx.Response) -> tuple[str, str]:
    """Extract (code, raw message) from an Identity Toolkit error body."""
    try:
        body = response.json()
    except ValueError:
        return INTERNAL_ERROR, response.text
    raw = ""
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        raw = str(body["error"].get("message") or "")
    # e.g. "WEAK_PASSWORD : Password should be at least 6 characters"
    key = raw.split(":", 1)[0].strip()
    if key in _REST_ERROR_CODES:
        return _REST_ERROR_CODES[key], raw
    if "API key not valid" in raw or key == "API_KEY_INVALID":
        return "auth/invalid-api-key", raw
    return INTERNAL_ERROR, raw


class IdentityProvider:
    """
    Thin wrapper over Firebase Authentication.

    Credential checks go through the Identity Toolkit REST API with the web API key;
    profile updates and deletion go through the admin SDK app.
    """

    def __init__(
        self,
        settings: Settings,
        app: firebase_admin.App | None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = settings.FIREBASE_API_KEY
        self._base_url = settings.IDENTITY_TOOLKIT_BASE_URL
        self._timeout = httpx.Timeout(settings.IDENTITY_REQUEST_TIMEOUT_SEC)
        self._app = app
        self._transport = transport
        self.enabled = settings.firebase_enabled and app is not None

    def _require_enabled(self) -> None:
        if not self.enabled:
            raise FirebaseNotConfiguredError()

    async def _post(self, endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self._base_url}/accounts:{endpoint}"
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(url, params={"key": self._api_key}, json=payload)
        except httpx.HTTPError as e:
            raise AuthProviderError(NETWORK_ERROR, f"Identity Toolkit unreachable: {e!s}") from e
        if response.status_code >= 400:
            code, raw = _error_code_from_response(response)
            logger.info("Identity Toolkit %s failed: %s", endpoint, raw)
            raise AuthProviderError(code, raw or code)
        try:
            data = response.json()
        except ValueError as e:
            raise AuthProviderError(INTERNAL_ERROR, f"Identity Toolkit {endpoint} returned a non-JSON body") from e
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _to_user(data: dict[str, Any]) -> ProviderUser:
        uid = data.get("localId")
        if not uid:
            raise AuthProviderError(INTERNAL_ERROR, "Identity Toolkit response has no localId")
        return ProviderUser(
            uid=uid,
            email=data.get("email"),
            display_name=data.get("displayName") or None,
            id_token=data.get("idToken"),
        )

    async def sign_in(self, email: str, password: str) -> ProviderUser:
        """Verify email/password. Raises AuthProviderError on rejection."""
        self._require_enabled()
        data = await self._post(
            "signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        return self._to_user(data)

    async def sign_up(self, email: str, password: str) -> ProviderUser:
        """Create an email/password account. Raises AuthProviderError on rejection."""
        self._require_enabled()
        data = await self._post(
            "signUp",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        return self._to_user(data)

    def update_display_name(self, uid: str, display_name: str) -> None:
        self._require_enabled()
        try:
            firebase_auth.update_user(uid, display_name=display_name, app=self._app)
        except firebase_auth.UserNotFoundError as e:
            raise AuthProviderError("auth/user-not-found", str(e)) from e
        except firebase_exceptions.FirebaseError as e:
            raise AuthProviderError(INTERNAL_ERROR, str(e)) from e

    def delete_user(self, uid: str) -> None:
        self._require_enabled()
        try:
            firebase_auth.delete_user(uid, app=self._app)
        except firebase_auth.UserNotFoundError as e:
            raise AuthProviderError("auth/user-not-found", str(e)) from e
        except firebase_exceptions.FirebaseError as e:
            raise AuthProviderError(INTERNAL_ERROR, str(e)) from e
