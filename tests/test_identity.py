"""Unit tests for app.services.identity: Identity Toolkit calls and admin SDK error mapping."""

import asyncio
import json
import unittest
from unittest.mock import MagicMock, patch

import httpx

from app.core.config import Settings
from app.services.identity import (
    AuthProviderError,
    FirebaseNotConfiguredError,
    IdentityProvider,
)


def _settings(**overrides: object) -> Settings:
    values = {
        "FIREBASE_API_KEY": "web-key",
        "FIREBASE_AUTH_DOMAIN": "demo.firebaseapp.com",
        "FIREBASE_PROJECT_ID": "demo",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def _error_transport(message: str, status_code: int = 400) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json={"error": {"code": status_code, "message": message}})

    return httpx.MockTransport(handler)


class TestSignInSignUp(unittest.TestCase):
    """REST calls carry the API key and map error messages to auth/ codes."""

    def test_sign_in_success(self) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(
                200,
                json={"localId": "u1", "email": "a@example.com", "idToken": "tok", "displayName": ""},
            )

        provider = IdentityProvider(_settings(), MagicMock(), transport=httpx.MockTransport(handler))
        user = asyncio.run(provider.sign_in("a@example.com", "secret1"))

        self.assertEqual(user.uid, "u1")
        self.assertIsNone(user.display_name)
        self.assertTrue(captured[0].url.path.endswith("/accounts:signInWithPassword"))
        self.assertEqual(captured[0].url.params["key"], "web-key")
        self.assertEqual(json.loads(captured[0].content)["returnSecureToken"], True)

    def test_invalid_credentials(self) -> None:
        provider = IdentityProvider(
            _settings(), MagicMock(), transport=_error_transport("INVALID_LOGIN_CREDENTIALS")
        )
        with self.assertRaises(AuthProviderError) as ctx:
            asyncio.run(provider.sign_in("a@example.com", "wrong-pw"))
        self.assertEqual(ctx.exception.code, "auth/invalid-credential")

    def test_weak_password_with_detail(self) -> None:
        provider = IdentityProvider(
            _settings(),
            MagicMock(),
            transport=_error_transport("WEAK_PASSWORD : Password should be at least 6 characters"),
        )
        with self.assertRaises(AuthProviderError) as ctx:
            asyncio.run(provider.sign_up("a@example.com", "123456"))
        self.assertEqual(ctx.exception.code, "auth/weak-password")

    def test_email_exists(self) -> None:
        provider = IdentityProvider(_settings(), MagicMock(), transport=_error_transport("EMAIL_EXISTS"))
        with self.assertRaises(AuthProviderError) as ctx:
            asyncio.run(provider.sign_up("a@example.com", "secret1"))
        self.assertEqual(ctx.exception.code, "auth/email-already-in-use")

    def test_unknown_error(self) -> None:
        provider = IdentityProvider(_settings(), MagicMock(), transport=_error_transport("SOMETHING_NEW", 500))
        with self.assertRaises(AuthProviderError) as ctx:
            asyncio.run(provider.sign_in("a@example.com", "secret1"))
        self.assertEqual(ctx.exception.code, "auth/internal-error")

    def test_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        provider = IdentityProvider(_settings(), MagicMock(), transport=httpx.MockTransport(handler))
        with self.assertRaises(AuthProviderError) as ctx:
            asyncio.run(provider.sign_in("a@example.com", "secret1"))
        self.assertEqual(ctx.exception.code, "auth/network-request-failed")

    def test_non_json_success_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>proxy page</html>")

        provider = IdentityProvider(_settings(), MagicMock(), transport=httpx.MockTransport(handler))
        with self.assertRaises(AuthProviderError) as ctx:
            asyncio.run(provider.sign_in("a@example.com", "secret1"))
        self.assertEqual(ctx.exception.code, "auth/internal-error")

    def test_disabled_without_config(self) -> None:
        provider = IdentityProvider(_settings(FIREBASE_API_KEY=""), None)
        self.assertFalse(provider.enabled)
        with self.assertRaises(FirebaseNotConfiguredError):
            asyncio.run(provider.sign_in("a@example.com", "secret1"))


class TestAdminCalls(unittest.TestCase):
    """Display-name updates and deletion go through the admin SDK."""

    @patch("app.services.identity.firebase_auth.update_user")
    def test_update_display_name(self, mock_update: MagicMock) -> None:
        app = MagicMock()
        IdentityProvider(_settings(), app).update_display_name("u1", "Ana")
        mock_update.assert_called_once_with("u1", display_name="Ana", app=app)

    @patch("app.services.identity.firebase_auth.delete_user")
    def test_delete_user(self, mock_delete: MagicMock) -> None:
        app = MagicMock()
        IdentityProvider(_settings(), app).delete_user("u1")
        mock_delete.assert_called_once_with("u1", app=app)

    def test_delete_when_disabled(self) -> None:
        with self.assertRaises(FirebaseNotConfiguredError):
            IdentityProvider(_settings(), None).delete_user("u1")


if __name__ == "__main__":
    unittest.main()
