"""Unit tests for app.services.session: sign-in/up, listeners, sign-out and error messages."""

import asyncio
import unittest
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

from app.schemas.auth import Identity
from app.schemas.user import AppUser
from app.services import users
from app.services.identity import AuthProviderError, FirebaseNotConfiguredError, ProviderUser
from app.services.session import SessionContext, login_error_message, register_error_message


def _provider(enabled: bool = True) -> MagicMock:
    provider = MagicMock()
    provider.enabled = enabled
    provider.sign_in = AsyncMock()
    provider.sign_up = AsyncMock()
    return provider


def _profile(uid: str, role: str = "user", display_name: str | None = None) -> AppUser:
    return AppUser(
        uid=uid,
        email=f"{uid}@example.com",
        display_name=display_name,
        role=role,
        created_at=datetime(2024, 1, 1, tzinfo=UTC),
    )


class TestErrorMessages(unittest.TestCase):
    """Provider codes map to localized form messages."""

    def test_wrong_credentials(self) -> None:
        for code in ("auth/user-not-found", "auth/wrong-password", "auth/invalid-credential"):
            self.assertEqual(
                login_error_message(AuthProviderError(code)),
                "Correo electrónico o contraseña incorrectos.",
            )

    def test_login_fallback(self) -> None:
        self.assertEqual(
            login_error_message(AuthProviderError("auth/internal-error")),
            "Error al iniciar sesión. Por favor, verifica tus credenciales.",
        )

    def test_email_in_use(self) -> None:
        self.assertEqual(
            register_error_message(AuthProviderError("auth/email-already-in-use")),
            "Este correo electrónico ya está registrado.",
        )

    def test_register_fallback(self) -> None:
        self.assertEqual(
            register_error_message(RuntimeError("boom")),
            "Error al registrar. Por favor, inténtalo de nuevo.",
        )

    def test_not_configured_message_passes_through(self) -> None:
        err = FirebaseNotConfiguredError()
        self.assertEqual(login_error_message(err), err.message)
        self.assertEqual(register_error_message(err), err.message)


class TestLoginAndRegister(unittest.TestCase):
    """login/register load or create the profile and issue a session token."""

    @patch("app.services.users.get_user_profile")
    def test_login_uses_profile_role(self, mock_get_profile: MagicMock) -> None:
        provider = _provider()
        provider.sign_in.return_value = ProviderUser(uid="u1", email="u1@example.com")
        mock_get_profile.return_value = _profile("u1", role="admin", display_name="Ana")
        session = SessionContext(provider, MagicMock())
        seen: list[Identity | None] = []
        session.subscribe(seen.append)

        result = asyncio.run(session.login("u1@example.com", "secret1"))

        self.assertEqual(result.identity.role, "admin")
        self.assertEqual(result.identity.display_name, "Ana")
        self.assertEqual(result.redirect_to, "/")
        self.assertEqual(session.current_identity(result.token).uid, "u1")
        self.assertEqual(seen, [result.identity])

    def test_login_without_firestore_defaults_to_user(self) -> None:
        provider = _provider()
        provider.sign_in.return_value = ProviderUser(uid="u1", email="u1@example.com")
        result = asyncio.run(SessionContext(provider, None).login("u1@example.com", "secret1"))
        self.assertEqual(result.identity.role, "user")

    def test_login_rejection_propagates_unchanged(self) -> None:
        provider = _provider()
        error = AuthProviderError("auth/invalid-credential")
        provider.sign_in.side_effect = error
        session = SessionContext(provider, None)
        seen: list[Identity | None] = []
        session.subscribe(seen.append)
        with self.assertRaises(AuthProviderError) as ctx:
            asyncio.run(session.login("u1@example.com", "wrong-pw"))
        self.assertIs(ctx.exception, error)
        self.assertEqual(seen, [])

    @patch("app.services.users.create_user_profile")
    def test_register_creates_profile(self, mock_create: MagicMock) -> None:
        provider = _provider()
        provider.sign_up.return_value = ProviderUser(uid="n1", email="n1@example.com")
        mock_create.return_value = _profile("n1")
        db = MagicMock()
        result = asyncio.run(SessionContext(provider, db).register("n1@example.com", "secret1"))
        mock_create.assert_called_once_with(db, "n1", "n1@example.com", None)
        self.assertEqual(result.identity.role, "user")
        self.assertEqual(result.redirect_to, "/")


class TestSessionLifecycle(unittest.TestCase):
    """Listeners, token decoding, sign-out and account changes."""

    def test_unsubscribe_stops_notifications(self) -> None:
        session = SessionContext(_provider(), None)
        seen: list[Identity | None] = []
        unsubscribe = session.subscribe(seen.append)
        unsubscribe()
        unsubscribe()
        session.logout()
        self.assertEqual(seen, [])

    def test_logout_notifies_and_returns_sign_in(self) -> None:
        session = SessionContext(_provider(), None)
        seen: list[Identity | None] = []
        session.subscribe(seen.append)
        self.assertEqual(session.logout(), "/auth/login")
        self.assertEqual(seen, [None])

    def test_logout_when_disabled(self) -> None:
        session = SessionContext(_provider(enabled=False), None)
        self.assertEqual(session.logout(), "/auth/login")

    def test_invalid_token(self) -> None:
        session = SessionContext(_provider(), None)
        self.assertIsNone(session.current_identity(None))
        self.assertIsNone(session.current_identity("not-a-jwt"))

    @patch("app.services.users.update_user_profile")
    @patch("app.services.users.get_user_profile")
    def test_update_profile_skips_unchanged_name(
        self, mock_get: MagicMock, mock_update: MagicMock
    ) -> None:
        provider = _provider()
        mock_get.return_value = _profile("u1", display_name="Ana")
        session = SessionContext(provider, MagicMock())
        identity = Identity(uid="u1", display_name="Ana")
        profile = session.update_profile(identity, "Ana", "Riegos SA")
        provider.update_display_name.assert_not_called()
        mock_update.assert_called_once()
        self.assertEqual(profile.company, "Riegos SA")

    @patch("app.services.users.update_user_profile")
    @patch("app.services.users.get_user_profile")
    def test_update_profile_writes_document_before_rename(
        self, mock_get: MagicMock, mock_update: MagicMock
    ) -> None:
        provider = _provider()
        order: list[str] = []
        mock_update.side_effect = lambda *args: order.append("profile")
        provider.update_display_name.side_effect = lambda *args: order.append("auth")
        mock_get.return_value = _profile("u1", display_name="Ana")
        session = SessionContext(provider, MagicMock())
        session.update_profile(Identity(uid="u1", display_name="Ana"), "Ana María", None)
        provider.update_display_name.assert_called_once_with("u1", "Ana María")
        self.assertEqual(order, ["profile", "auth"])

    @patch("app.services.users.update_user_profile")
    @patch("app.services.users.get_user_profile")
    def test_update_profile_failed_write_keeps_auth_name(
        self, mock_get: MagicMock, mock_update: MagicMock
    ) -> None:
        provider = _provider()
        mock_get.return_value = _profile("u1", display_name="Ana")
        mock_update.side_effect = users.UserStoreError()
        session = SessionContext(provider, MagicMock())
        with self.assertRaises(users.UserStoreError):
            session.update_profile(Identity(uid="u1", display_name="Ana"), "Ana María", None)
        provider.update_display_name.assert_not_called()

    @patch("app.services.users.get_user_profile")
    def test_login_profile_read_failure_propagates(self, mock_get_profile: MagicMock) -> None:
        provider = _provider()
        provider.sign_in.return_value = ProviderUser(uid="u1", email="u1@example.com")
        mock_get_profile.side_effect = users.UserStoreError()
        session = SessionContext(provider, MagicMock())
        seen: list[Identity | None] = []
        session.subscribe(seen.append)
        with self.assertRaises(users.UserStoreError):
            asyncio.run(session.login("u1@example.com", "secret1"))
        self.assertEqual(seen, [])

    def test_update_profile_when_disabled(self) -> None:
        session = SessionContext(_provider(enabled=False), None)
        with self.assertRaises(FirebaseNotConfiguredError):
            session.update_profile(Identity(uid="u1"), "Ana", None)

    @patch("app.services.users.delete_user_profile")
    def test_delete_account(self, mock_delete: MagicMock) -> None:
        provider = _provider()
        db = MagicMock()
        session = SessionContext(provider, db)
        target = session.delete_account(Identity(uid="u1"))
        mock_delete.assert_called_once_with(db, "u1")
        provider.delete_user.assert_called_once_with("u1")
        self.assertEqual(target, "/auth/login")


if __name__ == "__main__":
    unittest.main()
