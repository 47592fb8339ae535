"""Route protection as plain decisions, independent of FastAPI.

evaluate_access answers "may this identity see this view?" and
route_decision answers "should this path redirect?". The API layer turns
the decisions into HTTP responses.
"""

from dataclasses import dataclass
from typing import Literal, Protocol
from urllib.parse import urlencode

SIGN_IN_PATH = "/auth/login"
SIGN_UP_PATH = "/auth/register"
DASHBOARD_PATH = "/"

# Paths that require authentication (prefix match, "/" exact).
PROTECTED_PATHS = ("/", "/productos", "/pedidos", "/blog", "/settings", "/admin")
# Paths only meaningful to anonymous visitors.
AUTH_PATHS = (SIGN_IN_PATH, SIGN_UP_PATH)


class HasRole(Protocol):
    role: str


@dataclass(frozen=True)
class Allow:
    pass


@dataclass(frozen=True)
class Pending:
    """Identity is still loading; render a spinner."""


@dataclass(frozen=True)
class Redirect:
    target: str


@dataclass(frozen=True)
class Denied:
    """Render an access-denied panel instead of redirecting."""

    reason: str = "No tienes permisos para acceder a esta sección."


AccessDecision = Allow | Pending | Redirect | Denied


def sign_in_redirect(return_path: str | None) -> Redirect:
    """Redirect to sign-in, carrying the path to return to after login."""
    if not return_path:
        return Redirect(SIGN_IN_PATH)
    return Redirect(f"{SIGN_IN_PATH}?{urlencode({'redirect': return_path})}")


def evaluate_access(
    identity: HasRole | None,
    required_role: str | None = None,
    *,
    loading: bool = False,
    return_path: str | None = None,
    on_forbidden: Literal["redirect", "deny"] = "redirect",
) -> AccessDecision:
    """
    Decide access for a view.

    Missing identity redirects to sign-in; a role mismatch redirects to the
    dashboard, or is Denied when the view shows its own access-denied panel.
    """
    if loading:
        return Pending()
    if identity is None:
        return sign_in_redirect(return_path)
    if required_role is not None and identity.role != required_role:
        if on_forbidden == "deny":
            return Denied()
        return Redirect(DASHBOARD_PATH)
    return Allow()


def _is_protected(pathname: str) -> bool:
    return any(
        pathname == path or (path != "/" and pathname.startswith(path))
        for path in PROTECTED_PATHS
    )


def route_decision(pathname: str, authenticated: bool) -> Allow | Redirect:
    """Path-level protection applied before any view renders."""
    if authenticated:
        if any(pathname.startswith(path) for path in AUTH_PATHS):
            return Redirect(DASHBOARD_PATH)
        return Allow()
    if _is_protected(pathname):
        return sign_in_redirect(pathname)
    return Allow()
