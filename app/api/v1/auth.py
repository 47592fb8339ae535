"""Sign-in, sign-up and sign-out routes plus the identity and role guard dependencies."""

from collections.abc import Callable
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import settings
from app.core.firebase import get_firestore
from app.core.guards import Allow, Denied, Redirect, evaluate_access, route_decision
from app.schemas.auth import (
    Identity,
    LoginRequest,
    LogoutResponse,
    RegisterRequest,
    RouteCheckResponse,
    SessionResponse,
)
from app.services import users
from app.services.identity import AuthProviderError, FirebaseNotConfiguredError
from app.services.session import (
    SessionContext,
    SessionResult,
    login_error_message,
    register_error_message,
)

router = APIRouter()
security = HTTPBearer(auto_error=False)

# Provider error codes that mean "bad input" rather than "bad credentials".
_REGISTER_CONFLICT_CODES = frozenset({"auth/email-already-in-use"})
_INVALID_INPUT_CODES = frozenset({"auth/invalid-email", "auth/weak-password", "auth/missing-password"})


def get_session(request: Request) -> SessionContext:
    """Dependency: the session context created in the application lifespan."""
    return request.app.state.session


def get_current_identity(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    session: Annotated[SessionContext, Depends(get_session)],
) -> Identity | None:
    """Dependency: identity from the Bearer token or the session cookie, else None."""
    token = credentials.credentials if credentials else request.cookies.get(settings.SESSION_COOKIE_NAME)
    return session.current_identity(token)


def _raise_for_decision(decision: Allow | Redirect | Denied) -> None:
    if isinstance(decision, Allow):
        return
    if isinstance(decision, Denied):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"message": decision.reason},
        )
    if decision.target.startswith("/auth/login"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "Not authenticated", "redirect": decision.target},
            headers={"WWW-Authenticate": "Bearer"},
        )
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail={"message": "Admin access required", "redirect": decision.target},
    )


def require_identity(view_path: str) -> Callable[..., Identity]:
    """Dependency factory: require a signed-in caller; view_path is where sign-in returns to."""

    def dependency(
        identity: Annotated[Identity | None, Depends(get_current_identity)],
    ) -> Identity:
        _raise_for_decision(evaluate_access(identity, return_path=view_path))
        return identity

    return dependency


def require_admin(
    view_path: str,
    on_forbidden: Literal["redirect", "deny"] = "redirect",
) -> Callable[..., Identity]:
    """
    Dependency factory: require role 'admin'.

    The role is re-read from the caller's profile when Firestore is available, so
    a role change takes effect without signing in again.
    """

    def dependency(
        identity: Annotated[Identity | None, Depends(get_current_identity)],
        db: Annotated[object, Depends(get_firestore)],
    ) -> Identity:
        if identity is not None and db is not None:
            try:
                profile = users.get_user_profile(db, identity.uid)
            except users.UserStoreError as e:
                raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message) from e
            identity = identity.model_copy(update={"role": profile.role if profile else users.DEFAULT_ROLE})
        decision = evaluate_access(
            identity, users.ADMIN_ROLE, return_path=view_path, on_forbidden=on_forbidden
        )
        _raise_for_decision(decision)
        return identity

    return dependency


def _session_response(response: Response, result: SessionResult, message: str) -> SessionResponse:
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        result.token,
        max_age=settings.JWT_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
        secure=settings.APP_ENV == "prod",
    )
    return SessionResponse(
        access_token=result.token,
        identity=result.identity,
        redirect_to=result.redirect_to,
        message=message,
    )


@router.post("/login", response_model=SessionResponse)
async def login(
    body: LoginRequest,
    response: Response,
    session: Annotated[SessionContext, Depends(get_session)],
) -> SessionResponse:
    """
    Sign in with email and password; returns a session token and sets the session cookie.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    try:
        result = await session.login(body.email, body.password)
    except (FirebaseNotConfiguredError, users.UserStoreError) as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message) from e
    except AuthProviderError as e:
        code = (
            status.HTTP_422_UNPROCESSABLE_ENTITY
            if e.code in _INVALID_INPUT_CODES
            else status.HTTP_401_UNAUTHORIZED
        )
        raise HTTPException(status_code=code, detail=login_error_message(e)) from e
    return _session_response(response, result, "Has iniciado sesión correctamente.")


@router.post("/register", response_model=SessionResponse, status_code=201)
async def register(
    body: RegisterRequest,
    response: Response,
    session: Annotated[SessionContext, Depends(get_session)],
) -> SessionResponse:
    """Create an account, its profile with role 'user', and a session."""
    try:
        result = await session.register(body.email, body.password)
    except (FirebaseNotConfiguredError, users.UserStoreError) as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message) from e
    except AuthProviderError as e:
        if e.code in _REGISTER_CONFLICT_CODES:
            code = status.HTTP_409_CONFLICT
        elif e.code in _INVALID_INPUT_CODES:
            code = status.HTTP_422_UNPROCESSABLE_ENTITY
        else:
            code = status.HTTP_502_BAD_GATEWAY
        raise HTTPException(status_code=code, detail=register_error_message(e)) from e
    return _session_response(response, result, "Tu cuenta ha sido creada. Bienvenido a Bluefitt Connect.")


@router.post("/logout", response_model=LogoutResponse)
def logout(
    response: Response,
    session: Annotated[SessionContext, Depends(get_session)],
    identity: Annotated[Identity | None, Depends(get_current_identity)],
) -> LogoutResponse:
    """Clear the session cookie. Works even when Firebase is not configured."""
    target = session.logout(identity)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return LogoutResponse(redirect_to=target, message="Sesión cerrada.")


@router.get("/me", response_model=Identity)
def me(identity: Annotated[Identity, Depends(require_identity("/"))]) -> Identity:
    """Return the signed-in identity."""
    return identity



@router.get("/route-check", response_model=RouteCheckResponse)
def route_check(
    identity: Annotated[Identity | None, Depends(get_current_identity)],
    path: Annotated[str, Query(min_length=1, max_length=2048)] = "/",
) -> RouteCheckResponse:
    """Path-level protection for the front-end router."""
    decision = route_decision(path, authenticated=identity is not None)
    if isinstance(decision, Redirect):
        return RouteCheckResponse(path=path, allowed=False, redirect_to=decision.target)
    return RouteCheckResponse(path=path, allowed=True)
