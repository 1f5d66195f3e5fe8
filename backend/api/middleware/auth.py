"""
Authentication and CSRF request gates.

Thin FastAPI adapters over IAuthService. Tokens are read from the ``token``
cookie first and the ``Authorization: Bearer`` header second.

These dependencies are plain ``def`` functions: account lookups hit the
database synchronously, so FastAPI runs them in its threadpool.
"""

from fastapi import Depends, Request, Response

from modules.auth.exceptions import CsrfError
from modules.auth.interfaces import IAuthService
from modules.auth.service import TOKEN_COOKIE_NAME, TOKEN_LIFETIME
from shared.config import get_settings
from shared.models import AuthenticatedUser

from ..dependencies import get_auth_service


def get_current_user(
    request: Request,
    auth: IAuthService = Depends(get_auth_service),
) -> AuthenticatedUser:
    """
    Dependency that requires authentication.

    Use this for endpoints that require a logged-in user.

    Usage:
        @router.get("/protected")
        async def protected_route(user: AuthenticatedUser = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    return auth.require_auth(request)


def require_admin(
    request: Request,
    auth: IAuthService = Depends(get_auth_service),
) -> AuthenticatedUser:
    """Dependency that requires an active admin account."""
    return auth.require_admin(request)


def require_same_origin(
    request: Request,
    auth: IAuthService = Depends(get_auth_service),
) -> None:
    """Reject state-changing requests whose Origin/Referer is not allow-listed."""
    if not auth.validate_origin(request):
        raise CsrfError()


def set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=TOKEN_COOKIE_NAME,
        value=token,
        max_age=int(TOKEN_LIFETIME.total_seconds()),
        path="/",
        httponly=True,
        secure=get_settings().is_production,
        samesite="lax",
    )


def clear_auth_cookie(response: Response) -> None:
    response.set_cookie(
        key=TOKEN_COOKIE_NAME,
        value="",
        max_age=0,
        path="/",
        httponly=True,
        secure=get_settings().is_production,
        samesite="lax",
    )


# Type aliases for cleaner route definitions
RequireAuth = Depends(get_current_user)
RequireAdmin = Depends(require_admin)
SameOrigin = Depends(require_same_origin)
