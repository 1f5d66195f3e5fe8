"""
Account endpoints.

Register, login, logout and "who am I". Every state-changing endpoint
passes the origin check first and the auth rate limit second, before the
body is acted on.
"""

import logging

from fastapi import APIRouter, Depends, Response, status

from modules.auth.interfaces import IAuthService
from modules.auth.models import LoginRequest, RegisterRequest
from shared.models import AuthenticatedUser

from ..dependencies import get_auth_service
from ..middleware.auth import (
    RequireAuth,
    SameOrigin,
    clear_auth_cookie,
    set_auth_cookie,
)
from ..middleware.rate_limit import rate_limit

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/register",
    response_model=AuthenticatedUser,
    status_code=status.HTTP_201_CREATED,
    dependencies=[SameOrigin, Depends(rate_limit("auth"))],
)
def register(
    body: RegisterRequest,
    response: Response,
    auth: IAuthService = Depends(get_auth_service),
) -> AuthenticatedUser:
    """
    Create an account and sign the new user in.

    Returns 409 if the email is already registered.
    """
    account = auth.register(body.email, body.name, body.password)
    set_auth_cookie(response, auth.sign_token(account.id, account.email))
    return account.to_authenticated_user()


@router.post(
    "/login",
    response_model=AuthenticatedUser,
    dependencies=[SameOrigin, Depends(rate_limit("auth"))],
)
def login(
    body: LoginRequest,
    response: Response,
    auth: IAuthService = Depends(get_auth_service),
) -> AuthenticatedUser:
    """Check credentials and set the session cookie."""
    account = auth.login(body.email, body.password)
    set_auth_cookie(response, auth.sign_token(account.id, account.email))
    logger.info("Account %s logged in", account.id)
    return account.to_authenticated_user()


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[SameOrigin],
)
def logout() -> Response:
    """
    Clear the session cookie.

    Tokens are not revoked server-side; a copied token stays valid until
    it expires.
    """
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    clear_auth_cookie(response)
    return response


@router.get("/me", response_model=AuthenticatedUser)
def me(user: AuthenticatedUser = RequireAuth) -> AuthenticatedUser:
    """Return the identity behind the request's token."""
    return user
