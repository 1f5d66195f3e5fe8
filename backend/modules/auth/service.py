"""
Authentication service implementation.

Issues and verifies HS256 tokens, resolves them to persisted accounts,
and provides the role, ownership and origin checks used by request gates.
"""

import logging
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional
from urllib.parse import urlsplit

import jwt
from pydantic import ValidationError as PydanticValidationError
from starlette.requests import HTTPConnection

from shared.config import Settings, get_settings
from shared.models import AuthenticatedUser

from .exceptions import (
    EmailAlreadyRegisteredError,
    ForbiddenError,
    InvalidCredentialsError,
    UnauthorizedError,
)
from .interfaces import IAuthService
from .models import Account, AuthResult, TokenPayload
from .passwords import DUMMY_HASH, hash_password, verify_password
from .repository import AccountRepository


TOKEN_ALGORITHM = "HS256"
TOKEN_LIFETIME = timedelta(days=7)
TOKEN_COOKIE_NAME = "token"


class AuthService(IAuthService):
    """
    Implementation of the authentication service.

    Stateless apart from the account lookup, which goes through the
    shared connection manager. Safe to share across threads.
    """

    def __init__(
        self,
        accounts: Optional[AccountRepository] = None,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._settings = settings or get_settings()
        self._accounts = accounts or AccountRepository()
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._logger = logger or logging.getLogger(__name__)

    # -------------------------------------------------------------------------
    # Tokens
    # -------------------------------------------------------------------------

    def sign_token(self, subject_id: str, subject_email: str) -> str:
        now = self._clock()
        payload = {
            "sub": str(subject_id),
            "email": subject_email,
            "iat": int(now.timestamp()),
            "exp": int((now + TOKEN_LIFETIME).timestamp()),
        }
        return jwt.encode(payload, self._settings.jwt_secret, algorithm=TOKEN_ALGORITHM)

    def verify_token(self, token: Optional[str]) -> Optional[TokenPayload]:
        """
        Verify a token's signature and expiry.

        Only HS256 is accepted. Every failure returns None so callers treat
        all invalid tokens the same way.
        """
        if not token:
            return None

        try:
            decoded = jwt.decode(
                token,
                self._settings.jwt_secret,
                algorithms=[TOKEN_ALGORITHM],
                options={"require": ["sub", "exp", "iat"]},
            )
            return TokenPayload(**decoded)
        except jwt.ExpiredSignatureError:
            self._logger.debug("Rejected expired token")
        except jwt.InvalidTokenError as e:
            self._logger.warning("Rejected invalid token: %s", e)
        except PydanticValidationError:
            self._logger.warning("Rejected token with malformed claims")
        return None

    def extract_token(self, request: HTTPConnection) -> Optional[str]:
        cookie_token = request.cookies.get(TOKEN_COOKIE_NAME)
        if cookie_token:
            return cookie_token

        authorization = request.headers.get("authorization", "")
        if authorization.startswith("Bearer "):
            return authorization[len("Bearer "):].strip() or None

        return None

    # -------------------------------------------------------------------------
    # Identity
    # -------------------------------------------------------------------------

    def authenticate(self, request: HTTPConnection) -> AuthResult:
        payload = self.verify_token(self.extract_token(request))
        if payload is None:
            return AuthResult.unauthorized()

        account = self._accounts.get_by_id(payload.sub)
        if account is None or not account.is_active:
            return AuthResult.unauthorized()

        return AuthResult.success(account.to_authenticated_user())

    def resolve_identity(self, request: HTTPConnection) -> Optional[AuthenticatedUser]:
        return self.authenticate(request).user

    def require_auth(self, request: HTTPConnection) -> AuthenticatedUser:
        result = self.authenticate(request)
        if not result.ok or result.user is None:
            raise UnauthorizedError()
        return result.user

    def require_admin(self, request: HTTPConnection) -> AuthenticatedUser:
        user = self.require_auth(request)

        # Re-read so a demotion takes effect on the very next request
        account = self._accounts.get_by_id(user.id)
        if account is None or not account.is_active:
            raise UnauthorizedError()
        if account.role != "admin":
            self._logger.warning("Non-admin %s attempted an admin action", user.id)
            raise ForbiddenError("Admin access required")

        return account.to_authenticated_user()

    @staticmethod
    def verify_ownership(subject_id: str, resource: Any) -> bool:
        if resource is None:
            return False
        if isinstance(resource, Mapping):
            owner = resource.get("owner_id", resource.get("owner"))
        else:
            owner = getattr(resource, "owner_id", getattr(resource, "owner", None))
        return owner is not None and str(owner) == str(subject_id)

    def validate_origin(self, request: HTTPConnection) -> bool:
        origin = request.headers.get("origin")
        referer = request.headers.get("referer")

        # No Origin and no Referer: same-origin navigation or a non-browser client
        if not origin and not referer:
            return True

        allowed = self._settings.allowed_origins
        if origin and origin.rstrip("/") in allowed:
            return True

        if referer:
            parts = urlsplit(referer)
            if not parts.scheme or not parts.netloc:
                return False
            return f"{parts.scheme}://{parts.netloc}" in allowed

        return False

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    def register(self, email: str, name: str, password: str) -> Account:
        """
        Create a regular user account.

        Raises:
            EmailAlreadyRegisteredError: If the email is taken.
        """
        if self._accounts.get_by_email(email) is not None:
            raise EmailAlreadyRegisteredError()
        account = self._accounts.create(email, name, hash_password(password))
        self._logger.info("Registered account %s", account.id)
        return account

    def login(self, email: str, password: str) -> Account:
        """
        Check credentials.

        Raises:
            InvalidCredentialsError: For unknown email, wrong password or
                deactivated account alike.
        """
        account = self._accounts.get_by_email(email)
        if account is None:
            verify_password(password, DUMMY_HASH)
            raise InvalidCredentialsError()
        if not verify_password(password, account.password_hash) or not account.is_active:
            raise InvalidCredentialsError()
        return account

