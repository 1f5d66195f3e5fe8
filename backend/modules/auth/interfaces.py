"""
Authentication module interface.

Other modules should depend on IAuthService, not the concrete implementation.
This enables testing with mocks and future extraction to a microservice.
"""

from typing import Any, Optional, Protocol, runtime_checkable

from starlette.requests import HTTPConnection

from shared.models import AuthenticatedUser

from .models import Account, AuthResult, TokenPayload


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for authentication operations.

    This protocol defines the contract that the auth module exposes
    to other modules. Implementations must provide all these methods.
    """

    def sign_token(self, subject_id: str, subject_email: str) -> str:
        """Issue a signed token valid for seven days."""
        ...

    def verify_token(self, token: Optional[str]) -> Optional[TokenPayload]:
        """
        Verify signature and expiry.

        Returns:
            The decoded payload, or None for any kind of invalid token.
        """
        ...

    def extract_token(self, request: HTTPConnection) -> Optional[str]:
        """Read the token from the ``token`` cookie, else the Bearer header."""
        ...

    def authenticate(self, request: HTTPConnection) -> AuthResult:
        """Resolve the request's identity as a tagged result."""
        ...

    def resolve_identity(self, request: HTTPConnection) -> Optional[AuthenticatedUser]:
        """Resolve the request's identity, or None if unauthenticated."""
        ...

    def require_auth(self, request: HTTPConnection) -> AuthenticatedUser:
        """
        Resolve the request's identity.

        Raises:
            UnauthorizedError: If the request is not authenticated
        """
        ...

    def require_admin(self, request: HTTPConnection) -> AuthenticatedUser:
        """
        Resolve the request's identity and require the admin role.

        Raises:
            UnauthorizedError: If the request is not authenticated
            ForbiddenError: If the account is not an admin
        """
        ...

    def verify_ownership(self, subject_id: str, resource: Any) -> bool:
        """True iff ``resource`` exists and is owned by ``subject_id``."""
        ...

    def validate_origin(self, request: HTTPConnection) -> bool:
        """CSRF check: same-origin or an allow-listed Origin/Referer."""
        ...

    def register(self, email: str, name: str, password: str) -> Account:
        ...

    def login(self, email: str, password: str) -> Account:
        ...
