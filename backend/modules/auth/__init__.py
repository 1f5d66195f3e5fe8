"""
Authentication module.

Handles token issuing and validation, identity resolution, role and
ownership checks, and CSRF origin validation.

Public API:
- IAuthService: Interface for auth operations
- Account / TokenPayload / AuthResult: Models
- Auth exceptions: UnauthorizedError, ForbiddenError, CsrfError, etc.
"""

from .interfaces import IAuthService
from .models import (
    Account,
    AccountStats,
    AuthResult,
    LoginRequest,
    RegisterRequest,
    TokenPayload,
)
from .exceptions import (
    UnauthorizedError,
    ForbiddenError,
    CsrfError,
    InvalidCredentialsError,
    EmailAlreadyRegisteredError,
)

__all__ = [
    # Interface
    "IAuthService",
    # Models
    "Account",
    "AccountStats",
    "AuthResult",
    "LoginRequest",
    "RegisterRequest",
    "TokenPayload",
    # Exceptions
    "UnauthorizedError",
    "ForbiddenError",
    "CsrfError",
    "InvalidCredentialsError",
    "EmailAlreadyRegisteredError",
]
