"""
Authentication module exceptions.

These exceptions are raised by the auth module and can be caught
by API error handlers to return appropriate HTTP responses.

Every 401 uses the same message and code regardless of what actually
failed (missing token, bad signature, expiry, deleted account), so
responses never reveal which accounts exist.
"""

from shared.exceptions import AuthenticationError, AuthorizationError, ConflictError


class UnauthorizedError(AuthenticationError):
    """Raised when a request carries no valid identity."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="UNAUTHORIZED")


class ForbiddenError(AuthorizationError):
    """Raised when an authenticated user lacks the required role or ownership."""

    def __init__(self, message: str = "Access denied"):
        super().__init__(message, code="FORBIDDEN")


class CsrfError(AuthorizationError):
    """Raised when a state-changing request comes from a disallowed origin."""

    def __init__(self, message: str = "Invalid origin"):
        super().__init__(message, code="CSRF_ERROR")


class InvalidCredentialsError(AuthenticationError):
    """Raised when login fails, whatever the reason."""

    def __init__(self):
        super().__init__("Invalid email or password", code="INVALID_CREDENTIALS")


class EmailAlreadyRegisteredError(ConflictError):
    """Raised when registering an email that already has an account."""

    def __init__(self):
        super().__init__("An account with this email already exists", code="EMAIL_TAKEN")
