"""
Base exception classes for the RelayDrive backend.

Each module should define its own exceptions that inherit from these bases.
Every exception carries an HTTP status and a stable machine-readable code so
the API layer can render a uniform error envelope without string-matching.
"""

from typing import Optional, Any


class DriveError(Exception):
    """
    Base exception for all RelayDrive errors.

    All custom exceptions should inherit from this class.
    """

    status_code: int = 500
    default_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to the error envelope used in API responses."""
        body: dict[str, Any] = {
            "error": self.message,
            "code": self.code,
        }
        if self.details:
            body["details"] = self.details
        return body


class ConfigurationError(DriveError):
    """Environment configuration is missing or invalid."""

    default_code = "CONFIGURATION_ERROR"


class NotFoundError(DriveError):
    """Resource not found."""

    status_code = 404
    default_code = "NOT_FOUND"


class ValidationError(DriveError):
    """Input validation failed."""

    status_code = 400
    default_code = "VALIDATION_ERROR"


class ConflictError(DriveError):
    """Resource already exists."""

    status_code = 409
    default_code = "CONFLICT"


class AuthenticationError(DriveError):
    """Authentication failed (invalid or missing credentials)."""

    status_code = 401
    default_code = "UNAUTHORIZED"


class AuthorizationError(DriveError):
    """Authorization failed (insufficient permissions)."""

    status_code = 403
    default_code = "FORBIDDEN"


class RateLimitError(DriveError):
    """Client exceeded its request budget."""

    status_code = 429
    default_code = "RATE_LIMIT_EXCEEDED"


class ExternalServiceError(DriveError):
    """Error communicating with an external service."""

    status_code = 503
    default_code = "EXTERNAL_SERVICE_ERROR"

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
