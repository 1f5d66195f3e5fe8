"""
Shared infrastructure for the RelayDrive backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Connection manager with single-flight connect
- exceptions: Base exception classes

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings, load_settings
from .database import (
    ConnectionManager,
    DatabaseConnectionError,
    DatabaseHandle,
    get_connection,
    get_connection_manager,
    reset_connection_manager,
)
from .exceptions import (
    DriveError,
    ConfigurationError,
    NotFoundError,
    ValidationError,
    ConflictError,
    AuthenticationError,
    AuthorizationError,
    RateLimitError,
    ExternalServiceError,
)
from .models import AuthenticatedUser

__all__ = [
    "Settings",
    "get_settings",
    "load_settings",
    "ConnectionManager",
    "DatabaseConnectionError",
    "DatabaseHandle",
    "get_connection",
    "get_connection_manager",
    "reset_connection_manager",
    "DriveError",
    "ConfigurationError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "AuthenticationError",
    "AuthorizationError",
    "RateLimitError",
    "ExternalServiceError",
    "AuthenticatedUser",
]
