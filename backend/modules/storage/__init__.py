"""
Blob storage module.

Moves opaque file bytes to and from the relay backend.

Public API:
- IBlobStorage: Interface for blob operations
- RelayStorageGateway: Bot-API-backed implementation
- RemoteBlobReference / BlobLocation: Data returned to callers
- Storage exceptions: RelayError, BlobTooLargeError, etc.
"""

from .interfaces import IBlobStorage, IBlobStream
from .models import (
    MAX_CAPTION_LENGTH,
    RELAY_FILE_SIZE_LIMIT,
    BlobLocation,
    RelayHealth,
    RemoteBlobReference,
)
from .exceptions import (
    RelayError,
    BlobTooLargeError,
    InvalidFileNameError,
    DisallowedFileTypeError,
)
from .validation import (
    format_file_size,
    is_allowed_file_type,
    sanitize_file_name,
    validate_file_name,
)

__all__ = [
    # Interface
    "IBlobStorage",
    "IBlobStream",
    # Models
    "BlobLocation",
    "RelayHealth",
    "RemoteBlobReference",
    "MAX_CAPTION_LENGTH",
    "RELAY_FILE_SIZE_LIMIT",
    # Exceptions
    "RelayError",
    "BlobTooLargeError",
    "InvalidFileNameError",
    "DisallowedFileTypeError",
    # Validation helpers
    "format_file_size",
    "is_allowed_file_type",
    "sanitize_file_name",
    "validate_file_name",
]
