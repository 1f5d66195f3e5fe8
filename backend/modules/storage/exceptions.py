"""
Blob storage module exceptions.

Everything that goes wrong on the way to or from the relay surfaces as one
of these; transport-library exceptions never leak to callers.
"""

from typing import Optional

from shared.exceptions import ExternalServiceError, ValidationError


class RelayError(ExternalServiceError):
    """The relay was unreachable or reported a failure."""

    def __init__(
        self,
        message: str,
        error_code: Optional[int] = None,
        description: Optional[str] = None,
    ):
        details = {}
        if error_code is not None:
            details["relay_error_code"] = error_code
        if description:
            details["relay_description"] = description
        super().__init__(message, service="relay", code="RELAY_ERROR", details=details)
        self.error_code = error_code
        self.description = description


class BlobTooLargeError(ValidationError):
    """Payload exceeds the relay's per-object ceiling."""

    status_code = 413

    def __init__(self, size_bytes: int, limit_bytes: int):
        super().__init__(
            f"File size exceeds maximum limit ({limit_bytes // (1024 * 1024)}MB)",
            code="BLOB_TOO_LARGE",
            details={"size_bytes": size_bytes, "limit_bytes": limit_bytes},
        )
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes


class InvalidFileNameError(ValidationError):
    """File name contains forbidden characters, is reserved, or is too long."""

    def __init__(self, file_name: str):
        super().__init__(
            "File name is not allowed",
            code="INVALID_FILE_NAME",
            details={"file_name": file_name},
        )


class DisallowedFileTypeError(ValidationError):
    """File extension or MIME type is on the executable/script denylist."""

    status_code = 415

    def __init__(self, file_name: str, mime_type: str):
        super().__init__(
            "File type not allowed for security reasons",
            code="FILE_TYPE_NOT_ALLOWED",
            details={"file_name": file_name, "mime_type": mime_type},
        )
