"""
Files module exceptions.
"""

from shared.exceptions import NotFoundError, ValidationError


class StoredFileNotFoundError(NotFoundError):
    """Raised when a file does not exist or has been soft-deleted."""

    def __init__(self, file_id: str):
        super().__init__(
            "File not found",
            code="NOT_FOUND",
            details={"file_id": file_id},
        )


class EmptyFileError(ValidationError):
    """Raised when an upload carries no bytes."""

    def __init__(self):
        super().__init__("Empty file not allowed", code="EMPTY_FILE")
