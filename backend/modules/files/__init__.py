"""
Files module.

Stores file metadata in the database and file bytes on the relay.

Public API:
- IFileService: Interface for upload and download
- StoredFile / FileResponse: Models
- Files exceptions: StoredFileNotFoundError, EmptyFileError
"""

from .interfaces import IFileService
from .models import FileDownload, FileResponse, FileStats, StorageUsage, StoredFile
from .exceptions import EmptyFileError, StoredFileNotFoundError

__all__ = [
    # Interface
    "IFileService",
    # Models
    "FileDownload",
    "FileResponse",
    "FileStats",
    "StorageUsage",
    "StoredFile",
    # Exceptions
    "EmptyFileError",
    "StoredFileNotFoundError",
]
