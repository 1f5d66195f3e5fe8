"""
Files module interface.

The API layer depends on IFileService for uploads and downloads.
"""

from typing import Optional, Protocol, runtime_checkable

from shared.models import AuthenticatedUser

from .models import FileDownload, StoredFile


@runtime_checkable
class IFileService(Protocol):
    """
    Interface for file operations.

    Combines the metadata repository with the blob storage gateway; the
    bytes never touch local disk.
    """

    async def upload(
        self,
        user: AuthenticatedUser,
        data: bytes,
        file_name: str,
        mime_type: Optional[str] = None,
    ) -> StoredFile:
        """
        Relay ``data`` and record its metadata under ``user``.

        Invalid names are sanitized rather than rejected; a name already
        used by the same owner gets a timestamp suffix.

        Raises:
            BlobTooLargeError: Payload exceeds the relay ceiling
            EmptyFileError: Payload is empty
            DisallowedFileTypeError: Executable or script type
            RelayError: Relay failure
        """
        ...

    async def open_download(self, user: AuthenticatedUser, file_id: str) -> FileDownload:
        """
        Look up a file owned by ``user`` and open a stream of its bytes.

        Raises:
            StoredFileNotFoundError: Unknown or soft-deleted file
            ForbiddenError: File belongs to someone else
            RelayError: Relay failure
        """
        ...
