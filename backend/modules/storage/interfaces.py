"""
Blob storage module interface.

Route handlers depend on IBlobStorage, not the relay implementation, so
tests can substitute a fake and the relay can be swapped later.
"""

from typing import Optional, Protocol, runtime_checkable

from .models import BlobLocation, RemoteBlobReference


@runtime_checkable
class IBlobStream(Protocol):
    """Streaming read of a stored blob."""

    size_bytes: Optional[int]

    def __aiter__(self):
        ...

    async def aclose(self) -> None:
        ...


@runtime_checkable
class IBlobStorage(Protocol):
    """
    Interface for moving opaque bytes to and from the storage backend.
    """

    async def upload_blob(
        self, data: bytes, file_name: str, mime_type: Optional[str] = None
    ) -> RemoteBlobReference:
        """
        Store ``data`` and return the reference needed to fetch it again.

        Raises:
            BlobTooLargeError: Payload exceeds the per-object ceiling
            InvalidFileNameError: File name fails validation
            DisallowedFileTypeError: Extension or MIME type is denylisted
            RelayError: Transport failure or upstream rejection
        """
        ...

    async def resolve_blob_location(self, remote_object_id: str) -> BlobLocation:
        """Ask the backend for the blob's current retrieval path."""
        ...

    async def open_blob_stream(self, remote_object_id: str) -> IBlobStream:
        """Resolve the location and open a streaming read of the blob."""
        ...

    async def verify_credentials(self) -> bool:
        ...

    async def verify_destination_access(self) -> bool:
        ...
