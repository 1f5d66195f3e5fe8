"""
Files module data models.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from modules.storage.interfaces import IBlobStream


class StoredFile(BaseModel):
    """
    Metadata row for a file whose bytes live on the relay.

    ``remote_object_id`` is what the gateway needs to fetch the bytes again;
    soft-deleted rows (``deleted_at`` set) are treated as missing.
    """

    id: str
    owner_id: str
    name: str
    size_bytes: int = Field(..., ge=0)
    mime_type: str = "application/octet-stream"
    remote_object_id: str
    remote_unique_id: str
    created_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class FileResponse(BaseModel):
    """Client-facing view of a stored file."""

    id: str
    name: str
    size_bytes: int
    mime_type: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_stored(cls, stored: StoredFile) -> "FileResponse":
        return cls(
            id=stored.id,
            name=stored.name,
            size_bytes=stored.size_bytes,
            mime_type=stored.mime_type,
            created_at=stored.created_at,
        )


class StorageUsage(BaseModel):
    """Per-owner totals over non-deleted files."""

    total_files: int = 0
    total_bytes: int = 0


class FileStats(BaseModel):
    """System-wide totals over non-deleted files."""

    total_files: int = 0
    total_bytes: int = 0
    average_bytes: int = 0
    max_bytes: int = 0


@dataclass
class FileDownload:
    """A stored file together with an open stream of its bytes."""

    file: StoredFile
    stream: IBlobStream
