"""
Blob storage module data models.

Relay* models mirror the bot API wire format; the remaining models are what
the gateway exposes to the rest of the application.
"""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

# Bot API hard limit for documents sent by a bot
RELAY_FILE_SIZE_LIMIT = 50 * 1024 * 1024
MAX_CAPTION_LENGTH = 1024


class RelayEnvelope(BaseModel, Generic[T]):
    """Envelope shared by every relay response."""

    ok: bool
    result: Optional[T] = None
    error_code: Optional[int] = None
    description: Optional[str] = None


class RelayDocument(BaseModel):
    file_id: str
    file_unique_id: str
    file_size: Optional[int] = None
    file_path: Optional[str] = None
    file_name: Optional[str] = None
    mime_type: Optional[str] = None


class RelayMessage(BaseModel):
    """Subset of the message returned by ``sendDocument``."""

    message_id: int
    date: Optional[int] = None
    document: RelayDocument

    model_config = {"extra": "ignore"}


class RelayFile(BaseModel):
    """Result of ``getFile``."""

    file_id: str
    file_unique_id: str
    file_size: Optional[int] = None
    file_path: Optional[str] = None


class RemoteBlobReference(BaseModel):
    """
    Pointer to a blob stored on the relay.

    Persisted alongside the file's own metadata so the blob can be fetched
    again later. The bytes themselves are never cached locally.
    """

    remote_object_id: str = Field(..., description="Relay file_id used for retrieval")
    remote_unique_id: str = Field(..., description="Stable relay file_unique_id")
    size_bytes: int = Field(..., ge=0)
    remote_path: Optional[str] = Field(
        None, description="Retrieval path if the relay returned one; expires, never persisted"
    )
    file_name: Optional[str] = None
    mime_type: Optional[str] = None
    message_id: Optional[int] = None


class BlobLocation(BaseModel):
    """Current retrieval path of a blob. Not stable long-term."""

    path: str
    size_bytes: Optional[int] = None


class RelayHealth(BaseModel):
    credentials_valid: bool
    destination_accessible: bool

    @property
    def healthy(self) -> bool:
        return self.credentials_valid and self.destination_accessible


def envelope_error(payload: Any) -> tuple[Optional[int], Optional[str]]:
    """Best-effort extraction of error fields from an arbitrary JSON body."""
    if isinstance(payload, dict):
        return payload.get("error_code"), payload.get("description")
    return None, None
