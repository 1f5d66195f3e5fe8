"""
Blob storage gateway backed by a messaging bot API.

Files are sent as documents to a fixed destination chat and fetched back
through the bot API's file endpoint. The relay's quirks (chat addressing,
unstable download paths, the 50 MB document ceiling, the ok/result
envelope) stay inside this module.
"""

import logging
from typing import Any, AsyncIterator, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from shared.config import Settings

from .exceptions import (
    BlobTooLargeError,
    DisallowedFileTypeError,
    InvalidFileNameError,
    RelayError,
)
from .interfaces import IBlobStorage
from .models import (
    MAX_CAPTION_LENGTH,
    RELAY_FILE_SIZE_LIMIT,
    BlobLocation,
    RelayEnvelope,
    RelayFile,
    RelayHealth,
    RelayMessage,
    RemoteBlobReference,
    envelope_error,
)
from .validation import is_allowed_file_type, normalize_mime_type, validate_file_name


DEFAULT_API_BASE = "https://api.telegram.org"
DEFAULT_TIMEOUT = httpx.Timeout(60.0, connect=10.0)


class BlobStream:
    """
    Streaming body of a relay download.

    Iterating yields raw chunks as they arrive; the upstream response is
    closed when iteration finishes, fails, or ``aclose()`` is called.
    """

    def __init__(self, response: httpx.Response, size_bytes: Optional[int] = None):
        self._response = response
        self.size_bytes = size_bytes
        self.content_type = response.headers.get("content-type")

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self._response.aiter_bytes():
                yield chunk
        except httpx.HTTPError as e:
            raise RelayError("Download from relay was interrupted", description=type(e).__name__) from e
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        if not self._response.is_closed:
            await self._response.aclose()


class RelayStorageGateway(IBlobStorage):
    """
    Implementation of IBlobStorage over the bot API.

    Stateless between calls apart from the pooled HTTP client, so a single
    instance is shared by all requests.
    """

    def __init__(
        self,
        bot_token: str,
        chat_id: str,
        api_base: str = DEFAULT_API_BASE,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[httpx.Timeout] = None,
        max_file_size: int = RELAY_FILE_SIZE_LIMIT,
        logger: Optional[logging.Logger] = None,
    ):
        self._bot_token = bot_token
        self._chat_id = chat_id
        self._api_base = api_base.rstrip("/")
        self._max_file_size = max_file_size
        self._logger = logger or logging.getLogger(__name__)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout or DEFAULT_TIMEOUT)

    @classmethod
    def from_settings(
        cls, settings: Settings, client: Optional[httpx.AsyncClient] = None
    ) -> "RelayStorageGateway":
        return cls(
            bot_token=settings.relay_bot_token,
            chat_id=settings.relay_chat_id,
            api_base=settings.relay_api_base,
            client=client,
            timeout=httpx.Timeout(
                settings.relay_read_timeout, connect=settings.relay_connect_timeout
            ),
        )

    @property
    def max_file_size(self) -> int:
        return self._max_file_size

    def _method_url(self, method: str) -> str:
        return f"{self._api_base}/bot{self._bot_token}/{method}"

    def _file_url(self, path: str) -> str:
        return f"{self._api_base}/file/bot{self._bot_token}/{path.lstrip('/')}"

    def _redact(self, text: str) -> str:
        return text.replace(self._bot_token, "***") if self._bot_token else text

    async def _call(self, method: str, result_type: Any, **request_kwargs: Any) -> Any:
        """POST a bot API method and unwrap the ok/result envelope."""
        if not self._bot_token:
            raise RelayError("Relay bot token is not configured")

        try:
            response = await self._client.post(self._method_url(method), **request_kwargs)
        except httpx.HTTPError as e:
            self._logger.error("Relay request %s failed: %s", method, self._redact(str(e)))
            raise RelayError(
                "Failed to communicate with relay",
                description=self._redact(str(e)) or type(e).__name__,
            ) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise RelayError(
                f"Relay returned a non-JSON response (HTTP {response.status_code})",
                error_code=response.status_code,
            ) from e

        try:
            envelope = RelayEnvelope[result_type].model_validate(payload)
        except PydanticValidationError as e:
            error_code, description = envelope_error(payload)
            raise RelayError("Unexpected relay response format", error_code, description) from e

        if not envelope.ok:
            self._logger.warning(
                "Relay method %s returned error %s: %s",
                method,
                envelope.error_code,
                envelope.description,
            )
            raise RelayError(
                envelope.description or "Relay API error",
                envelope.error_code,
                envelope.description,
            )

        if envelope.result is None:
            raise RelayError(f"No result from {method}")

        return envelope.result

    async def upload_blob(
        self, data: bytes, file_name: str, mime_type: Optional[str] = None
    ) -> RemoteBlobReference:
        """
        Send ``data`` as a document to the destination chat.

        All validation happens before any network traffic.
        """
        size = len(data)
        if size > self._max_file_size:
            raise BlobTooLargeError(size, self._max_file_size)
        if not validate_file_name(file_name):
            raise InvalidFileNameError(file_name)

        mime = normalize_mime_type(mime_type)
        if not is_allowed_file_type(mime, file_name):
            raise DisallowedFileTypeError(file_name, mime)

        if not self._chat_id:
            raise RelayError("Relay destination chat is not configured")

        caption = f"📁 {file_name}"[:MAX_CAPTION_LENGTH]
        message: RelayMessage = await self._call(
            "sendDocument",
            RelayMessage,
            data={"chat_id": self._chat_id, "caption": caption},
            files={"document": (file_name, data, mime)},
        )

        document = message.document
        self._logger.info(
            "Uploaded %s (%d bytes) as relay object %s", file_name, size, document.file_unique_id
        )
        return RemoteBlobReference(
            remote_object_id=document.file_id,
            remote_unique_id=document.file_unique_id,
            size_bytes=document.file_size if document.file_size is not None else size,
            remote_path=document.file_path,
            file_name=document.file_name or file_name,
            mime_type=document.mime_type or mime,
            message_id=message.message_id,
        )

    async def resolve_blob_location(self, remote_object_id: str) -> BlobLocation:
        """
        Look up the current download path of a blob.

        Paths are only valid for a limited time, so this must be called
        right before every download.
        """
        relay_file: RelayFile = await self._call(
            "getFile", RelayFile, json={"file_id": remote_object_id}
        )
        if not relay_file.file_path:
            raise RelayError("File path not available")
        return BlobLocation(path=relay_file.file_path, size_bytes=relay_file.file_size)

    async def open_blob_stream(self, remote_object_id: str) -> BlobStream:
        """Resolve the blob's location and open a streaming download."""
        location = await self.resolve_blob_location(remote_object_id)
        request = self._client.build_request("GET", self._file_url(location.path))

        try:
            response = await self._client.send(request, stream=True)
        except httpx.HTTPError as e:
            self._logger.error("Relay download failed: %s", self._redact(str(e)))
            raise RelayError(
                "Failed to download file from relay",
                description=self._redact(str(e)) or type(e).__name__,
            ) from e

        if not response.is_success:
            await response.aclose()
            raise RelayError(
                f"Failed to download file: {response.status_code} {response.reason_phrase}",
                error_code=response.status_code,
            )

        return BlobStream(response, size_bytes=location.size_bytes)

    async def verify_credentials(self) -> bool:
        """Check the bot token with ``getMe``."""
        try:
            await self._call("getMe", dict[str, Any])
            return True
        except RelayError as e:
            self._logger.warning("Relay credential check failed: %s", e.message)
            return False

    async def verify_destination_access(self) -> bool:
        """Check that the bot can see the destination chat."""
        if not self._chat_id:
            return False
        try:
            await self._call("getChat", dict[str, Any], json={"chat_id": self._chat_id})
            return True
        except RelayError as e:
            self._logger.warning("Relay destination check failed: %s", e.message)
            return False

    async def health(self) -> RelayHealth:
        return RelayHealth(
            credentials_valid=await self.verify_credentials(),
            destination_accessible=await self.verify_destination_access(),
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
