"""
File service implementation.

Orchestrates the metadata repository and the blob storage gateway. Upload
checks run cheapest first so nothing is relayed for a request that is
going to be rejected anyway.
"""

import logging
import time
from typing import Any, Callable, Optional

from starlette.concurrency import run_in_threadpool

from modules.auth.exceptions import ForbiddenError
from modules.storage.exceptions import BlobTooLargeError, DisallowedFileTypeError
from modules.storage.interfaces import IBlobStorage
from modules.storage.models import RELAY_FILE_SIZE_LIMIT
from modules.storage.validation import (
    is_allowed_file_type,
    normalize_mime_type,
    sanitize_file_name,
    validate_file_name,
)
from shared.models import AuthenticatedUser

from .exceptions import EmptyFileError, StoredFileNotFoundError
from .interfaces import IFileService
from .models import FileDownload, StoredFile
from .repository import FileRepository


def with_timestamp_suffix(file_name: str, timestamp_ms: int) -> str:
    """``report.pdf`` -> ``report_1700000000000.pdf``."""
    dot = file_name.rfind(".")
    if dot <= 0:
        return f"{file_name}_{timestamp_ms}"
    return f"{file_name[:dot]}_{timestamp_ms}{file_name[dot:]}"


class FileService(IFileService):
    """Implementation of IFileService over the relay gateway."""

    def __init__(
        self,
        files: FileRepository,
        storage: IBlobStorage,
        auth: Any,  # IAuthService, only verify_ownership is used
        clock: Callable[[], float] = time.time,
        max_file_size: int = RELAY_FILE_SIZE_LIMIT,
        logger: Optional[logging.Logger] = None,
    ):
        self._files = files
        self._storage = storage
        self._auth = auth
        self._clock = clock
        self._max_file_size = max_file_size
        self._logger = logger or logging.getLogger(__name__)

    async def upload(
        self,
        user: AuthenticatedUser,
        data: bytes,
        file_name: str,
        mime_type: Optional[str] = None,
    ) -> StoredFile:
        size = len(data)
        if size > self._max_file_size:
            raise BlobTooLargeError(size, self._max_file_size)
        if size == 0:
            raise EmptyFileError()

        name = file_name if validate_file_name(file_name) else sanitize_file_name(file_name)
        mime = normalize_mime_type(mime_type)
        if not is_allowed_file_type(mime, name):
            raise DisallowedFileTypeError(name, mime)

        if await run_in_threadpool(self._files.name_exists, user.id, name):
            name = with_timestamp_suffix(name, int(self._clock() * 1000))
            if not validate_file_name(name):
                name = sanitize_file_name(name)

        reference = await self._storage.upload_blob(data, name, mime)
        stored = await run_in_threadpool(self._files.create, user.id, name, mime, reference)

        self._logger.info("User %s uploaded file %s (%d bytes)", user.id, stored.id, size)
        return stored

    async def open_download(self, user: AuthenticatedUser, file_id: str) -> FileDownload:
        stored = await run_in_threadpool(self._files.get_by_id, file_id)
        if stored is None:
            raise StoredFileNotFoundError(file_id)

        if not self._auth.verify_ownership(user.id, stored):
            self._logger.warning("User %s denied access to file %s", user.id, file_id)
            raise ForbiddenError()

        stream = await self._storage.open_blob_stream(stored.remote_object_id)
        return FileDownload(file=stored, stream=stream)
