"""Tests for the file service."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from modules.auth.exceptions import ForbiddenError
from modules.auth.service import AuthService
from modules.files.exceptions import EmptyFileError, StoredFileNotFoundError
from modules.files.service import FileService, with_timestamp_suffix
from modules.storage.exceptions import BlobTooLargeError, DisallowedFileTypeError, RelayError
from modules.storage.models import RemoteBlobReference


def reference_for(data: bytes, unique: str = "AgADuQ") -> RemoteBlobReference:
    return RemoteBlobReference(
        remote_object_id=f"file-{unique}",
        remote_unique_id=unique,
        size_bytes=len(data),
    )


@pytest.fixture
def storage():
    storage = MagicMock()
    storage.upload_blob = AsyncMock(side_effect=lambda data, name, mime: reference_for(data))
    storage.open_blob_stream = AsyncMock()
    return storage


@pytest.fixture
def service(file_repository, storage, clock):
    return FileService(
        files=file_repository,
        storage=storage,
        auth=AuthService,
        clock=clock,
        max_file_size=1024,
    )


@pytest.fixture
def alice(user_account):
    return user_account.to_authenticated_user()


@pytest.fixture
def bob(other_account):
    return other_account.to_authenticated_user()


class TestUpload:
    @pytest.mark.asyncio
    async def test_upload_relays_and_records(self, service, storage, file_repository, alice):
        stored = await service.upload(alice, b"hello", "notes.txt", "text/plain")

        storage.upload_blob.assert_awaited_once_with(b"hello", "notes.txt", "text/plain")
        assert stored.owner_id == alice.id
        assert stored.name == "notes.txt"
        assert stored.size_bytes == 5
        assert stored.remote_object_id == "file-AgADuQ"
        assert file_repository.get_by_id(stored.id) == stored

    @pytest.mark.asyncio
    async def test_missing_mime_defaults_to_octet_stream(self, service, storage, alice):
        stored = await service.upload(alice, b"hello", "blob")
        assert stored.mime_type == "application/octet-stream"

    @pytest.mark.asyncio
    async def test_over_long_mime_type_is_normalized_before_relaying(self, service, storage, alice):
        stored = await service.upload(alice, b"hello", "notes.txt", "text/" + "x" * 300)

        assert storage.upload_blob.await_args.args[2] == "application/octet-stream"
        assert stored.mime_type == "application/octet-stream"

    @pytest.mark.asyncio
    async def test_invalid_name_is_sanitized(self, service, storage, alice):
        stored = await service.upload(alice, b"hello", "a<b>.txt", "text/plain")

        assert stored.name == "a_b_.txt"
        assert storage.upload_blob.await_args.args[1] == "a_b_.txt"

    @pytest.mark.asyncio
    async def test_duplicate_name_gets_timestamp_suffix(self, service, clock, alice):
        await service.upload(alice, b"one", "report.pdf", "application/pdf")
        second = await service.upload(alice, b"two", "report.pdf", "application/pdf")

        assert second.name == f"report_{int(clock.now * 1000)}.pdf"

    @pytest.mark.asyncio
    async def test_same_name_for_different_owners_is_kept(self, service, alice, bob):
        await service.upload(alice, b"one", "report.pdf", "application/pdf")
        other = await service.upload(bob, b"two", "report.pdf", "application/pdf")

        assert other.name == "report.pdf"

    @pytest.mark.asyncio
    async def test_too_large_is_rejected_before_relay(self, service, storage, alice):
        with pytest.raises(BlobTooLargeError):
            await service.upload(alice, b"x" * 1025, "big.bin")
        storage.upload_blob.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_file_is_rejected(self, service, storage, alice):
        with pytest.raises(EmptyFileError) as exc_info:
            await service.upload(alice, b"", "empty.txt")
        assert exc_info.value.status_code == 400
        storage.upload_blob.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_disallowed_type_is_rejected(self, service, storage, alice):
        with pytest.raises(DisallowedFileTypeError):
            await service.upload(alice, b"MZ", "setup.exe")
        storage.upload_blob.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_relay_failure_records_nothing(self, service, storage, file_repository, alice):
        storage.upload_blob.side_effect = RelayError("Failed to communicate with relay")

        with pytest.raises(RelayError):
            await service.upload(alice, b"hello", "notes.txt")

        assert file_repository.files == {}


class TestDownload:
    @pytest.mark.asyncio
    async def test_owner_gets_stream(self, service, storage, alice):
        stored = await service.upload(alice, b"hello", "notes.txt", "text/plain")
        stream = MagicMock()
        storage.open_blob_stream.return_value = stream

        download = await service.open_download(alice, stored.id)

        storage.open_blob_stream.assert_awaited_once_with("file-AgADuQ")
        assert download.file == stored
        assert download.stream is stream

    @pytest.mark.asyncio
    async def test_other_user_is_forbidden(self, service, storage, alice, bob):
        stored = await service.upload(alice, b"hello", "notes.txt")

        with pytest.raises(ForbiddenError):
            await service.open_download(bob, stored.id)
        storage.open_blob_stream.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_file_is_not_found(self, service, alice):
        with pytest.raises(StoredFileNotFoundError) as exc_info:
            await service.open_download(alice, "3f2504e0-4f89-11d3-9a0c-0305e82c3301")
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_soft_deleted_file_is_not_found(self, service, file_repository, alice):
        from datetime import datetime, timezone

        stored = await service.upload(alice, b"hello", "notes.txt")
        file_repository.files[stored.id] = stored.model_copy(
            update={"deleted_at": datetime.now(timezone.utc)}
        )

        with pytest.raises(StoredFileNotFoundError):
            await service.open_download(alice, stored.id)


class TestTimestampSuffix:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("report.pdf", "report_123.pdf"),
            ("archive.tar.gz", "archive.tar_123.gz"),
            ("README", "README_123"),
            (".env", ".env_123"),
        ],
    )
    def test_suffix(self, name, expected):
        assert with_timestamp_suffix(name, 123) == expected
