"""
File repository for database access.

Encapsulates all SQL and row mapping for the ``files`` table.
"""

import uuid
from typing import Any, Optional

from shared.repository import BaseRepository
from modules.storage.models import RemoteBlobReference

from .models import FileStats, StorageUsage, StoredFile

_COLUMNS = (
    "id::text AS id, owner_id::text AS owner_id, name, size_bytes, mime_type, "
    "remote_object_id, remote_unique_id, created_at, deleted_at"
)


class FileRepository(BaseRepository[StoredFile]):
    """
    Repository for file metadata.

    Note: This repository does NOT perform authorization checks.
    The file service verifies ownership before handing out bytes.
    """

    def create(
        self,
        owner_id: str,
        name: str,
        mime_type: str,
        reference: RemoteBlobReference,
    ) -> StoredFile:
        row = self._fetch_one(
            f"""
            INSERT INTO files
                (owner_id, name, size_bytes, mime_type, remote_object_id, remote_unique_id)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING {_COLUMNS}
            """,
            (
                owner_id,
                name,
                reference.size_bytes,
                mime_type,
                reference.remote_object_id,
                reference.remote_unique_id,
            ),
        )
        return self._map_to_file(row)

    def get_by_id(self, file_id: str) -> Optional[StoredFile]:
        """Get a non-deleted file by ID. Malformed IDs simply match nothing."""
        try:
            uuid.UUID(str(file_id))
        except ValueError:
            return None
        row = self._fetch_one(
            f"SELECT {_COLUMNS} FROM files WHERE id = %s AND deleted_at IS NULL",
            (str(file_id),),
        )
        return self._map_to_file(row) if row else None

    def name_exists(self, owner_id: str, name: str) -> bool:
        row = self._fetch_one(
            """
            SELECT EXISTS (
                SELECT 1 FROM files
                WHERE owner_id = %s AND name = %s AND deleted_at IS NULL
            ) AS taken
            """,
            (owner_id, name),
        )
        return bool(row and row["taken"])

    def get_storage_usage(self, owner_id: str) -> StorageUsage:
        row = self._fetch_one(
            """
            SELECT COUNT(*) AS total_files, COALESCE(SUM(size_bytes), 0)::bigint AS total_bytes
            FROM files
            WHERE owner_id = %s AND deleted_at IS NULL
            """,
            (owner_id,),
        )
        return StorageUsage(**row) if row else StorageUsage()

    def get_stats(self) -> FileStats:
        row = self._fetch_one(
            """
            SELECT COUNT(*) AS total_files,
                   COALESCE(SUM(size_bytes), 0)::bigint AS total_bytes,
                   COALESCE(ROUND(AVG(size_bytes)), 0)::bigint AS average_bytes,
                   COALESCE(MAX(size_bytes), 0)::bigint AS max_bytes
            FROM files
            WHERE deleted_at IS NULL
            """
        )
        return FileStats(**row) if row else FileStats()

    def _map_to_file(self, row: dict[str, Any]) -> StoredFile:
        return StoredFile(**row)
