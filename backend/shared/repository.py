"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
access to the shared database handle and providing shared utilities for
data operations.
"""

from typing import Any, Callable, Generic, Optional, TypeVar

from .database import DatabaseHandle, get_connection


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Lazy database handle access via self._db
    - Generic type parameter for model type hints

    Subclasses should implement domain-specific data access methods
    and handle row-to-Pydantic model mapping internally.

    Example:
        class AccountRepository(BaseRepository[Account]):
            def get_by_id(self, account_id: str) -> Optional[Account]:
                with self._db.cursor() as cur:
                    cur.execute("SELECT * FROM users WHERE id = %s", (account_id,))
                    row = cur.fetchone()
                return self._map_row(row) if row else None
    """

    def __init__(self, connect: Optional[Callable[[], DatabaseHandle]] = None) -> None:
        """
        Initialize the repository.

        Args:
            connect: Callable returning the database handle. Defaults to the
                process-wide connection manager. Called on every access so
                the first query triggers the connection, not construction.
        """
        self._connect = connect or get_connection

    @property
    def _db(self) -> DatabaseHandle:
        return self._connect()

    def _fetch_one(self, query: str, params: tuple[Any, ...] = ()) -> Optional[dict[str, Any]]:
        with self._db.cursor() as cur:
            cur.execute(query, params)
            row = cur.fetchone()
        return dict(row) if row else None
