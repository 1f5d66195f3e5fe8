"""
Account repository for database access.

Encapsulates all SQL and row mapping for the ``users`` table.
"""

import uuid
from typing import Any, Optional

from psycopg2 import errors as pg_errors

from shared.repository import BaseRepository

from .exceptions import EmailAlreadyRegisteredError
from .models import Account, AccountStats, Role

_COLUMNS = "id::text AS id, email, name, password_hash, role, is_active, created_at"


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AccountRepository(BaseRepository[Account]):
    """
    Repository for account data access.

    Note: This repository does NOT perform authorization checks.
    The auth service is responsible for deciding who may see what.
    """

    def get_by_id(self, account_id: str) -> Optional[Account]:
        """Get an account by ID. Malformed IDs simply match nothing."""
        try:
            uuid.UUID(str(account_id))
        except ValueError:
            return None
        row = self._fetch_one(f"SELECT {_COLUMNS} FROM users WHERE id = %s", (str(account_id),))
        return self._map_to_account(row) if row else None

    def get_by_email(self, email: str) -> Optional[Account]:
        row = self._fetch_one(
            f"SELECT {_COLUMNS} FROM users WHERE email = %s", (normalize_email(email),)
        )
        return self._map_to_account(row) if row else None

    def create(
        self, email: str, name: str, password_hash: str, role: Role = "user"
    ) -> Account:
        """
        Insert a new account.

        Raises:
            EmailAlreadyRegisteredError: If the email is already taken.
        """
        try:
            row = self._fetch_one(
                f"""
                INSERT INTO users (email, name, password_hash, role)
                VALUES (%s, %s, %s, %s)
                RETURNING {_COLUMNS}
                """,
                (normalize_email(email), name.strip(), password_hash, role),
            )
        except pg_errors.UniqueViolation as e:
            raise EmailAlreadyRegisteredError() from e
        return self._map_to_account(row)

    def update_role(self, account_id: str, role: Role) -> Optional[Account]:
        row = self._fetch_one(
            f"UPDATE users SET role = %s, is_active = TRUE WHERE id = %s RETURNING {_COLUMNS}",
            (role, account_id),
        )
        return self._map_to_account(row) if row else None

    def get_stats(self) -> AccountStats:
        row = self._fetch_one(
            """
            SELECT COUNT(*) AS total,
                   COUNT(*) FILTER (WHERE is_active) AS active,
                   COUNT(*) FILTER (WHERE role = 'admin') AS admins
            FROM users
            """
        )
        return AccountStats(**row) if row else AccountStats()

    def _map_to_account(self, row: dict[str, Any]) -> Account:
        return Account(**row)
