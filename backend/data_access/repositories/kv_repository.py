"""
Key-value repository for small persisted settings such as the high score.
"""

from typing import Optional

from .base import BaseRepository
from database import init_database


class KeyValueRepository(BaseRepository):
    """
    Repository for kv_store table operations.

    Values are stored as text; callers decide how to parse them.
    """

    def __init__(self, ensure_schema: bool = True):
        if ensure_schema:
            init_database()

    def get(self, key: str) -> Optional[str]:
        """
        Get the raw value stored under `key`.

        Returns:
            The stored text, or None if the key is absent
        """
        with self.read_connection() as (conn, cursor):
            cursor.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = cursor.fetchone()
            if row is None:
                return None
            return row["value"]

    def set(self, key: str, value: str) -> None:
        """Insert or overwrite the value stored under `key`."""
        with self.connection() as (conn, cursor):
            cursor.execute(
                """
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (key, value),
            )

    def delete(self, key: str) -> bool:
        """
        Remove `key`.

        Returns:
            True if a row was deleted
        """
        with self.connection() as (conn, cursor):
            cursor.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            return cursor.rowcount > 0
