"""
Base repository with SQLite connection management.

Every operation opens its own short-lived connection, so repositories are
safe to create anywhere and always follow the current SNAKE_DB_PATH.
"""

import sqlite3
from contextlib import contextmanager
from typing import Generator, Tuple

from database import get_connection

ConnectionPair = Tuple[sqlite3.Connection, sqlite3.Cursor]


class BaseRepository:
    """
    Base class for kv_store repositories.

    Subclasses use self.connection() for writes and self.read_connection()
    for lookups.
    """

    @contextmanager
    def connection(self, auto_commit: bool = True) -> Generator[ConnectionPair, None, None]:
        """
        Open a connection for a write.

        The transaction is committed when the block exits cleanly (unless
        auto_commit is False) and rolled back if it raises. The connection
        is closed either way.

        Example:
            with self.connection() as (conn, cursor):
                cursor.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        """
        with self._open() as (conn, cursor):
            try:
                yield conn, cursor
                if auto_commit:
                    conn.commit()
            except Exception:
                conn.rollback()
                raise

    @contextmanager
    def read_connection(self) -> Generator[ConnectionPair, None, None]:
        """Open a connection for lookups; nothing is committed."""
        with self._open() as pair:
            yield pair

    @contextmanager
    def _open(self) -> Generator[ConnectionPair, None, None]:
        conn = get_connection()
        cursor = conn.cursor()
        try:
            yield conn, cursor
        finally:
            cursor.close()
            conn.close()
