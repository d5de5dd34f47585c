"""
infrastructure.persistence.connection - SQLite connection manager.

One short-lived connection per operation, committed on success and rolled
back on error, so every write is durable by the time the call returns.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger(__name__)


class SQLiteConnection:
    """SQLite connection provider with auto-commit/rollback."""

    def __init__(self, db_path: str):
        self._db_path = db_path

    @property
    def db_path(self) -> str:
        return self._db_path

    @contextmanager
    def acquire(self) -> Iterator[sqlite3.Connection]:
        """Yield an open SQLite connection.

        Commits on success, rolls back on exception, and always closes
        the connection.

        Raises:
            sqlite3.Error: Propagated after rollback if a DB error occurs.
        """
        conn = sqlite3.connect(self._db_path)
        try:
            yield conn
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            logger.exception("Database operation failed, transaction rolled back.")
            raise
        finally:
            conn.close()
