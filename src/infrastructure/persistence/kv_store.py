"""
infrastructure.persistence.kv_store - Key-value store implementations.

Implements the KeyValueStore port. SQLiteKeyValueStore is the durable
backing used by the application; InMemoryKeyValueStore keeps the same
contract in a dict for tests and throwaway sessions.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime

from domain.exceptions import RepositoryError, StorageReadError
from infrastructure.persistence.connection import SQLiteConnection

logger = logging.getLogger(__name__)


class SQLiteKeyValueStore:
    """SQLite implementation of KeyValueStore (one row per key)."""

    def __init__(self, connection: SQLiteConnection):
        self._conn = connection

    def get(self, key: str) -> str | None:
        try:
            with self._conn.acquire() as conn:
                row = conn.execute(
                    "SELECT value FROM kv_store WHERE key = ?", (key,),
                ).fetchone()
        except sqlite3.Error as e:
            raise StorageReadError(f"Could not read '{key}': {e}") from e
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        try:
            with self._conn.acquire() as conn:
                conn.execute(
                    """INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                       ON CONFLICT(key) DO UPDATE SET
                           value = excluded.value, updated_at = excluded.updated_at""",
                    (key, value, datetime.now().isoformat()),
                )
        except sqlite3.Error as e:
            raise RepositoryError(f"Could not write '{key}': {e}") from e

    def remove(self, key: str) -> None:
        try:
            with self._conn.acquire() as conn:
                conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        except sqlite3.Error as e:
            raise RepositoryError(f"Could not remove '{key}': {e}") from e

    def clear(self) -> None:
        try:
            with self._conn.acquire() as conn:
                conn.execute("DELETE FROM kv_store")
        except sqlite3.Error as e:
            raise RepositoryError(f"Could not clear store: {e}") from e


class InMemoryKeyValueStore:
    """Dict-backed KeyValueStore with an optional size quota.

    quota_bytes: when set, a write that would push the total stored size
    over the quota raises RepositoryError, like a full browser storage.
    """

    def __init__(self, quota_bytes: int | None = None):
        self._data: dict[str, str] = {}
        self._quota = quota_bytes

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if self._quota is not None:
            used = sum(len(v) for k, v in self._data.items() if k != key)
            if used + len(value) > self._quota:
                raise RepositoryError(
                    f"Quota exceeded writing '{key}' ({used + len(value)} > {self._quota} bytes)"
                )
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()
