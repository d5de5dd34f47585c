"""
infrastructure.persistence.migrations - Database schema creation.

Called once at startup by the factory. Safe to run repeatedly.
"""

from __future__ import annotations

import logging

from infrastructure.persistence.connection import SQLiteConnection

logger = logging.getLogger(__name__)

_TABLES = [
    """CREATE TABLE IF NOT EXISTS kv_store (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL,
        updated_at TEXT
    )""",
]


def run_migrations(connection: SQLiteConnection) -> None:
    """Create all tables if they do not already exist."""
    with connection.acquire() as conn:
        for ddl in _TABLES:
            conn.execute(ddl)
    logger.info("Migrations applied to %s", connection.db_path)
