"""SQLite-backed cache store shared across process invocations."""

import json
import sqlite3
from collections.abc import Generator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from .base import CacheStore

CACHE_ENTRIES_TABLE = """
CREATE TABLE IF NOT EXISTS cache_entries (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,  -- JSON
    created_at TEXT NOT NULL
);
"""


class SqliteCacheStore(CacheStore):
    """Cache store persisted in a SQLite database file.

    A connection is opened per operation, so one store may be used from
    several threads.
    """

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path).expanduser()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with self._connection() as conn:
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute(CACHE_ENTRIES_TABLE)
            conn.commit()

    @contextmanager
    def _connection(self) -> Generator[sqlite3.Connection, None, None]:
        conn = sqlite3.connect(self.db_path, timeout=30)
        try:
            yield conn
        finally:
            conn.close()

    def get(self, key: str) -> Any | None:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT value FROM cache_entries WHERE key = ?", (key,)
            ).fetchone()
        if row is None:
            return None
        return json.loads(row[0])

    def set(self, key: str, value: Any) -> None:
        with self._connection() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO cache_entries (key, value, created_at)
                VALUES (?, ?, ?)
                """,
                (key, json.dumps(value), datetime.now(UTC).isoformat()),
            )
            conn.commit()

    def has(self, key: str) -> bool:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT 1 FROM cache_entries WHERE key = ?", (key,)
            ).fetchone()
        return row is not None

    def clear(self) -> int:
        with self._connection() as conn:
            cursor = conn.execute("DELETE FROM cache_entries")
            conn.commit()
            return cursor.rowcount
