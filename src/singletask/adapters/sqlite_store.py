"""SQLite key-value store adapter."""

import logging
import sqlite3
import time
from pathlib import Path

from singletask.errors import PersistenceError

logger = logging.getLogger(__name__)


class SqliteTransaction:
    """
    One SQLite transaction on its own connection.

    The connection is closed on commit, so a transaction must be used from
    a single thread from begin to commit.
    """

    def __init__(self, db_path: Path, writable: bool):
        self._writable = writable
        try:
            self._conn = sqlite3.connect(str(db_path), timeout=30.0, isolation_level=None)
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not open {db_path}: {e}") from e
        try:
            self._conn.execute("BEGIN IMMEDIATE" if writable else "BEGIN")
        except sqlite3.Error as e:
            self._conn.close()
            raise PersistenceError(f"Could not open transaction: {e}") from e

    def get(self, key: str) -> str | None:
        try:
            row = self._conn.execute("SELECT value FROM cache WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Read failed for {key!r}: {e}") from e
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        if not self._writable:
            raise PersistenceError("Cannot write in a read-only transaction")
        try:
            self._conn.execute(
                """
                INSERT INTO cache (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (key, value, time.time()),
            )
        except sqlite3.Error as e:
            raise PersistenceError(f"Write failed for {key!r}: {e}") from e

    def commit(self) -> None:
        try:
            self._conn.execute("COMMIT")
        except sqlite3.Error as e:
            raise PersistenceError(f"Commit failed: {e}") from e
        finally:
            self._conn.close()


class SqliteStore:
    """
    SQLite-backed store.

    Implements KeyValueStore protocol. One row per cache key holding the
    serialized entry; each transaction opens its own connection.
    """

    def __init__(self, db_path: str | Path = "cache.sqlite3"):
        self._db_path = Path(db_path).expanduser()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info(f"SqliteStore ready db={self._db_path}")

    def _ensure_schema(self) -> None:
        try:
            conn = sqlite3.connect(str(self._db_path), timeout=30.0)
            try:
                conn.execute("PRAGMA journal_mode=WAL")
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS cache (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at REAL NOT NULL
                    )
                    """
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not initialise {self._db_path}: {e}") from e

    def begin(self, writable: bool) -> SqliteTransaction:
        return SqliteTransaction(self._db_path, writable)
