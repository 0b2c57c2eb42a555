"""Key-value backends offering only single-key get/put and prefix listing.

No backend here exposes compare-and-swap or multi-key transactions; the
aggregation layer is written against that lowest common denominator.
"""

import logging
import sqlite3
import threading
from abc import ABC, abstractmethod
from pathlib import Path

from ..exceptions import AggregationReadError, AggregationWriteError

logger = logging.getLogger(__name__)


class KeyValueBackend(ABC):
    """Minimal eventually-consistent key-value interface."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value or None if the key is absent."""

    @abstractmethod
    def put(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    def list(self, prefix: str, limit: int) -> list[str]:
        """Return up to ``limit`` keys starting with ``prefix``, in key order."""


class InMemoryKeyValueStore(KeyValueBackend):
    """In-memory key-value storage.

    Individual operations are thread-safe; sequences of operations are not.
    """

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def put(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def list(self, prefix: str, limit: int) -> list[str]:
        with self._lock:
            keys = sorted(k for k in self._data if k.startswith(prefix))
        return keys[:limit]

    def clear(self) -> None:
        """Clear all keys (for testing purposes)"""
        with self._lock:
            self._data.clear()


class SQLiteKeyValueStore(KeyValueBackend):
    """Key-value storage persisted in a single SQLite table."""

    def __init__(self, db_path: Path | str) -> None:
        self.db_path = db_path
        self._lock = threading.Lock()
        self.conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self.create_tables()

    def create_tables(self) -> None:
        with self._lock:
            self.conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )
            self.conn.commit()

    def get(self, key: str) -> str | None:
        try:
            with self._lock:
                row = self.conn.execute(
                    "SELECT value FROM kv WHERE key = ?", (key,)
                ).fetchone()
        except sqlite3.Error as e:
            raise AggregationReadError(f"get {key!r} failed: {e}") from e
        return row[0] if row else None

    def put(self, key: str, value: str) -> None:
        try:
            with self._lock:
                self.conn.execute(
                    "INSERT OR REPLACE INTO kv (key, value) VALUES (?, ?)",
                    (key, value),
                )
                self.conn.commit()
        except sqlite3.Error as e:
            raise AggregationWriteError(f"put {key!r} failed: {e}") from e

    def list(self, prefix: str, limit: int) -> list[str]:
        # substr() comparison avoids LIKE wildcards inside category labels
        try:
            with self._lock:
                rows = self.conn.execute(
                    "SELECT key FROM kv WHERE substr(key, 1, ?) = ? "
                    "ORDER BY key LIMIT ?",
                    (len(prefix), prefix, limit),
                ).fetchall()
        except sqlite3.Error as e:
            raise AggregationReadError(f"list {prefix!r} failed: {e}") from e
        return [row[0] for row in rows]

    def close(self) -> None:
        """Close database connection"""
        with self._lock:
            self.conn.close()
