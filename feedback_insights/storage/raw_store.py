"""Append-only SQLite table of raw feedback submissions."""

import logging
import sqlite3
import threading
from pathlib import Path

from ..exceptions import PersistenceError

logger = logging.getLogger(__name__)


class RawFeedbackStore:
    """Durable record of every submission, written before classification."""

    def __init__(self, db_path: Path | str) -> None:
        self.db_path = db_path
        self._lock = threading.Lock()
        try:
            self.conn = sqlite3.connect(str(db_path), check_same_thread=False)
            self.conn.row_factory = sqlite3.Row
        except sqlite3.Error as e:
            raise PersistenceError(f"Cannot open feedback database: {e}") from e

    def _ensure_table(self) -> None:
        self.conn.execute(
            """
            CREATE TABLE IF NOT EXISTS feedback (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                text TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )

    def persist(self, text: str) -> int:
        """Append a submission and return its row id.

        Raises:
            PersistenceError: If the table cannot be created or written

        """
        try:
            with self._lock:
                self._ensure_table()
                cursor = self.conn.execute(
                    "INSERT INTO feedback (text) VALUES (?)", (text,)
                )
                self.conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Failed to persist feedback: {e}")
            raise PersistenceError(str(e)) from e

        return cursor.lastrowid

    def count(self) -> int:
        """Get total number of stored submissions"""
        try:
            with self._lock:
                self._ensure_table()
                row = self.conn.execute("SELECT COUNT(*) FROM feedback").fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(str(e)) from e
        return int(row[0])

    def close(self) -> None:
        """Close database connection"""
        with self._lock:
            self.conn.close()
