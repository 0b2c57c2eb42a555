"""Storage collaborators: key-value aggregates and the raw feedback table."""

from .kv_store import InMemoryKeyValueStore, KeyValueBackend, SQLiteKeyValueStore
from .raw_store import RawFeedbackStore

__all__ = [
    "InMemoryKeyValueStore",
    "KeyValueBackend",
    "RawFeedbackStore",
    "SQLiteKeyValueStore",
]
