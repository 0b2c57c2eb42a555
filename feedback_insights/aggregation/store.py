"""Per-category aggregates kept in a key-value backend.

Each category owns three independent keys (count, summary, examples), and
every update is a plain read-modify-write against ``get``/``put``. In the
default best-effort mode two concurrent updates of the same key may both
read the same prior value, so one of them is lost. Serialized mode attaches
a lock to each key, which removes that race within a single process.

Write-path failures are logged and swallowed: the affected field is simply
not updated for this submission.
"""

import json
import logging
import random
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from ..classification.merger import SummaryMerger
from ..config import (
    COUNT_PREFIX,
    EXAMPLES_PREFIX,
    EXAMPLES_SEEN_PREFIX,
    LIST_LIMIT,
    MAX_EXAMPLES,
    SUMMARY_PREFIX,
    ConsistencyMode,
    SamplingMode,
)
from ..storage.kv_store import KeyValueBackend
from .sampler import add_example, add_example_reservoir

logger = logging.getLogger(__name__)


def parse_count(value: str | None) -> int:
    """Decode a stored counter; absent, non-numeric or negative means 0."""
    if value is None:
        return 0
    try:
        return max(int(value.strip()), 0)
    except ValueError:
        return 0


def parse_examples(value: str | None) -> list[str] | None:
    """Decode a stored example set, or None if absent or malformed."""
    if value is None:
        return None
    try:
        data = json.loads(value)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, list) or not all(isinstance(x, str) for x in data):
        return None
    return data


class KeyLocks:
    """One lock per storage key, created on first use."""

    def __init__(self) -> None:
        self._locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
        with lock:
            yield


class AggregationStore:
    """Maintains count, rolling summary and examples for each category."""

    def __init__(
        self,
        backend: KeyValueBackend,
        merger: SummaryMerger,
        consistency_mode: ConsistencyMode = ConsistencyMode.BEST_EFFORT,
        sampling_mode: SamplingMode = SamplingMode.BOUNDED_RANDOM,
        rng: random.Random | None = None,
    ) -> None:
        self.backend = backend
        self.merger = merger
        self.consistency_mode = consistency_mode
        self.sampling_mode = sampling_mode
        self.rng = rng
        self._locks = KeyLocks()

    @contextmanager
    def _exclusive(self, key: str) -> Iterator[None]:
        if self.consistency_mode is ConsistencyMode.SERIALIZED:
            with self._locks.hold(key):
                yield
        else:
            yield

    # ------------------------------------------------------------------
    # Occurrences
    # ------------------------------------------------------------------
    def increment_count(self, category: str) -> int:
        """Add one to the category's counter and return the new value.

        Returns 0 if the read or the write failed. A failed read skips the
        write so the stored counter is never reset.
        """
        key = COUNT_PREFIX + category
        with self._exclusive(key):
            try:
                existing = self.backend.get(key)
            except Exception as e:
                logger.warning(f"Count read failed for {category!r}: {e}")
                return 0

            new_count = parse_count(existing) + 1
            try:
                self.backend.put(key, str(new_count))
            except Exception as e:
                logger.warning(f"Count write failed for {category!r}: {e}")
                return 0

        return new_count

    def read_count(self, category: str) -> int:
        """Return the stored count, 0 if absent or unparsable.

        Storage errors propagate to the caller.
        """
        return parse_count(self.backend.get(COUNT_PREFIX + category))

    # ------------------------------------------------------------------
    # Rolling summary
    # ------------------------------------------------------------------
    def merge_summary(self, category: str, new_summary: str) -> str:
        """Fold ``new_summary`` into the category's rolling summary."""
        key = SUMMARY_PREFIX + category
        with self._exclusive(key):
            try:
                existing = self.backend.get(key)
            except Exception as e:
                logger.warning(f"Summary read failed for {category!r}: {e}")
                return new_summary

            if existing is None:
                try:
                    self.backend.put(key, new_summary)
                except Exception as e:
                    logger.warning(f"Summary write failed for {category!r}: {e}")
                return new_summary

            merged = self.merger.try_merge(existing, new_summary)
            if merged is None:
                logger.info(f"Keeping existing summary for {category!r}")
                return existing

            try:
                self.backend.put(key, merged)
            except Exception as e:
                logger.warning(f"Summary write failed for {category!r}: {e}")
                return existing

        return merged

    def read_summary(self, category: str) -> str | None:
        return self.backend.get(SUMMARY_PREFIX + category)

    # ------------------------------------------------------------------
    # Examples
    # ------------------------------------------------------------------
    def update_examples(self, category: str, text: str) -> list[str]:
        """Offer ``text`` to the category's example set and persist it.

        Returns the stored set, or ``[]`` if it could not be read or written.
        """
        key = EXAMPLES_PREFIX + category
        with self._exclusive(key):
            try:
                current = parse_examples(self.backend.get(key))
                seen = self._read_seen(category)
            except Exception as e:
                logger.warning(f"Examples read failed for {category!r}: {e}")
                return []

            if self.sampling_mode is SamplingMode.RESERVOIR:
                examples = add_example_reservoir(
                    current, text, seen, capacity=MAX_EXAMPLES, rng=self.rng
                )
            else:
                examples = add_example(
                    current, text, capacity=MAX_EXAMPLES, rng=self.rng
                )

            try:
                self.backend.put(key, json.dumps(examples))
            except Exception as e:
                logger.warning(f"Examples write failed for {category!r}: {e}")
                return []

            if self.sampling_mode is SamplingMode.RESERVOIR:
                try:
                    self.backend.put(EXAMPLES_SEEN_PREFIX + category, str(seen + 1))
                except Exception as e:
                    logger.warning(f"Examples seen counter write failed for {category!r}: {e}")

        return examples

    def _read_seen(self, category: str) -> int:
        if self.sampling_mode is not SamplingMode.RESERVOIR:
            return 0
        return parse_count(self.backend.get(EXAMPLES_SEEN_PREFIX + category))

    def read_examples(self, category: str) -> list[str]:
        """Return the stored examples, ``[]`` if absent or malformed."""
        return parse_examples(self.backend.get(EXAMPLES_PREFIX + category)) or []

    # ------------------------------------------------------------------
    # Enumeration
    # ------------------------------------------------------------------
    def list_categories(self, prefix: str = COUNT_PREFIX) -> list[str]:
        """Scan up to LIST_LIMIT stored category names.

        This is a snapshot of storage at call time, not a live query.
        """
        keys = self.backend.list(prefix, LIST_LIMIT)
        return [k[len(prefix):] if k.startswith(prefix) else k for k in keys]
