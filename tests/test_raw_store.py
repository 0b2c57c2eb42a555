"""Tests for the raw feedback table."""

import pytest

from feedback_insights.exceptions import PersistenceError
from feedback_insights.storage.raw_store import RawFeedbackStore


class TestRawFeedbackStore:
    """Test cases for RawFeedbackStore"""

    def test_persist_returns_increasing_ids(self, raw_store):
        first = raw_store.persist("slow checkout")
        second = raw_store.persist("great support")
        assert second > first

    def test_count(self, raw_store):
        assert raw_store.count() == 0
        raw_store.persist("a")
        raw_store.persist("b")
        assert raw_store.count() == 2

    def test_persist_failure_raises(self, tmp_path):
        store = RawFeedbackStore(tmp_path / "feedback.db")
        store.close()
        with pytest.raises(PersistenceError):
            store.persist("text")
