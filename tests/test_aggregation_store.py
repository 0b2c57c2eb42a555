"""Tests for the AggregationStore read-modify-write protocol."""

import json
import random

import pytest

from feedback_insights.aggregation.store import AggregationStore, parse_count, parse_examples
from feedback_insights.classification.merger import SummaryMerger
from feedback_insights.config import ConsistencyMode, SamplingMode
from feedback_insights.exceptions import AggregationReadError
from tests.fakes import ScriptedService, merge_response


class TestParsing:
    """Test suite for stored value decoding."""

    @pytest.mark.parametrize(
        "value, expected",
        [(None, 0), ("", 0), ("abc", 0), ("-4", 0), ("7", 7), (" 12 ", 12)],
    )
    def test_parse_count(self, value, expected):
        assert parse_count(value) == expected

    def test_parse_examples(self):
        assert parse_examples(None) is None
        assert parse_examples("not json") is None
        assert parse_examples('{"a": 1}') is None
        assert parse_examples("[1, 2]") is None
        assert parse_examples('["a", "b"]') == ["a", "b"]


class TestIncrementCount:
    """Test suite for occurrence counting."""

    def test_first_sight_is_one(self, aggregation_store, backend):
        assert aggregation_store.increment_count("billing") == 1
        assert backend.get("category:billing") == "1"

    def test_increments(self, aggregation_store):
        for expected in range(1, 5):
            assert aggregation_store.increment_count("billing") == expected
        assert aggregation_store.read_count("billing") == 4

    def test_non_numeric_stored_value_treated_as_zero(self, aggregation_store, backend):
        backend.put("category:billing", "garbage")
        assert aggregation_store.increment_count("billing") == 1

    def test_negative_stored_value_treated_as_zero(self, aggregation_store, backend):
        backend.put("category:billing", "-10")
        assert aggregation_store.increment_count("billing") == 1

    def test_read_failure_returns_zero_and_keeps_stored_count(self, aggregation_store, backend):
        backend.put("category:billing", "5")
        backend.fail_get = lambda key: key == "category:billing"

        assert aggregation_store.increment_count("billing") == 0

        backend.fail_get = lambda key: False
        assert backend.get("category:billing") == "5"

    def test_transient_read_failure_does_not_reset_count(self, aggregation_store, backend):
        for _ in range(50):
            aggregation_store.increment_count("billing")

        backend.fail_get = lambda key: key == "category:billing"
        aggregation_store.increment_count("billing")
        backend.fail_get = lambda key: False

        assert aggregation_store.increment_count("billing") == 51

    def test_write_failure_returns_zero_and_leaves_value(self, aggregation_store, backend):
        backend.put("category:billing", "5")
        backend.fail_put = lambda key: True

        assert aggregation_store.increment_count("billing") == 0
        assert aggregation_store.read_count("billing") == 5

    def test_read_count_absent(self, aggregation_store):
        assert aggregation_store.read_count("missing") == 0

    def test_read_count_propagates_storage_errors(self, aggregation_store, backend):
        backend.fail_get = lambda key: True
        with pytest.raises(AggregationReadError):
            aggregation_store.read_count("billing")

    def test_categories_are_independent(self, aggregation_store):
        aggregation_store.increment_count("billing")
        aggregation_store.increment_count("billing")
        aggregation_store.increment_count("support")

        assert aggregation_store.read_count("billing") == 2
        assert aggregation_store.read_count("support") == 1


class TestMergeSummary:
    """Test suite for rolling summaries."""

    def test_first_summary_stored_verbatim(self, aggregation_store, backend, service):
        result = aggregation_store.merge_summary("billing", "Checkout is slow.")

        assert result == "Checkout is slow."
        assert backend.get("category_summary:billing") == "Checkout is slow."
        assert service.merge_calls == []

    def test_subsequent_summary_merged(self, aggregation_store, backend, service):
        aggregation_store.merge_summary("billing", "Checkout is slow.")
        result = aggregation_store.merge_summary("billing", "Charged twice.")

        assert result == "Merged billing summary."
        assert backend.get("category_summary:billing") == "Merged billing summary."
        assert len(service.merge_calls) == 1

    def test_merge_failure_keeps_existing(self, backend):
        service = ScriptedService(merge=RuntimeError("merge service down"))
        store = AggregationStore(backend, SummaryMerger(service))
        backend.put("category_summary:billing", "Existing.")

        assert store.merge_summary("billing", "Incoming.") == "Existing."
        assert backend.get("category_summary:billing") == "Existing."

    def test_malformed_merge_does_not_overwrite(self, backend):
        service = ScriptedService(merge={"response": "not json at all"})
        store = AggregationStore(backend, SummaryMerger(service))
        backend.put("category_summary:billing", "Existing.")

        assert store.merge_summary("billing", "Incoming.") == "Existing."
        assert backend.get("category_summary:billing") == "Existing."

    def test_read_failure_returns_new_summary(self, aggregation_store, backend):
        backend.fail_get = lambda key: key.startswith("category_summary:")
        assert aggregation_store.merge_summary("billing", "Incoming.") == "Incoming."

        backend.fail_get = lambda key: False
        assert backend.get("category_summary:billing") is None

    def test_write_failure_on_merge_returns_existing(self, aggregation_store, backend):
        backend.put("category_summary:billing", "Existing.")
        backend.fail_put = lambda key: True

        assert aggregation_store.merge_summary("billing", "Incoming.") == "Existing."
        assert backend.get("category_summary:billing") == "Existing."

    def test_write_failure_on_first_summary(self, aggregation_store, backend):
        backend.fail_put = lambda key: True
        assert aggregation_store.merge_summary("billing", "First.") == "First."
        assert backend.get("category_summary:billing") is None


class TestUpdateExamples:
    """Test suite for example maintenance."""

    def test_first_three_retained(self, aggregation_store, backend):
        for text in ["one", "two", "three"]:
            examples = aggregation_store.update_examples("billing", text)

        assert sorted(examples) == ["one", "three", "two"]
        assert sorted(json.loads(backend.get("category_examples:billing"))) == [
            "one",
            "three",
            "two",
        ]

    def test_fourth_replaces_one(self, aggregation_store):
        for text in ["one", "two", "three"]:
            aggregation_store.update_examples("billing", text)
        examples = aggregation_store.update_examples("billing", "four")

        assert len(examples) == 3
        assert "four" in examples
        assert len({"one", "two", "three"} & set(examples)) == 2

    def test_length_bounded(self, aggregation_store):
        for i in range(20):
            examples = aggregation_store.update_examples("billing", f"text {i}")
            assert len(examples) <= 3
        assert len(aggregation_store.read_examples("billing")) == 3

    def test_corrupt_stored_value_restarts(self, aggregation_store, backend):
        backend.put("category_examples:billing", "{oops")
        assert aggregation_store.update_examples("billing", "fresh") == ["fresh"]

    def test_read_failure_returns_empty(self, aggregation_store, backend):
        backend.put("category_examples:billing", '["kept"]')
        backend.fail_get = lambda key: key.startswith("category_examples:")

        assert aggregation_store.update_examples("billing", "new") == []

        backend.fail_get = lambda key: False
        assert aggregation_store.read_examples("billing") == ["kept"]

    def test_write_failure_returns_empty(self, aggregation_store, backend):
        backend.fail_put = lambda key: True
        assert aggregation_store.update_examples("billing", "new") == []
        assert aggregation_store.read_examples("billing") == []

    def test_reservoir_mode_tracks_seen(self, backend, service):
        store = AggregationStore(
            backend,
            SummaryMerger(service),
            sampling_mode=SamplingMode.RESERVOIR,
            rng=random.Random(3),
        )
        for i in range(5):
            examples = store.update_examples("billing", f"text {i}")

        assert len(examples) == 3
        assert backend.get("category_examples_seen:billing") == "5"

    def test_seen_counter_write_failure_keeps_stored_examples(self, backend, service):
        store = AggregationStore(
            backend, SummaryMerger(service), sampling_mode=SamplingMode.RESERVOIR
        )
        backend.fail_put = lambda key: key.startswith("category_examples_seen:")

        assert store.update_examples("billing", "a") == ["a"]
        assert store.read_examples("billing") == ["a"]
        assert backend.get("category_examples_seen:billing") is None

    def test_bounded_mode_does_not_track_seen(self, aggregation_store, backend):
        aggregation_store.update_examples("billing", "text")
        assert backend.get("category_examples_seen:billing") is None


class TestListCategories:
    """Test suite for category enumeration."""

    def test_lists_category_names(self, aggregation_store):
        for name in ["support", "billing", "ui"]:
            aggregation_store.increment_count(name)
            aggregation_store.merge_summary(name, "s")
            aggregation_store.update_examples(name, "t")

        assert aggregation_store.list_categories() == ["billing", "support", "ui"]

    def test_respects_list_limit(self, aggregation_store, backend, monkeypatch):
        monkeypatch.setattr("feedback_insights.aggregation.store.LIST_LIMIT", 2)
        for name in ["a", "b", "c"]:
            backend.put(f"category:{name}", "1")

        assert aggregation_store.list_categories() == ["a", "b"]

    def test_list_failure_propagates(self, aggregation_store, backend):
        backend.fail_list = True
        with pytest.raises(AggregationReadError):
            aggregation_store.list_categories()

    def test_serialized_mode_behaves_like_best_effort_sequentially(self, backend, service):
        store = AggregationStore(
            backend, SummaryMerger(service), consistency_mode=ConsistencyMode.SERIALIZED
        )
        assert store.increment_count("billing") == 1
        assert store.increment_count("billing") == 2
        assert store.merge_summary("billing", "First.") == "First."
        assert store.update_examples("billing", "text") == ["text"]
