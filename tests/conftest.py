"""Shared fixtures for the Feedback Insights test suite."""

import random

import pytest

from feedback_insights.aggregation.store import AggregationStore
from feedback_insights.classification.classifier import FeedbackClassifier
from feedback_insights.classification.merger import SummaryMerger
from feedback_insights.storage.raw_store import RawFeedbackStore
from tests.fakes import (
    FlakyBackend,
    ScriptedService,
    classification_response,
    merge_response,
)


@pytest.fixture
def backend():
    """Create a fault-injectable in-memory backend."""
    return FlakyBackend()


@pytest.fixture
def service():
    """A service that files everything under billing and merges deterministically."""
    return ScriptedService(
        classify=classification_response("billing"),
        merge=merge_response("Merged billing summary."),
    )


@pytest.fixture
def aggregation_store(backend, service):
    """Create an AggregationStore with a seeded random source."""
    return AggregationStore(backend, SummaryMerger(service), rng=random.Random(42))


@pytest.fixture
def classifier(service):
    return FeedbackClassifier(service)


@pytest.fixture
def raw_store(tmp_path):
    """Create a RawFeedbackStore in a temporary database."""
    store = RawFeedbackStore(tmp_path / "feedback.db")
    yield store
    store.close()
