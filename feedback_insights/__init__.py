"""Feedback Insights - classify feedback and aggregate it per category."""

from .config import MODEL_CONFIG, ConsistencyMode, SamplingMode
from .exceptions import (
    AggregationError,
    AggregationReadError,
    AggregationWriteError,
    ClassificationError,
    FeedbackInsightsError,
    MergeError,
    PersistenceError,
    QueryError,
    ValidationError,
)

__version__ = "0.1.0"
__all__ = [
    "MODEL_CONFIG",
    "AggregationError",
    "AggregationReadError",
    "AggregationWriteError",
    "ClassificationError",
    "ConsistencyMode",
    "FeedbackInsightsError",
    "MergeError",
    "PersistenceError",
    "QueryError",
    "SamplingMode",
    "ValidationError",
]
