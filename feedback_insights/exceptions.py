"""Custom exceptions for Feedback Insights."""


class FeedbackInsightsError(Exception):
    """Base exception for Feedback Insights."""

    pass


class ValidationError(FeedbackInsightsError):
    """Raised when a submission is missing required input."""

    pass


class PersistenceError(FeedbackInsightsError):
    """Raised when the raw submission cannot be stored."""

    pass


class ClassificationError(FeedbackInsightsError):
    """Raised when calling or parsing the classifier fails."""

    pass


class MergeError(FeedbackInsightsError):
    """Raised when merging two category summaries fails."""

    pass


class AggregationError(FeedbackInsightsError):
    """Base class for key-value storage failures on the aggregation path."""

    pass


class AggregationReadError(AggregationError):
    """Raised when a key-value read fails."""

    pass


class AggregationWriteError(AggregationError):
    """Raised when a key-value write fails."""

    pass


class QueryError(FeedbackInsightsError):
    """Raised when a stats or insights scan fails."""

    pass
