"""Classification and summary merging on top of the external model."""

from .classifier import FeedbackClassifier
from .merger import SummaryMerger
from .parsing import Malformed, Parsed, extract_json_object

__all__ = [
    "FeedbackClassifier",
    "Malformed",
    "Parsed",
    "SummaryMerger",
    "extract_json_object",
]
