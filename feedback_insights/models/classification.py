"""Classification types for feedback submissions."""

from dataclasses import dataclass
from enum import Enum

from ..config import DEFAULT_CATEGORY, DEFAULT_SENTIMENT, DEFAULT_SUMMARY


class Sentiment(str, Enum):
    """Sentiment labels the classifier may assign."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"
    UNKNOWN = "unknown"

    @classmethod
    def from_string(cls, value: str | None) -> "Sentiment":
        """Create Sentiment from string value, unknown if unrecognised."""
        if not value:
            return cls.UNKNOWN
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class ClassificationResult:
    """Sentiment, category and one-sentence summary for a single submission."""

    sentiment: str = DEFAULT_SENTIMENT
    category: str = DEFAULT_CATEGORY
    summary: str = DEFAULT_SUMMARY

    @classmethod
    def default(cls) -> "ClassificationResult":
        """The fallback used whenever classification fails."""
        return cls()

    @property
    def is_default(self) -> bool:
        return self == ClassificationResult.default()

    def to_dict(self) -> dict[str, str]:
        return {
            "sentiment": self.sentiment,
            "category": self.category,
            "summary": self.summary,
        }
