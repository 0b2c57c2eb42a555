"""Per-category aggregate views and the ingest response."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class CategoryStat:
    """Occurrence count for one category."""

    category: str
    occurrences: int

    def to_dict(self) -> dict[str, Any]:
        return {"category": self.category, "occurrences": self.occurrences}


@dataclass
class CategoryInsight:
    """Count, rolling summary and example texts for one category."""

    category: str
    occurrences: int
    category_summary: str | None = None
    examples: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "occurrences": self.occurrences,
            "category_summary": self.category_summary,
            "examples": list(self.examples),
        }


@dataclass
class IngestResult:
    """Everything returned to the caller after a submission is processed.

    Fields beyond ``text`` degrade to their fallbacks when classification or
    aggregation fails; ``success`` stays true once the raw text is persisted.
    """

    text: str
    sentiment: str
    category: str
    summary: str
    category_summary: str
    occurrences: int
    examples: list[str] = field(default_factory=list)
    success: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "text": self.text,
            "sentiment": self.sentiment,
            "category": self.category,
            "summary": self.summary,
            "category_summary": self.category_summary,
            "occurrences": self.occurrences,
            "examples": list(self.examples),
        }
