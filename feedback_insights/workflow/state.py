from typing import TypedDict


class IngestState(TypedDict):
    """State that flows through the ingest workflow."""

    # Input
    text: str

    # Raw persistence
    feedback_id: int | None

    # Classification results
    sentiment: str | None  # "positive", "neutral", "negative", "unknown"
    category: str | None
    summary: str | None

    # Aggregate fields as seen by this submission
    occurrences: int | None
    category_summary: str | None
    examples: list[str] | None
