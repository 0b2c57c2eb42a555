"""Standardized error handling utilities for the Feedback Insights service."""

from typing import Any


def create_error_response(
    error: Exception | str | None,
    message: str,
) -> dict[str, Any]:
    """Create a standardized error body for the HTTP layer.

    Args:
        error: The error that occurred, if any
        message: Short, stable description of the failure class

    Returns:
        Dictionary with ``error`` and, when available, ``details``

    """
    body: dict[str, Any] = {"error": message}
    if error is None:
        return body

    body["details"] = str(error) if isinstance(error, Exception) else error
    return body


def truncate_for_log(text: str | None, limit: int = 200) -> str:
    """Shorten model output before it goes into a log line."""
    if not text:
        return ""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
