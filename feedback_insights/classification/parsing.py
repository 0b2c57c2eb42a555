"""Tolerant extraction of a JSON object from free-form model output.

Models asked for "JSON only" still wrap it in prose or code fences, so only
the span between the first ``{`` and the last ``}`` is parsed.
"""

import json
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Parsed:
    """A JSON object successfully extracted from model output."""

    data: dict[str, Any]


@dataclass(frozen=True)
class Malformed:
    """Model output that could not be turned into a JSON object."""

    raw: str
    reason: str


ParseOutcome = Parsed | Malformed


def extract_json_object(raw: str | None) -> ParseOutcome:
    """Parse the outermost ``{...}`` span of ``raw``.

    Args:
        raw: Raw response text from the model

    Returns:
        Parsed with the decoded object, or Malformed describing why not

    """
    if not raw or not raw.strip():
        return Malformed(raw or "", "empty response")

    first = raw.find("{")
    last = raw.rfind("}")
    if first == -1 or last == -1 or last < first:
        return Malformed(raw, "no JSON object found")

    try:
        data = json.loads(raw[first : last + 1])
    except json.JSONDecodeError as e:
        return Malformed(raw, f"invalid JSON: {e.msg}")

    if not isinstance(data, dict):
        return Malformed(raw, "JSON value is not an object")

    return Parsed(data)


def response_text(result: Any) -> str | None:
    """Pull the ``response`` string out of a service result, if there is one."""
    if isinstance(result, str):
        return result
    if isinstance(result, dict):
        response = result.get("response")
        if isinstance(response, str):
            return response
    return None
