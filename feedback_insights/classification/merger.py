"""Rolling category summaries merged by the external model."""

import logging
from collections.abc import Mapping
from typing import Any

from ..config import MODEL_CONFIG
from ..exceptions import MergeError
from ..services.classification_service import ClassificationService
from ..utils.error_handling import truncate_for_log
from .parsing import Malformed, extract_json_object, response_text

logger = logging.getLogger(__name__)

MERGE_SYSTEM_PROMPT = (
    "You are a strict JSON-only assistant. Respond with EXACTLY one JSON object "
    "and nothing else. The object MUST have key \"merged_summary\" with one "
    "concise sentence that merges the two summaries. Do not include "
    "explanations or extra text."
)


class SummaryMerger:
    """Combines an existing rolling summary with a new one.

    A failed merge returns the existing summary so prior knowledge is kept.
    """

    def __init__(
        self, service: ClassificationService, model: str | None = None
    ) -> None:
        self.service = service
        self.model = model or str(MODEL_CONFIG["classification_model"])

    def merge(self, existing: str, incoming: str) -> str:
        """Merge two summaries into one sentence, or return ``existing``."""
        merged = self.try_merge(existing, incoming)
        return existing if merged is None else merged

    def try_merge(self, existing: str, incoming: str) -> str | None:
        """Merge two summaries, returning None when the model output is unusable."""
        messages = [
            {"role": "system", "content": MERGE_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": (
                    "Merge the existing summary and the new summary into one "
                    "concise sentence as the merged summary.\n\n"
                    f"Existing summary: {existing}\n\nNew summary: {incoming}"
                ),
            },
        ]

        try:
            result = self.service.run(self.model, messages=messages)
            return self._extract_merged(result)
        except MergeError as e:
            logger.warning(f"Summary merge failed: {e}")
            return None
        except Exception as e:
            logger.warning(f"Summary merge call failed: {e}")
            return None

    @staticmethod
    def _extract_merged(result: Any) -> str:
        # Some backends hand back the structured object directly
        if isinstance(result, Mapping):
            direct = result.get("merged_summary")
            if isinstance(direct, str) and direct.strip():
                return direct.strip()

        raw = response_text(result)
        if raw is None or not raw.strip():
            raise MergeError("empty response")

        outcome = extract_json_object(raw)
        if isinstance(outcome, Malformed):
            raise MergeError(f"{outcome.reason}: {truncate_for_log(raw)}")

        merged = outcome.data.get("merged_summary")
        if not isinstance(merged, str) or not merged.strip():
            raise MergeError("no merged_summary in output")

        return merged.strip()
