import logging

from pydantic import BaseModel, Field
from pydantic import ValidationError as SchemaError

from ..config import DEFAULT_CATEGORY, MODEL_CONFIG
from ..exceptions import ClassificationError
from ..models.classification import ClassificationResult, Sentiment
from ..services.classification_service import ClassificationService
from ..utils.error_handling import truncate_for_log
from .parsing import Malformed, Parsed, ParseOutcome, extract_json_object, response_text

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a strict JSON-only analyzer. Respond with EXACTLY one JSON object "
    "and nothing else. The object MUST have keys: \"sentiment\" (one of "
    "\"positive\", \"neutral\", or \"negative\"), \"category\" (a short 2-4 word "
    "label), and \"summary\" (one concise sentence). Do not include "
    "explanations, markdown, or surrounding text."
)


class ClassificationPayload(BaseModel):
    """Schema the model is asked to return."""

    sentiment: str = Field(description="One of: positive, neutral, negative")
    category: str = Field(description="Short 2-4 word category label")
    summary: str = Field(description="One concise sentence")


def build_prompt(text: str) -> str:
    """Combine system instructions and the submission into one prompt."""
    user_message = (
        "Analyze the following feedback and return the JSON described above."
        f"\n\nFeedback: {text}"
    )
    return f"{SYSTEM_PROMPT}\n\n{user_message}"


class FeedbackClassifier:
    """Assigns sentiment, category and summary to a feedback submission.

    Never raises: any failure yields ``ClassificationResult.default()`` so
    that classification can't block the rest of the ingest pipeline.
    """

    def __init__(
        self, service: ClassificationService, model: str | None = None
    ) -> None:
        self.service = service
        self.model = model or str(MODEL_CONFIG["classification_model"])

    def classify(self, text: str) -> ClassificationResult:
        """Classify ``text``, falling back to unknown/unknown/N/A on failure."""
        outcome = self.classify_tagged(text)
        if isinstance(outcome, Malformed):
            return ClassificationResult.default()
        return self._to_result(outcome.data)

    def classify_tagged(self, text: str) -> ParseOutcome:
        """Run the model and return the tagged parse outcome.

        A Parsed outcome is only returned when the object also satisfies
        the payload schema.
        """
        try:
            raw = self._request(text)
        except ClassificationError as e:
            logger.warning(f"Classification failed: {e}")
            return Malformed("", str(e))

        outcome = extract_json_object(raw)
        if isinstance(outcome, Malformed):
            logger.warning(
                f"Malformed classifier output ({outcome.reason}): "
                f"{truncate_for_log(raw)}"
            )
            return outcome

        try:
            payload = ClassificationPayload.model_validate(outcome.data)
        except SchemaError as e:
            logger.warning(
                f"Classifier output missing fields: {e.error_count()} error(s) "
                f"in {truncate_for_log(raw)}"
            )
            return Malformed(raw, "schema mismatch")

        return Parsed(payload.model_dump())

    def _request(self, text: str) -> str:
        try:
            result = self.service.run(self.model, input=build_prompt(text))
        except Exception as e:
            raise ClassificationError(f"service error: {e}") from e

        raw = response_text(result)
        if raw is None:
            raise ClassificationError(f"no response text in {type(result).__name__}")
        return raw

    @staticmethod
    def _to_result(data: dict) -> ClassificationResult:
        category = str(data["category"]).strip() or DEFAULT_CATEGORY
        summary = str(data["summary"]).strip()
        return ClassificationResult(
            sentiment=Sentiment.from_string(data["sentiment"]).value,
            category=category,
            summary=summary or ClassificationResult.default().summary,
        )
