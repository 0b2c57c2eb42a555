import logging
from collections.abc import Callable

from ...classification.classifier import FeedbackClassifier
from ..state import IngestState

logger = logging.getLogger(__name__)


def make_classify_node(
    classifier: FeedbackClassifier,
) -> Callable[[IngestState], dict]:
    """Create the node that classifies the submission (never fails)."""

    def classify_feedback(state: IngestState) -> dict:
        result = classifier.classify(state["text"])
        if result.is_default:
            logger.info(f"Feedback #{state.get('feedback_id')} fell back to defaults")
        else:
            logger.info(
                f"Feedback #{state.get('feedback_id')} classified as "
                f"{result.category!r} ({result.sentiment})"
            )
        return result.to_dict()

    return classify_feedback
