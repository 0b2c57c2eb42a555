import logging
from collections.abc import Callable

from ...storage.raw_store import RawFeedbackStore
from ..state import IngestState

logger = logging.getLogger(__name__)


def make_persist_node(raw_store: RawFeedbackStore) -> Callable[[IngestState], dict]:
    """Create the node that appends the raw submission.

    PersistenceError propagates out of the workflow; nothing downstream runs.
    """

    def persist_feedback(state: IngestState) -> dict:
        feedback_id = raw_store.persist(state["text"])
        logger.debug(f"Stored feedback #{feedback_id}")
        return {"feedback_id": feedback_id}

    return persist_feedback
