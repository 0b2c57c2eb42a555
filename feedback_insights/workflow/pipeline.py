import logging
from typing import Any, cast

from langgraph.graph import StateGraph
from langgraph.graph.state import CompiledStateGraph

from ..aggregation.store import AggregationStore
from ..classification.classifier import FeedbackClassifier
from ..exceptions import ValidationError
from ..models.aggregate import IngestResult
from ..models.classification import ClassificationResult
from ..storage.raw_store import RawFeedbackStore
from .nodes.aggregate import make_count_node, make_examples_node, make_summary_node
from .nodes.classify import make_classify_node
from .nodes.persist import make_persist_node
from .state import IngestState

logger = logging.getLogger(__name__)


def build_ingest_workflow(
    raw_store: RawFeedbackStore,
    classifier: FeedbackClassifier,
    aggregation_store: AggregationStore,
) -> CompiledStateGraph[IngestState, Any]:
    """Create the compiled ingest workflow.

    Args:
        raw_store: Durable table the submission is appended to first
        classifier: Produces sentiment, category and summary
        aggregation_store: Per-category count, summary and examples

    Returns:
        Compiled LangGraph workflow

    """
    workflow = StateGraph(IngestState)

    # Add nodes
    workflow.add_node("persist", make_persist_node(raw_store))
    workflow.add_node("classify", make_classify_node(classifier))
    workflow.add_node("count", make_count_node(aggregation_store))
    workflow.add_node("summarize", make_summary_node(aggregation_store))
    workflow.add_node("sample_examples", make_examples_node(aggregation_store))

    # count -> summary -> examples, in that order
    workflow.set_entry_point("persist")
    workflow.add_edge("persist", "classify")
    workflow.add_edge("classify", "count")
    workflow.add_edge("count", "summarize")
    workflow.add_edge("summarize", "sample_examples")
    workflow.set_finish_point("sample_examples")

    return workflow.compile()


def create_initial_state(text: str) -> IngestState:
    """Create initial state for a submission."""
    return {
        "text": text,
        "feedback_id": None,
        "sentiment": None,
        "category": None,
        "summary": None,
        "occurrences": None,
        "category_summary": None,
        "examples": None,
    }


class FeedbackPipeline:
    """Runs one submission through persist, classify and aggregate."""

    def __init__(
        self,
        raw_store: RawFeedbackStore,
        classifier: FeedbackClassifier,
        aggregation_store: AggregationStore,
    ) -> None:
        self.raw_store = raw_store
        self.workflow = build_ingest_workflow(raw_store, classifier, aggregation_store)

    def process(self, text: str | None) -> IngestResult:
        """Ingest a submission.

        Raises:
            ValidationError: If ``text`` is missing or empty
            PersistenceError: If the raw submission could not be stored

        """
        if not text:
            raise ValidationError('Missing "text" query parameter')

        state = cast(IngestState, self.workflow.invoke(create_initial_state(text)))
        defaults = ClassificationResult.default()

        return IngestResult(
            text=text,
            sentiment=state.get("sentiment") or defaults.sentiment,
            category=state.get("category") or defaults.category,
            summary=state.get("summary") or defaults.summary,
            category_summary=state.get("category_summary") or "",
            occurrences=state.get("occurrences") or 0,
            examples=state.get("examples") or [],
        )
