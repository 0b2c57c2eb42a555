"""Workflow nodes that update the category aggregate.

Each node owns exactly one field so a failure in one never blocks the next.
"""

from collections.abc import Callable

from ...aggregation.store import AggregationStore
from ..state import IngestState

Node = Callable[[IngestState], dict]


def make_count_node(store: AggregationStore) -> Node:
    def increment_occurrences(state: IngestState) -> dict:
        return {"occurrences": store.increment_count(state["category"])}

    return increment_occurrences


def make_summary_node(store: AggregationStore) -> Node:
    def merge_category_summary(state: IngestState) -> dict:
        merged = store.merge_summary(state["category"], state["summary"])
        return {"category_summary": merged}

    return merge_category_summary


def make_examples_node(store: AggregationStore) -> Node:
    def update_category_examples(state: IngestState) -> dict:
        return {"examples": store.update_examples(state["category"], state["text"])}

    return update_category_examples
