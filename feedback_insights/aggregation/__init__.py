"""Per-category aggregate maintenance and query views."""

from .sampler import add_example, add_example_reservoir
from .store import AggregationStore, KeyLocks
from .views import QueryViews, render_insights_html

__all__ = [
    "AggregationStore",
    "KeyLocks",
    "QueryViews",
    "add_example",
    "add_example_reservoir",
    "render_insights_html",
]
