"""Sorted stats and insights listings built by scanning category keys.

Unlike the write path these are all-or-nothing: a storage error anywhere in
the scan fails the whole view with QueryError.
"""

import logging

from jinja2 import Environment, FileSystemLoader

from ..config import TEMPLATES_DIR
from ..exceptions import QueryError
from ..models.aggregate import CategoryInsight, CategoryStat
from .store import AggregationStore

logger = logging.getLogger(__name__)

_jinja_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=True,
)


class QueryViews:
    """Read-only snapshot queries over the aggregation store."""

    def __init__(self, store: AggregationStore) -> None:
        self.store = store

    def list_stats(self) -> list[CategoryStat]:
        """Return every category with its count, highest count first."""
        try:
            items = [
                CategoryStat(category=name, occurrences=self.store.read_count(name))
                for name in self.store.list_categories()
            ]
        except Exception as e:
            logger.error(f"Stats scan failed: {e}")
            raise QueryError(str(e)) from e

        # sort() is stable, ties keep enumeration order
        items.sort(key=lambda item: item.occurrences, reverse=True)
        return items

    def list_insights(self) -> list[CategoryInsight]:
        """Return count, summary and examples per category, highest count first."""
        try:
            items = [
                CategoryInsight(
                    category=name,
                    occurrences=self.store.read_count(name),
                    category_summary=self.store.read_summary(name),
                    examples=self.store.read_examples(name),
                )
                for name in self.store.list_categories()
            ]
        except Exception as e:
            logger.error(f"Insights scan failed: {e}")
            raise QueryError(str(e)) from e

        items.sort(key=lambda item: item.occurrences, reverse=True)
        return items


def render_insights_html(items: list[CategoryInsight]) -> str:
    """Render insights as an HTML table."""
    template = _jinja_env.get_template("insights.html")
    return template.render(items=items)
