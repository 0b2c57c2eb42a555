"""LangGraph workflow components for feedback ingestion."""

from .pipeline import FeedbackPipeline, build_ingest_workflow
from .state import IngestState

__all__ = ["FeedbackPipeline", "IngestState", "build_ingest_workflow"]
