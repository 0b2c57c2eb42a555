import logging
import sys
from pathlib import Path

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI

from .aggregation.store import AggregationStore
from .aggregation.views import QueryViews
from .api.server import create_app
from .classification.classifier import FeedbackClassifier
from .classification.merger import SummaryMerger
from .config import LOG_FORMAT, LOG_LEVEL, Settings
from .services.classification_service import (
    ClassificationService,
    MockClassificationService,
    OpenAIClassificationService,
)
from .storage.kv_store import InMemoryKeyValueStore, KeyValueBackend, SQLiteKeyValueStore
from .storage.raw_store import RawFeedbackStore
from .workflow.pipeline import FeedbackPipeline

logger = logging.getLogger(__name__)


def build_app(settings: Settings) -> FastAPI:
    """Assemble stores, model adapters and the HTTP app from settings."""
    service: ClassificationService
    if settings.use_mock_classifier:
        logger.warning("Using mock classifier (no OPENAI_API_KEY or USE_MOCK_CLASSIFIER set)")
        service = MockClassificationService()
    else:
        service = OpenAIClassificationService()

    backend: KeyValueBackend
    if settings.kv_path is not None:
        backend = SQLiteKeyValueStore(settings.kv_path)
    else:
        backend = InMemoryKeyValueStore()

    aggregation_store = AggregationStore(
        backend,
        SummaryMerger(service),
        consistency_mode=settings.consistency_mode,
        sampling_mode=settings.sampling_mode,
    )
    pipeline = FeedbackPipeline(
        RawFeedbackStore(settings.db_path),
        FeedbackClassifier(service),
        aggregation_store,
    )
    logger.info(
        f"Aggregation running in {settings.consistency_mode.value} mode "
        f"with {settings.sampling_mode.value} sampling"
    )
    return create_app(pipeline, QueryViews(aggregation_store))


def main() -> None:
    """Launch the Feedback Insights HTTP service."""
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT, stream=sys.stdout)

    # Suppress HTTP request logging from OpenAI/httpx
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)

    env_path = Path.cwd() / ".env"
    load_dotenv(env_path)

    settings = Settings.from_env()
    uvicorn.run(build_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
