"""HTTP surface: ingest a submission, list stats, list insights."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse

from .. import __version__
from ..aggregation.views import QueryViews, render_insights_html
from ..config import SERVICE_NAME
from ..exceptions import PersistenceError, QueryError, ValidationError
from ..utils.error_handling import create_error_response
from ..workflow.pipeline import FeedbackPipeline

logger = logging.getLogger(__name__)


class InsightsServer:
    """Wires the ingest pipeline and query views to FastAPI routes."""

    def __init__(self, pipeline: FeedbackPipeline, views: QueryViews) -> None:
        self.pipeline = pipeline
        self.views = views

        self.app = FastAPI(title=SERVICE_NAME, version=__version__)
        self._register_routes()

    def _register_routes(self) -> None:
        """Register API routes."""
        self.app.add_api_route("/stats", self.get_stats, methods=["GET"])
        self.app.add_api_route("/insights", self.get_insights, methods=["GET"])
        self.app.add_api_route("/health", self.health, methods=["GET"])
        self.app.add_api_route("/", self.ingest, methods=["GET"])

    # Handlers are sync so FastAPI runs each request in its threadpool
    def get_stats(self) -> JSONResponse:
        """Category counts, highest first."""
        try:
            items = self.views.list_stats()
        except QueryError as e:
            return JSONResponse(create_error_response(e, "KV read error"), status_code=500)
        return JSONResponse([item.to_dict() for item in items])

    def get_insights(self, request: Request, view: str | None = None):
        """Count, rolling summary and examples per category, as JSON or HTML."""
        try:
            items = self.views.list_insights()
        except QueryError as e:
            return JSONResponse(create_error_response(e, "KV read error"), status_code=500)

        wants_html = "text/html" in request.headers.get("accept", "") or view == "html"
        if wants_html:
            return HTMLResponse(render_insights_html(items))
        return JSONResponse([item.to_dict() for item in items])

    def ingest(self, text: str | None = None) -> JSONResponse:
        """Persist, classify and aggregate a single submission."""
        try:
            result = self.pipeline.process(text)
        except ValidationError as e:
            return JSONResponse(create_error_response(None, str(e)), status_code=400)
        except PersistenceError as e:
            return JSONResponse(create_error_response(e, "Database error"), status_code=500)
        return JSONResponse(result.to_dict())

    def health(self) -> JSONResponse:
        """Health check endpoint, reporting how many submissions are stored."""
        body = {"status": "healthy", "service": SERVICE_NAME, "version": __version__}
        try:
            body["submissions"] = self.pipeline.raw_store.count()
        except PersistenceError as e:
            logger.error(f"Health check failed: {e}")
            body["status"] = "unhealthy"
            return JSONResponse(body, status_code=503)
        return JSONResponse(body)


def create_app(pipeline: FeedbackPipeline, views: QueryViews) -> FastAPI:
    return InsightsServer(pipeline, views).app
