"""
Main FastAPI application - Entry point
"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from .config import (
    API_HOST, API_PORT, API_TITLE, API_DESCRIPTION, API_VERSION, ENVIRONMENT,
    LOG_LEVEL, SEED_SAMPLE_DATA, SENTRY_DSN, TRACING_ENABLED,
    UPSTREAM_API_URL, UPSTREAM_TIMEOUT_SECONDS
)
from .api_endpoints import (
    root, get_collection, post_collection, preview_collection, get_collection_stats,
    get_tooltip, fetch_collection, get_compound, post_compound,
    get_compound_applications, get_health, metrics_endpoint
)
from .sample_data import SAMPLE_COMPOUND
from .utils.error_tracking import capture_exception, setup_sentry
from .utils.errors import JurisdictionMapError
from .utils.normalizer import JurisdictionNormalizer
from .utils.observability import (
    HealthChecker, configure_logging, log_error, log_event, metrics, setup_tracing
)
from .utils.pubchem_client import PubChemClient
from .utils.storage import CompoundStore, JurisdictionStore
from .workers.aggregate_worker.worker import AggregateRequest, AggregateWorker
from .workers.fetch_worker.worker import FetchWorker

logger = structlog.get_logger(__name__)


class ServiceState:
    """State and workers shared by the request handlers of one app."""

    def __init__(self, client: PubChemClient, seed_sample_data: bool):
        self.seed_sample_data = seed_sample_data
        self.normalizer = JurisdictionNormalizer()
        self.store = JurisdictionStore()
        self.compound_store = CompoundStore(SAMPLE_COMPOUND if seed_sample_data else None)
        self.aggregate_worker = AggregateWorker(self.store, self.normalizer)
        self.fetch_worker = FetchWorker(client, self.compound_store, self.aggregate_worker)
        self.health_checker = HealthChecker()
        self.health_checker.register_check("aggregate_worker", self.aggregate_worker.health_check)
        self.health_checker.register_check("fetch_worker", self.fetch_worker.health_check)

    async def start(self):
        await self.aggregate_worker.start()
        await self.fetch_worker.start()

        if self.seed_sample_data:
            await self.aggregate_worker.handle(AggregateRequest(payload=self.compound_store.get()))

    async def stop(self):
        await self.fetch_worker.stop()
        await self.aggregate_worker.stop()


def create_app(client: Optional[PubChemClient] = None,
               seed_sample_data: bool = SEED_SAMPLE_DATA) -> FastAPI:
    """Build the API with its own state holder."""
    app = FastAPI(
        title=API_TITLE,
        description=API_DESCRIPTION,
        version=API_VERSION
    )
    app.state.service = ServiceState(
        client or PubChemClient(UPSTREAM_API_URL, UPSTREAM_TIMEOUT_SECONDS),
        seed_sample_data,
    )

    # === Register Routes ===
    app.add_api_route("/", root, methods=["GET"])
    app.add_api_route("/collection", get_collection, methods=["GET"])
    app.add_api_route("/collection", post_collection, methods=["POST"])
    app.add_api_route("/collection/preview", preview_collection, methods=["POST"])
    app.add_api_route("/collection/stats", get_collection_stats, methods=["GET"])
    app.add_api_route("/collection/fetch/{cid}", fetch_collection, methods=["POST"])
    app.add_api_route("/collection/{code}/tooltip", get_tooltip, methods=["GET"])
    app.add_api_route("/compound", get_compound, methods=["GET"])
    app.add_api_route("/compound", post_compound, methods=["POST"])
    app.add_api_route("/compound/applications", get_compound_applications, methods=["GET"])
    app.add_api_route("/health", get_health, methods=["GET"])
    app.add_api_route("/metrics", metrics_endpoint, methods=["GET"])

    @app.middleware("http")
    async def record_request_metrics(request: Request, call_next):
        # Unhandled exceptions escape call_next and are answered with a 500
        status = "500"
        try:
            with metrics.request_duration.labels(method=request.method, endpoint=request.url.path).time():
                response = await call_next(request)
            status = str(response.status_code)
            return response
        finally:
            metrics.request_count.labels(
                method=request.method, endpoint=request.url.path, status=status
            ).inc()

    @app.exception_handler(JurisdictionMapError)
    async def jurisdiction_error_handler(request: Request, exc: JurisdictionMapError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_response().model_dump())

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        log_error("unhandled_exception", exc, path=request.url.path)
        capture_exception(exc, {"path": request.url.path})
        return JSONResponse(
            status_code=500,
            content={"error": "InternalError", "message": "Internal server error.", "details": []}
        )

    @app.on_event("startup")
    async def startup_event():
        """Run on application startup"""
        setup_sentry(SENTRY_DSN, environment=ENVIRONMENT, service_version=API_VERSION)
        if TRACING_ENABLED:
            setup_tracing("jurisdiction-map", API_VERSION)
        await app.state.service.start()
        log_event("service_started",
                  title=API_TITLE,
                  upstream=UPSTREAM_API_URL,
                  jurisdictions=len(app.state.service.store))

    @app.on_event("shutdown")
    async def shutdown_event():
        """Run on application shutdown"""
        await app.state.service.stop()
        log_event("service_stopped", title=API_TITLE)

    return app


configure_logging(LOG_LEVEL)
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=API_HOST, port=API_PORT)
