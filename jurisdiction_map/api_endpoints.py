"""
FastAPI route handlers
"""

from typing import List

from fastapi import Path, Request
from fastapi.responses import JSONResponse, Response

from .models.jurisdiction import CollectionStats, JurisdictionStatus, TooltipInfo
from .utils.errors import UnrecognizedShape
from .utils.observability import get_metrics
from .utils.presenters import ApplicationStatsPresenter, StatsPresenter, TooltipPresenter
from .utils.shape_detector import parse_json
from .workers.aggregate_worker.worker import AggregateRequest, AggregateResponse
from .workers.fetch_worker.worker import FetchRequest


def _no_compound() -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={"error": "NotFound", "message": "No compound data available", "details": []}
    )


async def root(request: Request):
    """Root endpoint with API information"""
    return {
        "message": request.app.title,
        "version": request.app.version,
        "endpoints": {
            "GET /collection": "Current jurisdiction collection",
            "POST /collection": "Replace the collection from any accepted payload shape",
            "POST /collection/preview": "Run the pipeline without storing",
            "GET /collection/stats": "Collection totals per status and tier",
            "GET /collection/{code}/tooltip": "Hover information for one jurisdiction",
            "POST /collection/fetch/{cid}": "Fetch a compound upstream and replace the collection",
            "GET /compound": "Stored compound envelope",
            "POST /compound": "Replace the stored compound envelope",
            "GET /compound/applications": "Applications of the stored compound",
            "GET /health": "Health checks",
            "GET /metrics": "Prometheus metrics"
        }
    }


async def get_collection(request: Request) -> List[JurisdictionStatus]:
    """Get the current normalized collection"""
    return request.app.state.service.store.get_all()


async def post_collection(request: Request) -> List[JurisdictionStatus]:
    """Run a payload through the pipeline and replace the collection"""
    payload = parse_json(await request.body())
    response = await request.app.state.service.aggregate_worker.handle(
        AggregateRequest(payload=payload)
    )
    return response.collection


async def preview_collection(request: Request) -> AggregateResponse:
    """Run a payload through the pipeline without touching stored state"""
    payload = parse_json(await request.body())
    return await request.app.state.service.aggregate_worker.handle(
        AggregateRequest(payload=payload, dry_run=True)
    )


async def get_collection_stats(request: Request) -> CollectionStats:
    """Get totals for the stored collection"""
    return StatsPresenter().present(request.app.state.service.store.get_all())


async def get_tooltip(code: str, request: Request) -> TooltipInfo:
    """Get hover information for one jurisdiction code"""
    service = request.app.state.service
    return TooltipPresenter(code, service.normalizer).present(service.store.get_all())


async def fetch_collection(request: Request, cid: int = Path(..., gt=0)) -> List[JurisdictionStatus]:
    """Fetch a compound from the upstream API and replace the collection"""
    response = await request.app.state.service.fetch_worker.handle(FetchRequest(cid=cid))
    return response.collection


async def get_compound(request: Request):
    """Get the stored compound envelope"""
    compound = request.app.state.service.compound_store.get()
    if compound is None:
        return _no_compound()
    return compound


async def post_compound(request: Request):
    """Replace the stored compound envelope"""
    payload = parse_json(await request.body())
    results = payload.get("pubchemResults") if isinstance(payload, dict) else None
    if not isinstance(results, dict) or not results.get("currentCompound"):
        raise UnrecognizedShape("Object has no pubchemResults.currentCompound")
    return request.app.state.service.compound_store.update(payload)


async def get_compound_applications(request: Request):
    """Get the applications of the stored compound with their aggregation"""
    service = request.app.state.service
    compound = service.compound_store.get()
    if compound is None:
        return _no_compound()

    extracted = service.aggregate_worker.validator.extract_envelope(compound)
    applications = extracted.applications
    return {
        "applications": applications,
        "stats": ApplicationStatsPresenter().present(applications),
        "jurisdictions": service.aggregate_worker.aggregator.aggregate(applications),
        "report": extracted.report,
    }


async def get_health(request: Request):
    """Run registered health checks"""
    results = await request.app.state.service.health_checker.run_checks()
    healthy = all(result["status"] == "healthy" for result in results.values())
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={"status": "healthy" if healthy else "unhealthy", "checks": results}
    )


async def metrics_endpoint():
    """Expose Prometheus metrics"""
    data, content_type = get_metrics()
    return Response(content=data, media_type=content_type)
