"""Fetch worker: pulls a compound envelope upstream and aggregates it."""

from pydantic import BaseModel, Field
import structlog

from ..base import BaseWorker
from ..aggregate_worker.worker import AggregateRequest, AggregateResponse, AggregateWorker
from ...utils.errors import UpstreamFetchFailure
from ...utils.observability import metrics, trace_operation
from ...utils.pubchem_client import PubChemClient
from ...utils.storage import CompoundStore

logger = structlog.get_logger(__name__)


class FetchRequest(BaseModel):
    """Request model for an upstream compound fetch."""
    cid: int = Field(..., gt=0)
    dry_run: bool = False


class FetchWorker(BaseWorker):
    """Worker that refreshes the collection from the upstream chemistry API."""

    name = "fetch_worker"

    def __init__(self, client: PubChemClient, compound_store: CompoundStore,
                 aggregate_worker: AggregateWorker):
        super().__init__()
        self.client = client
        self.compound_store = compound_store
        self.aggregate_worker = aggregate_worker

    async def process_message(self, message: FetchRequest) -> AggregateResponse:
        """Fetch one compound; aggregation only runs once the fetch succeeded."""
        async with trace_operation("jurisdiction.fetch_compound", {"cid": message.cid}):
            try:
                payload = await self.client.fetch_compound(message.cid)
            except UpstreamFetchFailure:
                metrics.upstream_fetches.labels(status="error").inc()
                raise
            metrics.upstream_fetches.labels(status="success").inc()

        response = await self.aggregate_worker.handle(
            AggregateRequest(payload=payload, dry_run=message.dry_run)
        )

        if not message.dry_run:
            self.compound_store.update(payload)

        logger.info("Compound fetched and aggregated",
                    cid=message.cid,
                    jurisdictions=len(response.collection))
        return response
