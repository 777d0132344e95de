"""Aggregate worker: raw payload in, normalized jurisdiction collection out."""

from typing import Any, List, Optional

from pydantic import BaseModel
import structlog

from ..base import BaseWorker
from ...models.jurisdiction import JurisdictionStatus, PayloadShape, ValidationReport
from ...models.patent import PatentApplication
from ...utils.aggregator import JurisdictionAggregator
from ...utils.errors import JurisdictionMapError
from ...utils.normalizer import JurisdictionNormalizer
from ...utils.observability import metrics, trace_span, track_metrics
from ...utils.shape_detector import detect_shape
from ...utils.storage import JurisdictionStore
from ...utils.validator import PayloadValidator

logger = structlog.get_logger(__name__)


class AggregateRequest(BaseModel):
    """Request model for running a payload through the pipeline."""
    payload: Any
    dry_run: bool = False


class AggregateResponse(BaseModel):
    """Response model for a pipeline run."""
    status: str
    shape: PayloadShape
    report: ValidationReport
    collection: List[JurisdictionStatus]
    stored: bool


class AggregateWorker(BaseWorker):
    """Worker that detects, validates and aggregates jurisdiction payloads."""

    name = "aggregate_worker"

    def __init__(self, store: JurisdictionStore, normalizer: Optional[JurisdictionNormalizer] = None):
        super().__init__()
        self.store = store
        self.normalizer = normalizer or JurisdictionNormalizer()
        self.validator = PayloadValidator(self.normalizer)
        self.aggregator = JurisdictionAggregator(self.normalizer)

    @trace_span("jurisdiction.process_payload")
    async def process_message(self, message: AggregateRequest) -> AggregateResponse:
        """Run a payload through the pipeline and replace the stored collection."""
        shape = None
        try:
            detected = detect_shape(message.payload)
            shape = detected.shape

            validated = self.validator.validate(detected)
            metrics.record_report(validated.report)

            if shape == PayloadShape.JURISDICTION_STATUS:
                collection = validated.statuses
            else:
                collection = self.aggregate(validated.applications)

            stored = False
            if not message.dry_run:
                before = self.store.revision
                collection = self.store.replace_all(collection)
                stored = self.store.revision != before
                self._update_gauges(collection)

            metrics.payloads_processed.labels(shape=shape.value, status="success").inc()
            logger.info("Payload processed",
                        shape=shape.value,
                        jurisdictions=len(collection),
                        stored=stored)

            return AggregateResponse(
                status="success",
                shape=shape,
                report=validated.report,
                collection=collection,
                stored=stored,
            )

        except JurisdictionMapError as e:
            metrics.payloads_processed.labels(
                shape=shape.value if shape else "unknown", status=e.error
            ).inc()
            report = getattr(e, "report", None)
            if report is not None:
                metrics.record_report(report)
            logger.warning("Payload rejected", error=e.error, message=e.message)
            raise

    @track_metrics("aggregation", {"operation": "aggregate"})
    def aggregate(self, applications: List[PatentApplication]) -> List[JurisdictionStatus]:
        return self.aggregator.aggregate(applications)

    def _update_gauges(self, collection: List[JurisdictionStatus]):
        active = sum(1 for record in collection if record.active)
        metrics.jurisdictions_stored.labels(active="true").set(active)
        metrics.jurisdictions_stored.labels(active="false").set(len(collection) - active)
