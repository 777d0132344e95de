"""Observability utilities for tracing, metrics, and logging."""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import Dict, Any, Optional
from functools import wraps

import structlog
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.instrumentation.asyncio import AsyncioInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from prometheus_client import Counter, Histogram, Gauge, REGISTRY, generate_latest, CONTENT_TYPE_LATEST
from prometheus_client.registry import CollectorRegistry

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)


def configure_logging(level: str = "INFO"):
    """Route structlog output through the stdlib root logger."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper(), logging.INFO))
    logging.getLogger().setLevel(getattr(logging, level.upper(), logging.INFO))


# Initialize OpenTelemetry
def setup_tracing(service_name: str, service_version: str = "1.0.0"):
    """Setup OpenTelemetry tracing."""
    try:
        resource = Resource.create({
            "service.name": service_name,
            "service.version": service_version,
        })

        provider = TracerProvider(resource=resource)
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        trace.set_tracer_provider(provider)

        # Upstream fetches go through httpx on the event loop
        AsyncioInstrumentor().instrument()
        HTTPXClientInstrumentor().instrument()

        logger.info("OpenTelemetry tracing initialized", service_name=service_name)

    except Exception as e:
        logger.error("Failed to setup tracing", error=str(e))


# Prometheus metrics
class Metrics:
    """Prometheus metrics collection."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry

        # Request metrics
        self.request_count = Counter(
            'http_requests_total',
            'Total HTTP requests',
            ['method', 'endpoint', 'status'],
            registry=registry
        )

        self.request_duration = Histogram(
            'http_request_duration_seconds',
            'HTTP request duration',
            ['method', 'endpoint'],
            registry=registry
        )

        # Pipeline metrics
        self.payloads_processed = Counter(
            'payloads_processed_total',
            'Total payloads run through the pipeline',
            ['shape', 'status'],
            registry=registry
        )

        self.elements_rejected = Counter(
            'payload_elements_rejected_total',
            'Payload elements dropped during validation',
            ['reason'],
            registry=registry
        )

        self.aggregation_total = Counter(
            'aggregation_total',
            'Total aggregation runs',
            ['operation', 'status'],
            registry=registry
        )

        self.aggregation_duration_seconds = Histogram(
            'aggregation_duration_seconds',
            'Aggregation duration',
            ['operation'],
            registry=registry
        )

        self.upstream_fetches = Counter(
            'upstream_fetches_total',
            'Total fetches from the upstream chemistry API',
            ['status'],
            registry=registry
        )

        # State metrics
        self.jurisdictions_stored = Gauge(
            'jurisdictions_stored',
            'Number of jurisdictions in the stored collection',
            ['active'],
            registry=registry
        )

    def record_report(self, report):
        """Count rejected elements of a validation report by reason."""
        for reason in ("invalid", "empty", "duplicate", "skipped_patents"):
            count = getattr(report, reason)
            if count:
                self.elements_rejected.labels(reason=reason).inc(count)


# Global metrics instance
metrics = Metrics(REGISTRY)


# Tracing decorators
def trace_span(span_name: str, attributes: Optional[Dict[str, Any]] = None):
    """Decorator to create a trace span."""
    def decorator(func):
        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            tracer = trace.get_tracer(__name__)
            with tracer.start_as_current_span(span_name, attributes=attributes or {}) as span:
                try:
                    result = await func(*args, **kwargs)
                    span.set_status(Status(StatusCode.OK))
                    return result
                except Exception as e:
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    span.record_exception(e)
                    raise

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            tracer = trace.get_tracer(__name__)
            with tracer.start_as_current_span(span_name, attributes=attributes or {}) as span:
                try:
                    result = func(*args, **kwargs)
                    span.set_status(Status(StatusCode.OK))
                    return result
                except Exception as e:
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    span.record_exception(e)
                    raise

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        else:
            return sync_wrapper

    return decorator


@asynccontextmanager
async def trace_operation(operation_name: str, attributes: Optional[Dict[str, Any]] = None):
    """Context manager for tracing operations."""
    tracer = trace.get_tracer(__name__)
    with tracer.start_as_current_span(operation_name, attributes=attributes or {}) as span:
        try:
            yield span
            span.set_status(Status(StatusCode.OK))
        except Exception as e:
            span.set_status(Status(StatusCode.ERROR, str(e)))
            span.record_exception(e)
            raise


# Metrics decorators
def track_metrics(metric_name: str, labels: Optional[Dict[str, str]] = None):
    """Decorator to count and time calls against ``<name>_total`` and ``<name>_duration_seconds``."""
    def record(status: str, start_time: float):
        getattr(metrics, f"{metric_name}_total").labels(
            status=status, **(labels or {})
        ).inc()
        getattr(metrics, f"{metric_name}_duration_seconds").labels(
            **(labels or {})
        ).observe(time.time() - start_time)

    def decorator(func):
        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                result = await func(*args, **kwargs)
            except Exception:
                record("error", start_time)
                raise
            record("success", start_time)
            return result

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                result = func(*args, **kwargs)
            except Exception:
                record("error", start_time)
                raise
            record("success", start_time)
            return result

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        else:
            return sync_wrapper

    return decorator


# Health check utilities
class HealthChecker:
    """Health check utilities."""

    def __init__(self):
        self.checks = {}

    def register_check(self, name: str, check_func):
        """Register a health check."""
        self.checks[name] = check_func

    async def run_checks(self) -> Dict[str, Dict[str, Any]]:
        """Run all health checks."""
        results = {}

        for name, check_func in self.checks.items():
            try:
                start_time = time.time()
                result = await check_func()
                duration = time.time() - start_time

                results[name] = {
                    "status": "healthy" if result else "unhealthy",
                    "duration": duration,
                    "timestamp": time.time()
                }
            except Exception as e:
                results[name] = {
                    "status": "error",
                    "error": str(e),
                    "timestamp": time.time()
                }

        return results


# Prometheus metrics endpoint
def get_metrics():
    """Get Prometheus metrics."""
    return generate_latest(metrics.registry), CONTENT_TYPE_LATEST


# Logging utilities
def log_event(event_type: str, **kwargs):
    """Log a structured event."""
    logger.info(f"Event: {event_type}", event_type=event_type, **kwargs)


def log_error(error_type: str, error: Exception, **kwargs):
    """Log a structured error."""
    logger.error(f"Error: {error_type}",
                 error_type=error_type,
                 error_message=str(error),
                 error_class=error.__class__.__name__,
                 **kwargs)
