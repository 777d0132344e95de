"""Sentry error tracking configuration."""

import logging
import os
import time
from typing import Optional, Dict, Any

import sentry_sdk
import structlog
from sentry_sdk.integrations.asyncio import AsyncioIntegration
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

logger = structlog.get_logger(__name__)

SERVICE_NAME = "jurisdiction-map"


def setup_sentry(
    dsn: Optional[str] = None,
    environment: str = "development",
    service_name: str = SERVICE_NAME,
    service_version: str = "1.0.0",
    traces_sample_rate: float = 0.1,
) -> bool:
    """Setup Sentry error tracking. Returns whether tracking is enabled."""
    try:
        if not dsn:
            dsn = os.getenv("SENTRY_DSN")

        if not dsn:
            logger.warning("Sentry DSN not provided, error tracking disabled")
            return False

        sentry_sdk.init(
            dsn=dsn,
            environment=environment,
            release=f"{service_name}@{service_version}",
            traces_sample_rate=traces_sample_rate,
            integrations=[
                AsyncioIntegration(),
                FastApiIntegration(),
                LoggingIntegration(
                    level=logging.INFO,
                    event_level=logging.ERROR
                ),
            ],
            before_send=filter_sensitive_data,
            before_breadcrumb=add_context_to_breadcrumbs,
            debug=environment == "development"
        )

        logger.info("Sentry error tracking initialized",
                    environment=environment,
                    service_name=service_name)
        return True

    except Exception as e:
        logger.error("Failed to setup Sentry", error=str(e))
        return False


def filter_sensitive_data(event: Dict[str, Any], hint: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Strip request bodies and credentials from Sentry events.

    Uploaded payloads can be large compound records, so they are never sent.
    """
    request = event.get("request")
    if request:
        request.pop("data", None)
        headers = request.get("headers") or {}
        for header in ("authorization", "cookie", "x-api-key"):
            if header in headers:
                headers[header] = "[REDACTED]"

    return event


def add_context_to_breadcrumbs(breadcrumb: Dict[str, Any], hint: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Add service context to Sentry breadcrumbs."""
    breadcrumb["data"] = breadcrumb.get("data") or {}
    breadcrumb["data"]["service"] = SERVICE_NAME

    if "timestamp" not in breadcrumb:
        breadcrumb["timestamp"] = time.time()

    return breadcrumb


def capture_exception(error: Exception, context: Optional[Dict[str, Any]] = None):
    """Capture an exception with additional context."""
    try:
        with sentry_sdk.new_scope() as scope:
            for key, value in (context or {}).items():
                scope.set_tag(key, value)
            sentry_sdk.capture_exception(error)

        logger.info("Exception captured in Sentry",
                    error_type=type(error).__name__,
                    error_message=str(error))

    except Exception as e:
        logger.error("Failed to capture exception in Sentry", error=str(e))
