"""
Configuration settings for the Jurisdiction Map service
"""

import os


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# === API Configuration ===
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))
API_TITLE = "Jurisdiction Map API"
API_DESCRIPTION = "Aggregates patent applications into per-jurisdiction activity for a world map"
API_VERSION = os.getenv("API_VERSION", "1.0.0")

# === Upstream Chemistry API ===
UPSTREAM_API_URL = os.getenv("UPSTREAM_API_URL", "http://localhost:5000/api/compound")
UPSTREAM_TIMEOUT_SECONDS = float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "10"))

# === State ===
SEED_SAMPLE_DATA = _env_flag("SEED_SAMPLE_DATA", "true")

# === Logging and Error Tracking ===
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
SENTRY_DSN = os.getenv("SENTRY_DSN")
TRACING_ENABLED = _env_flag("TRACING_ENABLED", "false")
