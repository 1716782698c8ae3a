"""Prometheus metrics configuration."""

from __future__ import annotations

import structlog
from fastapi import FastAPI
from prometheus_client import Counter, Gauge
from prometheus_fastapi_instrumentator import Instrumentator

logger = structlog.get_logger("setlister.metrics")

app_info = Gauge(
    "app_info",
    "Application information",
    ["version"],
)

# Setlist parsing and song matching
setlist_parse_total = Counter(
    "setlist_parse_total",
    "Total number of setlist texts parsed",
    ["complexity"],  # low, medium, high
)
song_match_total = Counter(
    "song_match_total",
    "Total number of song match searches by resulting confidence",
    ["confidence"],  # exact, title-only, partial, similarity, new, error
)
catalog_lookup_errors_total = Counter(
    "catalog_lookup_errors_total",
    "Total number of catalog lookups that failed during matching",
)

# Database write retries (SQLite lock contention)
db_retry_attempts_total = Counter(
    "db_retry_attempts_total",
    "Total number of database operation retry attempts",
    ["operation_type"],
)
db_lock_errors_total = Counter(
    "db_lock_errors_total",
    "Total number of database lock errors encountered",
)


def setup_metrics(app: FastAPI, app_version: str) -> None:
    """Expose /metrics and instrument HTTP handlers once per app instance.

    Args:
        app: FastAPI application instance
        app_version: Application version
    """
    if getattr(app.state, "_metrics_initialized", False):
        logger.debug("Metrics already initialized for this app instance, skipping")
        return

    instrumentator = Instrumentator(
        should_group_status_codes=False,
        should_ignore_untemplated=True,
        should_instrument_requests_inprogress=True,
        excluded_handlers=["/metrics", "/docs", "/openapi.json", "/redoc"],
    )
    instrumentator.instrument(app).expose(app, endpoint="/metrics")

    app.state._metrics_initialized = True
    app_info.labels(version=app_version).set(1)

    logger.info("Metrics initialized", version=app_version)
