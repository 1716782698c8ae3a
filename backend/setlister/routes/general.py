"""General API routes."""

from __future__ import annotations

import structlog
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from setlister import __version__
from setlister.core.tracing import get_trace_id

router = APIRouter(prefix="/api")
logger = structlog.get_logger("setlister.routes.general")


@router.get("/")
async def root() -> JSONResponse:
    """Service information.

    All logs in this function automatically include the trace_id from context.
    """
    trace_id = get_trace_id()
    logger.info("Root endpoint accessed", trace_id=trace_id)
    return JSONResponse(
        {
            "message": "Hello, Setlister!",
            "version": __version__,
            "status": "ok",
            "trace_id": trace_id,
        }
    )


@router.get("/health")
async def health() -> JSONResponse:
    """Health check endpoint."""
    trace_id = get_trace_id()
    logger.debug("Health check", trace_id=trace_id)
    return JSONResponse(
        {
            "status": "healthy",
            "trace_id": trace_id,
        }
    )
