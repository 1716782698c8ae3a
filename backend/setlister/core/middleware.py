"""FastAPI middleware for request/response handling."""

from __future__ import annotations

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from setlister.core.tracing import generate_trace_id, trace_context

logger = structlog.get_logger("setlister.middleware")

TRACE_HEADER = "X-Trace-ID"


class TracingMiddleware(BaseHTTPMiddleware):
    """Middleware to add trace IDs to all requests."""

    async def dispatch(self, request: Request, call_next):
        """Bind a trace id for the request and echo it in the response headers.

        An incoming X-Trace-ID header is reused, otherwise a new id is generated.
        """
        trace_id = request.headers.get(TRACE_HEADER) or generate_trace_id()

        with trace_context(trace_id):
            logger.debug("Processing request", method=request.method, path=request.url.path)

            response = await call_next(request)
            response.headers[TRACE_HEADER] = trace_id

            logger.debug(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
            )
            return response
