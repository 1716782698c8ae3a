"""Request trace ids carried in structlog contextvars."""

from __future__ import annotations

import uuid
from collections.abc import Generator
from contextlib import contextmanager

import structlog.contextvars as contextvars


def generate_trace_id() -> str:
    """Return a new 32 character hex trace id."""
    return uuid.uuid4().hex


def get_trace_id() -> str | None:
    """Trace id bound to the current context, if any."""
    return contextvars.get_contextvars().get("trace_id")


def set_trace_id(trace_id: str) -> None:
    contextvars.bind_contextvars(trace_id=trace_id)


def clear_trace_id() -> None:
    contextvars.clear_contextvars()


@contextmanager
def trace_context(trace_id: str | None = None) -> Generator[str]:
    """Bind a trace id for the duration of the block.

    Every structlog call inside the block carries the trace_id field. The
    previously bound context (if any) is restored on exit, so contexts nest.

    Args:
        trace_id: Trace id to bind. A new one is generated when omitted.

    Yields:
        The bound trace id
    """
    previous = dict(contextvars.get_contextvars())
    if trace_id is None:
        trace_id = generate_trace_id()

    contextvars.clear_contextvars()
    contextvars.bind_contextvars(trace_id=trace_id)
    try:
        yield trace_id
    finally:
        contextvars.clear_contextvars()
        if previous:
            contextvars.bind_contextvars(**previous)
