"""Tests for tracing functionality."""

from __future__ import annotations

import structlog

from setlister.core.tracing import (
    clear_trace_id,
    generate_trace_id,
    get_trace_id,
    set_trace_id,
    trace_context,
)


def test_generate_trace_id() -> None:
    """Test trace ID generation."""
    trace_id = generate_trace_id()

    assert isinstance(trace_id, str)
    assert len(trace_id) == 32  # UUID4 hex = 32 characters
    assert trace_id.isalnum()

    ids = {generate_trace_id() for _ in range(100)}
    assert len(ids) == 100, "Trace IDs should be unique"


def test_set_and_get_trace_id() -> None:
    """Test setting and getting trace ID."""
    clear_trace_id()

    set_trace_id("test-trace-123")

    assert get_trace_id() == "test-trace-123"
    clear_trace_id()
    assert get_trace_id() is None


def test_trace_context_manager() -> None:
    """Test trace_context binds the id to structlog context for the block."""
    clear_trace_id()

    try:
        with trace_context("test-trace-456") as trace_id:
            assert trace_id == "test-trace-456"
            assert structlog.contextvars.get_contextvars().get("trace_id") == "test-trace-456"

        assert get_trace_id() is None
    finally:
        clear_trace_id()


def test_trace_context_generates_id() -> None:
    """Test trace_context generates ID when None provided."""
    clear_trace_id()

    try:
        with trace_context() as trace_id:
            assert len(trace_id) == 32
            assert get_trace_id() == trace_id

        assert get_trace_id() is None
    finally:
        clear_trace_id()


def test_trace_context_nested() -> None:
    """Test nested trace_context calls restore the outer id."""
    clear_trace_id()

    try:
        with trace_context("outer-trace"):
            with trace_context("inner-trace") as inner_id:
                assert get_trace_id() == inner_id == "inner-trace"

            assert get_trace_id() == "outer-trace"

        assert get_trace_id() is None
    finally:
        clear_trace_id()


def test_trace_context_restores_other_fields() -> None:
    """Test fields bound outside the block survive it."""
    clear_trace_id()
    structlog.contextvars.bind_contextvars(job="bulk-import")

    try:
        with trace_context("scoped-trace"):
            assert "job" not in structlog.contextvars.get_contextvars()

        assert structlog.contextvars.get_contextvars() == {"job": "bulk-import"}
    finally:
        clear_trace_id()
