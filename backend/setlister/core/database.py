"""Database configuration and setup for Setlister.

Handles SQLite async database setup:
- WAL mode so catalog reads don't block bulk imports
- Connection pooling
- Retry logic for write operations hitting database locks
- Session factory for dependency injection
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, TypeVar

import structlog
from sqlalchemy import event
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from setlister.core.metrics import db_lock_errors_total, db_retry_attempts_total

logger = structlog.get_logger("setlister.database")

T = TypeVar("T")


def unicode_lower(value: Any) -> Any:
    """SQL lower() using Python's Unicode case mapping. NULL stays NULL."""
    if isinstance(value, str):
        return value.lower()
    return value


def create_database_engine(
    database_file: Path | str,
    echo: bool = False,
) -> AsyncEngine:
    """Create and configure the database engine for async SQLite.

    Args:
        database_file: Path to the SQLite database file.
        echo: If True, log all SQL statements (useful for debugging).

    Returns:
        Configured AsyncEngine instance.
    """
    database_url = f"sqlite+aiosqlite:///{database_file}"

    pool_size = 10
    max_overflow = 20

    engine = create_async_engine(
        database_url,
        echo=echo,
        connect_args={"timeout": 30.0},  # Wait up to 30 seconds for locks to be released
        pool_pre_ping=True,
        pool_size=pool_size,
        max_overflow=max_overflow,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_conn: Any, connection_record: Any) -> None:
        """Enable WAL mode and foreign keys on every new connection.

        Also swaps SQLite's ASCII-only lower() for unicode_lower, so title
        lookups fold case the same way str.lower() does.
        """
        cursor = dbapi_conn.cursor()
        try:
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA synchronous=NORMAL")
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()

        dbapi_conn.create_function("lower", 1, unicode_lower, deterministic=True)

    logger.info(
        "Database engine created",
        database_file=str(database_file),
        echo=echo,
        pool_size=pool_size,
        max_overflow=max_overflow,
    )

    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[SQLModelAsyncSession]:
    """Create a session factory for database sessions.

    expire_on_commit=False keeps loaded rows usable after commit without lazy loads.
    """
    return async_sessionmaker(
        engine,
        class_=SQLModelAsyncSession,
        expire_on_commit=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create all catalog tables that don't exist yet."""
    from setlister.db.models import metadata

    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    logger.debug("Database tables ensured")


async def retry_db_operation(
    operation: Callable[[], Awaitable[T]],
    session: SQLModelAsyncSession | None = None,
    max_retries: int = 5,
    retry_delay: float = 0.1,
    operation_type: str = "unknown",
) -> T:
    """Retry a write operation on SQLite lock errors with exponential backoff.

    Only "database is locked" errors are retried; anything else propagates
    immediately. The session is rolled back between attempts to clear its state.

    Args:
        operation: Callable returning a fresh awaitable for each attempt.
        session: Optional session to roll back after a lock error.
        max_retries: Maximum number of attempts.
        retry_delay: Initial delay in seconds, doubled after each attempt.
        operation_type: Label for retry metrics ("insert", "commit", ...).

    Returns:
        Result of the operation.

    Raises:
        OperationalError: If the operation still fails after max_retries.

    Example:
        ```python
        await retry_db_operation(session.commit, session=session, operation_type="commit")
        ```
    """
    for attempt in range(max_retries):
        try:
            return await operation()
        except OperationalError as exc:
            if "locked" not in str(exc).lower() or attempt >= max_retries - 1:
                logger.error(
                    "Database operation failed",
                    attempt=attempt + 1,
                    max_retries=max_retries,
                    operation_type=operation_type,
                    error=str(exc)[:200],
                )
                raise

            db_lock_errors_total.inc()
            db_retry_attempts_total.labels(operation_type=operation_type).inc()
            logger.debug(
                "Database lock detected, retrying",
                attempt=attempt + 1,
                max_retries=max_retries,
                operation_type=operation_type,
            )

            if session is not None:
                await session.rollback()

            await asyncio.sleep(retry_delay * (2**attempt))

    raise RuntimeError(f"Operation failed after {max_retries} retries")
