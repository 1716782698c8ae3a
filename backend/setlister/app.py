"""Application entry point for Setlister."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from setlister import __version__
from setlister.core.config import get_settings
from setlister.core.database import (
    create_database_engine,
    create_session_factory,
    create_tables,
)
from setlister.core.logging import setup_logging
from setlister.core.matching import reload_matching_config
from setlister.core.metrics import setup_metrics
from setlister.core.middleware import TracingMiddleware
from setlister.core.routes import create_app_router

logger = structlog.get_logger("setlister.app")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    settings = get_settings()
    logger.info(
        "Starting Setlister application",
        version=__version__,
        env=settings.env,
        host=settings.host_bind_address,
        port=settings.host_port,
    )

    await create_tables(app.state.engine)
    logger.info("Database schema ready", database_file=str(settings.database_file))

    config = reload_matching_config()
    logger.info(
        "Matching configuration loaded",
        sample_size=config.sample_size,
        partial_min_score=config.partial_min_score,
        similarity_min_score=config.similarity_min_score,
    )

    yield

    logger.info("Shutting down Setlister application")
    if getattr(app.state, "engine", None) is not None:
        await app.state.engine.dispose()
        logger.info("Database engine disposed")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    # Logging first so everything below is captured
    setup_logging(debug=settings.is_debug, logs_dir=settings.logs_dir)

    app = FastAPI(
        title="Setlister",
        description="Setlist parsing and song catalog matching",
        version=__version__,
        lifespan=lifespan,
    )

    engine = create_database_engine(settings.database_file, echo=settings.is_debug)
    async_session_factory = create_session_factory(engine)

    app.state.engine = engine
    app.state.async_session_factory = async_session_factory
    logger.info("Database engine and session factory created")

    async def get_db_session() -> AsyncIterator[SQLModelAsyncSession]:
        """FastAPI dependency for database sessions."""
        async with async_session_factory() as session:
            yield session

    app.add_middleware(TracingMiddleware)

    # Before routes so every handler is instrumented
    setup_metrics(app, __version__)

    app.include_router(create_app_router(get_db_session))

    return app


def main() -> None:
    """Main entry point."""
    from setlister.core.config import reload_settings

    current_settings = reload_settings()
    app = create_app()

    import uvicorn

    logger.info(
        "Starting uvicorn server",
        host=current_settings.host_bind_address,
        port=current_settings.host_port,
    )

    uvicorn.run(
        app,
        host=current_settings.host_bind_address,
        port=current_settings.host_port,
        log_config=None,  # We use structlog
        reload=False,
    )


if __name__ == "__main__":
    main()
