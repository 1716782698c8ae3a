"""Application routes."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable

import structlog
from fastapi import APIRouter
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from setlister.routes import general
from setlister.routes.setlists import create_setlists_router
from setlister.routes.songs import create_songs_router

logger = structlog.get_logger("setlister.routes")


def create_app_router(
    get_db_session: Callable[[], AsyncIterator[SQLModelAsyncSession]] | None = None,
) -> APIRouter:
    """Create and configure main application router.

    Args:
        get_db_session: Dependency function for database sessions. Catalog
            routes are only included when it is given.

    Returns:
        Configured APIRouter instance
    """
    router = APIRouter()

    router.include_router(general.router, tags=["general"])

    if get_db_session:
        router.include_router(create_setlists_router(get_db_session))
        logger.debug("Included setlists router in app_router")

        router.include_router(create_songs_router(get_db_session))
        logger.debug("Included songs router in app_router")

    return router
