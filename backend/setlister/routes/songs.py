"""Song routes: catalog listing, single-song matching and bulk import."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable

import structlog
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from setlister.core.catalog import CatalogSong, SQLSongCatalog
from setlister.core.matching import MatchSearchResult, find_song_matches
from setlister.core.parsing import SongCandidate, normalize_artist, normalize_title
from setlister.core.songs import DEFAULT_LIST_LIMIT, BulkAddResult, bulk_add_songs, list_songs

logger = structlog.get_logger("setlister.routes.songs")


# Request/Response Models
class SongListResponse(BaseModel):
    """Response model for listing catalog songs."""

    songs: list[CatalogSong]
    total: int


class MatchSongRequest(BaseModel):
    """Request model for matching a single song."""

    title: str = Field(..., min_length=1, description="Song title as written")
    artist: str | None = Field(default=None, description="Artist, if known")


class MatchSongResponse(BaseModel):
    """A normalized candidate and its catalog matches."""

    candidate: SongCandidate
    result: MatchSearchResult


class BulkAddRequest(BaseModel):
    """Request model for bulk catalog import."""

    data: str = Field(
        ...,
        min_length=1,
        description="One song per line: title, artist, vocalist, key, time, bpm",
    )


def create_songs_router(
    get_db_session: Callable[[], AsyncIterator[SQLModelAsyncSession]],
) -> APIRouter:
    """Create songs router.

    Args:
        get_db_session: Dependency function for database sessions

    Returns:
        Configured APIRouter instance
    """
    router = APIRouter(prefix="/api", tags=["songs"])

    @router.get("/songs", response_model=SongListResponse)
    async def get_songs(
        search: str | None = Query(default=None, description="Title or artist substring"),
        limit: int = Query(default=DEFAULT_LIST_LIMIT, ge=1, le=1000),
        session: SQLModelAsyncSession = Depends(get_db_session),
    ) -> SongListResponse:
        """List catalog songs ordered by title."""
        songs = await list_songs(session, search=search, limit=limit)
        return SongListResponse(songs=songs, total=len(songs))

    @router.post("/songs/match", response_model=MatchSongResponse)
    async def match_song(
        request: MatchSongRequest,
        session: SQLModelAsyncSession = Depends(get_db_session),
    ) -> MatchSongResponse:
        """Match a single title (and optional artist) against the catalog."""
        original_line = request.title
        if request.artist:
            original_line = f"{request.title} - {request.artist}"

        candidate = SongCandidate(
            line_number=1,
            original_line=original_line.strip(),
            title=normalize_title(request.title),
            artist=normalize_artist(request.artist or "") or None,
        )
        result = await find_song_matches(candidate, SQLSongCatalog(session))
        candidate.confidence = result.confidence

        return MatchSongResponse(candidate=candidate, result=result)

    @router.post("/songs/bulk", response_model=BulkAddResult)
    async def bulk_add(
        request: BulkAddRequest,
        session: SQLModelAsyncSession = Depends(get_db_session),
    ) -> BulkAddResult:
        """Import songs from comma-separated lines."""
        logger.info("Bulk add requested", lines=len(request.data.splitlines()))
        return await bulk_add_songs(session, request.data)

    return router
