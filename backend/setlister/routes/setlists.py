"""Setlist routes: parse pasted setlists and match them against the catalog."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from setlister.core.catalog import SQLSongCatalog
from setlister.core.matching import MatchSearchResult, match_setlist
from setlister.core.parsing import Complexity, parse_song_list

logger = structlog.get_logger("setlister.routes.setlists")


# Request/Response Models
class ParseSetlistRequest(BaseModel):
    """Request model for parsing a setlist."""

    text: str = Field(..., description="Pasted setlist, one song or set header per line")
    match: bool = Field(default=True, description="Also match each song against the catalog")


class SetlistSongResponse(BaseModel):
    """One parsed song line, with its catalog match when requested."""

    line_number: int
    original_line: str
    title: str
    artist: str | None
    confidence: str
    match: MatchSearchResult | None = None


class SetlistSetResponse(BaseModel):
    """A named set of parsed songs."""

    name: str
    songs: list[SetlistSongResponse]


class ParseSetlistResponse(BaseModel):
    """Response model for a parsed setlist."""

    sets: list[SetlistSetResponse]
    complexity: Complexity
    message: str | None = None
    total_lines: int
    parsed_lines: int


def create_setlists_router(
    get_db_session: Callable[[], AsyncIterator[SQLModelAsyncSession]],
) -> APIRouter:
    """Create setlists router.

    Args:
        get_db_session: Dependency function for database sessions

    Returns:
        Configured APIRouter instance
    """
    router = APIRouter(prefix="/api", tags=["setlists"])

    @router.post("/setlists/parse", response_model=ParseSetlistResponse)
    async def parse_setlist(
        request: ParseSetlistRequest,
        session: SQLModelAsyncSession = Depends(get_db_session),
    ) -> ParseSetlistResponse:
        """Parse a pasted setlist into sets and optionally match every song."""
        parsed = parse_song_list(request.text)
        logger.debug(
            "Setlist parse requested",
            songs=len(parsed.songs),
            match=request.match,
        )

        matches: dict[int, MatchSearchResult] = {}
        if request.match:
            results = await match_setlist(parsed, SQLSongCatalog(session))
            matches = {
                candidate.line_number: result
                for candidate, result in zip(parsed.songs, results, strict=True)
            }

        return ParseSetlistResponse(
            sets=[
                SetlistSetResponse(
                    name=setlist_set.name,
                    songs=[
                        SetlistSongResponse(
                            **candidate.model_dump(),
                            match=matches.get(candidate.line_number),
                        )
                        for candidate in setlist_set.songs
                    ],
                )
                for setlist_set in parsed.sets
            ],
            complexity=parsed.complexity,
            message=parsed.message,
            total_lines=parsed.total_lines,
            parsed_lines=parsed.parsed_lines,
        )

    return router
