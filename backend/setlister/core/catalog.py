"""Read-only song catalog used by the match resolver.

SongCatalog is the seam between matching and storage: the resolver only sees
CatalogSong values, and SQLSongCatalog serves them from the SQLite tables.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import Iterable, Sequence

import structlog
from pydantic import BaseModel, Field
from sqlalchemy import func
from sqlmodel import col, select
from sqlmodel.sql.expression import SelectOfScalar
from sqlmodel.ext.asyncio.session import AsyncSession

from setlister.db.models import Artist, Song, SongArtist

logger = structlog.get_logger("setlister.catalog")


class CatalogSong(BaseModel):
    """A catalog song as seen by matching."""

    id: str
    title: str
    artists: list[str] = Field(default_factory=list, description="Artist names, sorted")
    key: str | None = None
    bpm: int | None = None
    duration_seconds: int | None = None
    time_signature: str | None = None


class SongCatalog(ABC):
    """Abstract base class for song catalogs."""

    @abstractmethod
    async def find_exact(self, title: str, limit: int) -> list[CatalogSong]:
        """Songs whose title equals the given title, ignoring case.

        Args:
            title: Title to look up
            limit: Maximum number of songs to return

        Returns:
            Matching songs
        """

    @abstractmethod
    async def find_containing(self, substring: str, limit: int) -> list[CatalogSong]:
        """Songs whose title contains the substring, ignoring case."""

    @abstractmethod
    async def sample(self, limit: int) -> list[CatalogSong]:
        """A bounded, stable slice of the catalog for fuzzy comparison.

        Repeated calls on an unchanged catalog must return the same songs.
        """


class SQLSongCatalog(SongCatalog):
    """Song catalog backed by the songs, artists and song_artists tables."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_exact(self, title: str, limit: int) -> list[CatalogSong]:
        query = (
            select(Song)
            .where(func.lower(Song.title) == title.lower())
            .order_by(col(Song.created_at), col(Song.id))
            .limit(limit)
        )
        return await self._load(query)

    async def find_containing(self, substring: str, limit: int) -> list[CatalogSong]:
        # autoescape keeps "%" and "_" in titles literal
        query = (
            select(Song)
            .where(func.lower(Song.title).contains(substring.lower(), autoescape=True))
            .order_by(col(Song.created_at), col(Song.id))
            .limit(limit)
        )
        return await self._load(query)

    async def sample(self, limit: int) -> list[CatalogSong]:
        query = select(Song).order_by(col(Song.created_at), col(Song.id)).limit(limit)
        return await self._load(query)

    async def _load(self, query: SelectOfScalar[Song]) -> list[CatalogSong]:
        result = await self.session.exec(query)
        songs = list(result.all())
        artists = await self.artist_names(song.id for song in songs)
        return [to_catalog_song(song, artists.get(song.id, [])) for song in songs]

    async def artist_names(self, song_ids: Iterable[str]) -> dict[str, list[str]]:
        """Map song ids to their sorted artist names with a single query."""
        ids = list(song_ids)
        if not ids:
            return {}

        result = await self.session.exec(
            select(SongArtist.song_id, Artist.name)
            .join(Artist, col(Artist.id) == col(SongArtist.artist_id))
            .where(col(SongArtist.song_id).in_(ids))
        )

        names: dict[str, list[str]] = defaultdict(list)
        for song_id, name in result.all():
            names[song_id].append(name)
        return {song_id: sorted(values, key=str.lower) for song_id, values in names.items()}


def to_catalog_song(song: Song, artists: Sequence[str]) -> CatalogSong:
    """Convert a Song row into a CatalogSong."""
    return CatalogSong(
        id=song.id,
        title=song.title,
        artists=sorted(artists, key=str.lower),
        key=song.key,
        bpm=song.bpm,
        duration_seconds=song.duration_seconds,
        time_signature=song.time_signature,
    )
