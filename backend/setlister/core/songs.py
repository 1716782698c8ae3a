"""Catalog writes: bulk song import and listing."""

from __future__ import annotations

import structlog
from pydantic import BaseModel, Field
from sqlalchemy import func, or_
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from setlister.core.catalog import CatalogSong, SQLSongCatalog, to_catalog_song
from setlister.core.database import retry_db_operation
from setlister.core.parsing.bulk import parse_bpm, parse_bulk_input, parse_duration, parse_key
from setlister.core.parsing.models import BulkSongRecord
from setlister.db.models import Artist, Song, SongArtist, Vocalist

logger = structlog.get_logger("setlister.songs")

DEFAULT_LIST_LIMIT = 100


class BulkAddResult(BaseModel):
    """Outcome of a bulk import, one message per input line."""

    added: list[str] = Field(default_factory=list)
    duplicates: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    detected_format: str | None = None


def format_duration(seconds: int) -> str:
    """Render seconds as m:ss."""
    return f"{seconds // 60}:{seconds % 60:02d}"


async def find_duplicate(
    session: AsyncSession,
    title: str,
    artist_name: str,
) -> Song | None:
    """Find an existing song that a new record would duplicate.

    With an artist: same title and an artist of the same name. Without an
    artist: same title and no artists at all. Both comparisons ignore case.
    """
    query = select(Song).where(func.lower(Song.title) == title.lower())

    if artist_name:
        query = (
            query.join(SongArtist, col(SongArtist.song_id) == col(Song.id))
            .join(Artist, col(Artist.id) == col(SongArtist.artist_id))
            .where(func.lower(Artist.name) == artist_name.lower())
        )
    else:
        query = query.where(col(Song.id).not_in(select(SongArtist.song_id)))

    result = await session.exec(query.limit(1))
    return result.first()


async def _get_or_create_artist(session: AsyncSession, name: str) -> Artist:
    result = await session.exec(select(Artist).where(func.lower(Artist.name) == name.lower()))
    artist = result.first()
    if artist is None:
        artist = Artist(name=name)
        session.add(artist)
        await session.flush()
    return artist


async def _get_or_create_vocalist(session: AsyncSession, name: str) -> Vocalist:
    result = await session.exec(
        select(Vocalist).where(func.lower(Vocalist.name) == name.lower())
    )
    vocalist = result.first()
    if vocalist is None:
        vocalist = Vocalist(name=name)
        session.add(vocalist)
        await session.flush()
    return vocalist


async def _insert_song(session: AsyncSession, record: BulkSongRecord) -> Song:
    """Create one song with its artist link and commit it."""
    artist = (
        await _get_or_create_artist(session, record.artist_name) if record.artist_name else None
    )
    vocalist = (
        await _get_or_create_vocalist(session, record.vocalist_name)
        if record.vocalist_name
        else None
    )

    song = Song(
        title=record.title,
        key=parse_key(record.key),
        duration_seconds=parse_duration(record.time),
        bpm=parse_bpm(record.bpm),
        vocalist_id=vocalist.id if vocalist else None,
    )
    session.add(song)
    await session.flush()
    if artist is not None:
        session.add(SongArtist(song_id=song.id, artist_id=artist.id))

    await session.commit()
    return song


def describe_added(record: BulkSongRecord, song: Song) -> str:
    """Human-readable summary of an added song."""
    text = f'"{record.title}"'
    if record.artist_name:
        text += f" by {record.artist_name}"
    if record.vocalist_name:
        text += f" (vocals: {record.vocalist_name})"
    if song.key:
        text += f" [{song.key}]"
    if song.duration_seconds:
        text += f" ({format_duration(song.duration_seconds)})"
    if song.bpm:
        text += f" {song.bpm} BPM"
    return text


async def bulk_add_songs(session: AsyncSession, text: str) -> BulkAddResult:
    """Import comma-separated songs into the catalog.

    Each line is handled independently: a failing line is recorded in
    errors and the rest of the batch continues.

    Args:
        session: Database session
        text: Bulk input, one "title, artist, vocalist, key, time, bpm" per line

    Returns:
        BulkAddResult listing added songs, duplicates and per-line errors
    """
    records = parse_bulk_input(text)
    result = BulkAddResult(detected_format=records[0].format if records else None)
    catalog = SQLSongCatalog(session)

    for record in records:
        line = record.line_number

        if not record.title:
            result.errors.append(f"Line {line}: Missing song title")
            continue

        try:
            existing = await find_duplicate(session, record.title, record.artist_name)
            if existing is not None:
                names = (await catalog.artist_names([existing.id])).get(existing.id, [])
                existing_artist = names[0] if names else "no artist"
                result.duplicates.append(
                    f'Line {line}: "{record.title}" by {record.artist_name or "no artist"} '
                    f'(already exists as "{existing.title}" by {existing_artist})'
                )
                continue

            song = await retry_db_operation(
                lambda record=record: _insert_song(session, record),
                session=session,
                operation_type="bulk_insert_song",
            )
            result.added.append(describe_added(record, song))
        except Exception as e:
            await session.rollback()
            logger.error(
                "Failed to add song",
                line_number=line,
                title=record.title,
                error=str(e),
                exc_info=True,
            )
            result.errors.append(f"Line {line}: {e}")

    logger.info(
        "Bulk add completed",
        lines=len(records),
        added=len(result.added),
        duplicates=len(result.duplicates),
        errors=len(result.errors),
        detected_format=result.detected_format,
    )
    return result


async def list_songs(
    session: AsyncSession,
    search: str | None = None,
    limit: int = DEFAULT_LIST_LIMIT,
) -> list[CatalogSong]:
    """List catalog songs ordered by title.

    Args:
        session: Database session
        search: Optional case-insensitive substring of the title or an artist name
        limit: Maximum number of songs

    Returns:
        Catalog songs with their artists
    """
    query = select(Song)
    if search:
        term = search.strip().lower()
        artist_song_ids = (
            select(SongArtist.song_id)
            .join(Artist, col(Artist.id) == col(SongArtist.artist_id))
            .where(func.lower(Artist.name).contains(term, autoescape=True))
        )
        query = query.where(
            or_(
                func.lower(Song.title).contains(term, autoescape=True),
                col(Song.id).in_(artist_song_ids),
            )
        )

    result = await session.exec(query.order_by(func.lower(Song.title), col(Song.id)).limit(limit))
    songs = list(result.all())

    artists = await SQLSongCatalog(session).artist_names(song.id for song in songs)
    return [to_catalog_song(song, artists.get(song.id, [])) for song in songs]
