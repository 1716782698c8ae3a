"""Database models for Setlister.

All SQLModel models should be defined here and imported in db/__init__.py.

Models follow these patterns:
- Use singular nouns: Song, Artist
- Table names use plural, snake_case: songs, song_artists
- Use uuid.uuid4().hex for IDs (32 character hex strings)
- Include created_at and updated_at timestamps
"""

from __future__ import annotations

import time
import uuid

from sqlalchemy import Index, UniqueConstraint
from sqlmodel import Field, SQLModel

# SQLModel metadata - all models with table=True are registered here
metadata = SQLModel.metadata

# Musical keys accepted for a song, major and minor spellings
VALID_KEYS = (
    "C", "Cm", "C#", "C#m", "Db", "Dbm", "D", "Dm", "D#", "D#m", "Eb", "Ebm",
    "E", "Em", "F", "Fm", "F#", "F#m", "Gb", "Gbm", "G", "Gm", "G#", "G#m",
    "Ab", "Abm", "A", "Am", "A#", "A#m", "Bb", "Bbm", "B", "Bm",
)  # fmt: skip


class Song(SQLModel, table=True):
    """A song in the catalog."""

    __tablename__ = "songs"  # type: ignore[assignment]

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, primary_key=True)
    title: str = Field(max_length=200)
    key: str | None = Field(default=None)  # One of VALID_KEYS
    duration_seconds: int | None = Field(default=None, ge=0)
    bpm: int | None = Field(default=None, ge=40, le=300)
    time_signature: str | None = Field(default=None)  # e.g. "4/4", "6/8"
    vocalist_id: str | None = Field(default=None, foreign_key="vocalists.id")
    created_at: int = Field(default_factory=lambda: int(time.time()))
    updated_at: int = Field(default_factory=lambda: int(time.time()))

    __table_args__ = (Index("idx_songs_title", "title"),)


class Artist(SQLModel, table=True):
    """A performing or recording artist."""

    __tablename__ = "artists"  # type: ignore[assignment]

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, primary_key=True)
    name: str = Field(max_length=100, unique=True)
    created_at: int = Field(default_factory=lambda: int(time.time()))
    updated_at: int = Field(default_factory=lambda: int(time.time()))


class SongArtist(SQLModel, table=True):
    """Link between a song and one of its artists."""

    __tablename__ = "song_artists"  # type: ignore[assignment]

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, primary_key=True)
    song_id: str = Field(foreign_key="songs.id", index=True)
    artist_id: str = Field(foreign_key="artists.id", index=True)
    created_at: int = Field(default_factory=lambda: int(time.time()))

    __table_args__ = (UniqueConstraint("song_id", "artist_id", name="uq_song_artists_pair"),)


class Vocalist(SQLModel, table=True):
    """Band member who sings lead on a song."""

    __tablename__ = "vocalists"  # type: ignore[assignment]

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, primary_key=True)
    name: str = Field(max_length=100, unique=True)
    created_at: int = Field(default_factory=lambda: int(time.time()))
    updated_at: int = Field(default_factory=lambda: int(time.time()))
