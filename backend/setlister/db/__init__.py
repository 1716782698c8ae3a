"""Database models and utilities.

This module exports all database models.
"""

from __future__ import annotations

from setlister.db.models import VALID_KEYS, Artist, Song, SongArtist, Vocalist, metadata

__all__ = [
    "metadata",
    "VALID_KEYS",
    "Song",
    "Artist",
    "SongArtist",
    "Vocalist",
]
