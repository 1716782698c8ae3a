"""Pydantic models for parsed setlist text."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

Complexity = Literal["low", "medium", "high"]


class SongCandidate(BaseModel):
    """A normalized song guess extracted from one input line."""

    line_number: int = Field(..., description="1-based position among the non-blank input lines")
    original_line: str = Field(..., description="Line exactly as pasted (stripped)")
    title: str = Field(..., description="Normalized title")
    artist: str | None = Field(default=None, description="Normalized artist, if one was given")
    confidence: str = Field(default="unknown", description="Match confidence, set by matching")


class SetlistSet(BaseModel):
    """A named performance set."""

    name: str
    songs: list[SongCandidate] = Field(default_factory=list)


class ParsedSetlist(BaseModel):
    """Result of parsing a pasted setlist."""

    sets: list[SetlistSet] = Field(default_factory=list)
    complexity: Complexity = Field(default="low", description="Advisory input complexity")
    message: str | None = Field(
        default=None, description="Suggestion shown when complexity is raised"
    )
    total_lines: int = 0
    parsed_lines: int = 0

    @property
    def songs(self) -> list[SongCandidate]:
        """All candidates across sets, in input order."""
        return [song for setlist_set in self.sets for song in setlist_set.songs]


class BulkSongRecord(BaseModel):
    """One comma-separated line of bulk catalog input."""

    line_number: int
    title: str = ""
    artist_name: str = ""
    vocalist_name: str = ""
    key: str = ""
    time: str = ""
    bpm: str = ""
    format: str = "title-only"
