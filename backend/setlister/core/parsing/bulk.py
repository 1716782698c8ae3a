"""Comma-separated bulk catalog input.

Each line is `title[, artist[, vocalist[, key[, time[, bpm]]]]]`. Fields past
the sixth are ignored.
"""

from __future__ import annotations

import re

from setlister.db.models import VALID_KEYS

from .models import BulkSongRecord

MIN_BPM = 40
MAX_BPM = 300

FIELD_NAMES = ("title", "artist_name", "vocalist_name", "key", "time", "bpm")

FORMAT_NAMES = {
    1: "title-only",
    2: "title-artist",
    3: "title-artist-vocalist",
    4: "title-artist-vocalist-key",
    5: "title-artist-vocalist-key-time",
    6: "full-csv",
}

_SURROUNDING_QUOTES = re.compile(r"^[\"']|[\"']$")


def _clean_field(value: str) -> str:
    return _SURROUNDING_QUOTES.sub("", value.strip())


def parse_bulk_input(text: str | None) -> list[BulkSongRecord]:
    """Parse bulk catalog input into one record per non-blank line.

    Args:
        text: Raw text, one song per line

    Returns:
        Records in input order; line_number counts non-blank lines from 1
    """
    lines = [line for line in (text or "").strip().splitlines() if line.strip()]

    records: list[BulkSongRecord] = []
    for index, line in enumerate(lines, start=1):
        parts = [_clean_field(part) for part in line.split(",")]
        fields = dict(zip(FIELD_NAMES, parts, strict=False))
        records.append(
            BulkSongRecord(
                line_number=index,
                format=FORMAT_NAMES[min(len(parts), len(FIELD_NAMES))],
                **fields,
            )
        )
    return records


def parse_key(value: str | None) -> str | None:
    """Return the key if it is one of the recognised spellings."""
    if not value:
        return None
    key = value.strip()
    return key if key in VALID_KEYS else None


def parse_duration(value: str | None) -> int | None:
    """Parse "m:ss" or a plain number of seconds.

    Examples:
        >>> parse_duration("3:45")
        225
        >>> parse_duration("245")
        245
    """
    if not value:
        return None
    text = value.strip()
    if ":" in text:
        minutes, _, seconds = text.partition(":")
        if minutes.isdigit() and seconds.isdigit():
            return int(minutes) * 60 + int(seconds)
        return None
    return int(text) if text.isdigit() else None


def parse_bpm(value: str | None) -> int | None:
    """Parse a tempo, accepting only 40-300 BPM."""
    if not value or not value.strip().isdigit():
        return None
    bpm = int(value.strip())
    return bpm if MIN_BPM <= bpm <= MAX_BPM else None
