"""Single-line song parsing."""

from __future__ import annotations

import re

from .models import SongCandidate
from .normalize import normalize_artist, normalize_title

LEADING_NUMBER = re.compile(r"^\d+\.?\s*")

# Separators tried in priority order for "Title - Artist" style lines
LINE_SEPARATORS = (" - ", ",")

MAX_ARTIST_COLUMN_LENGTH = 50

_DATE_TIME_PATTERNS = (
    re.compile(r"^\d{1,2}[/.-]\d{1,2}([/.-]\d{2,4})?$"),  # 3/14, 03-14-2024
    re.compile(r"^\d{4}-\d{1,2}-\d{1,2}([ t]\d{1,2}:\d{2}(:\d{2})?)?$"),  # 2024-03-14
    re.compile(r"^\d{1,2}:\d{2}(:\d{2})?\s*([ap]\.?m\.?)?$"),  # 9:30, 9:30 pm, 3:45:10
    re.compile(r"^\d{1,2}\s*[ap]\.?m\.?$"),  # 9pm
)

_MONTH_DAY = re.compile(
    r"^(jan|feb|mar|apr|may|jun|jul|aug|sep|sept|oct|nov|dec)[a-z]*\.?\s+\d{1,2}\b",
    re.IGNORECASE,
)
_PURE_NUMBER = re.compile(r"^[\d.,:]+$")


def is_date_or_time(value: str) -> bool:
    """Check whether a table cell holds a date or time of day."""
    text = value.strip().lower()
    return any(pattern.match(text) for pattern in _DATE_TIME_PATTERNS)


def is_generic_metadata(value: str) -> bool:
    """Check whether a table cell is metadata rather than an artist name.

    Pure numbers, very long cells and "Mar 14" style dates don't name artists.
    """
    text = value.strip()
    if _PURE_NUMBER.match(text):
        return True
    if len(text) > MAX_ARTIST_COLUMN_LENGTH:
        return True
    return bool(_MONTH_DAY.match(text))


def _strip_quotes(value: str) -> str:
    return value.strip().strip("\"'").strip()


def split_table_row(line: str) -> tuple[str, str]:
    """Split a tab-separated row into (title, artist).

    Column 0 is the title. The artist is the first later column that is not
    empty, a date/time, or generic metadata. Missing artist is "".
    """
    columns = line.split("\t")
    title = _strip_quotes(columns[0])

    for column in columns[1:]:
        value = _strip_quotes(column)
        if not value or is_date_or_time(value) or is_generic_metadata(value):
            continue
        return title, value

    return title, ""


def split_title_artist(line: str) -> tuple[str, str]:
    """Split "Title - Artist" or "Title, Artist" into two parts.

    The first separator present wins and splits at its first occurrence.
    """
    for separator in LINE_SEPARATORS:
        if separator in line:
            title, artist = line.split(separator, 1)
            return title.strip(), artist.strip()
    return line, ""


def parse_song_line(line: str, line_number: int) -> SongCandidate | None:
    """Parse a single song line.

    Leading numbering is always removed, so titles that start with a number
    lose it: "1999 - Prince" parses as the title "prince" with no artist.

    Args:
        line: Raw line (already stripped of surrounding whitespace)
        line_number: Position of the line, used for reporting

    Returns:
        SongCandidate, or None if nothing remains after removing numbering

    Examples:
        >>> parse_song_line("Beautiful Love - Ray Charles", 1).artist
        'ray charles'
        >>> parse_song_line("1. Fly Me To The Moon, Sinatra", 2).title
        'fly me to the moon'
    """
    clean_line = LEADING_NUMBER.sub("", line.strip()).strip()
    if not clean_line:
        return None

    if "\t" in clean_line:
        raw_title, raw_artist = split_table_row(clean_line)
    else:
        raw_title, raw_artist = split_title_artist(clean_line)

    artist = normalize_artist(raw_artist)
    return SongCandidate(
        line_number=line_number,
        original_line=line,
        title=normalize_title(raw_title),
        artist=artist or None,
    )
