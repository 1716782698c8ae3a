"""Setlist text parsing.

Turns pasted setlists into named sets of normalized song candidates, and
comma-separated bulk input into catalog records.
"""

from .bulk import parse_bpm, parse_bulk_input, parse_duration, parse_key
from .line import parse_song_line
from .models import BulkSongRecord, Complexity, ParsedSetlist, SetlistSet, SongCandidate
from .normalize import normalize_artist, normalize_title
from .setlist import extract_set_name, is_set_separator, parse_song_list

__all__ = [
    "SongCandidate",
    "SetlistSet",
    "ParsedSetlist",
    "BulkSongRecord",
    "Complexity",
    "parse_song_list",
    "parse_song_line",
    "is_set_separator",
    "extract_set_name",
    "normalize_title",
    "normalize_artist",
    "parse_bulk_input",
    "parse_key",
    "parse_duration",
    "parse_bpm",
]
