"""Title and artist normalization for matching."""

from __future__ import annotations

import re

# Curly quotes pasted from word processors and Google Docs
_APOSTROPHES = str.maketrans({"‘": "'", "’": "'", "ʼ": "'", "′": "'"})
_DOUBLE_QUOTES = str.maketrans({"“": '"', "”": '"'})

_TITLE_PUNCTUATION = re.compile(r"[^\w\s()']")
_ARTIST_PUNCTUATION = re.compile(r"[^\w\s()]")
_WHITESPACE = re.compile(r"\s+")


def straighten_quotes(value: str) -> str:
    """Replace typographic quotes with their ASCII equivalents."""
    return value.translate(_APOSTROPHES).translate(_DOUBLE_QUOTES)


def normalize_title(title: str | None) -> str:
    """Normalize a song title for matching.

    - Lowercase
    - Punctuation becomes spaces, except parentheses and apostrophes
    - Whitespace collapsed

    Examples:
        >>> normalize_title("Don’t Stop Believin'!")
        "don't stop believin'"
        >>> normalize_title("Fly Me To The Moon (In Other Words)")
        'fly me to the moon (in other words)'
    """
    if not title:
        return ""
    text = straighten_quotes(title).lower()
    text = _TITLE_PUNCTUATION.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def normalize_artist(artist: str | None) -> str:
    """Normalize an artist name for matching.

    Same as normalize_title but apostrophes are replaced too.
    """
    if not artist:
        return ""
    text = straighten_quotes(artist).lower()
    text = _ARTIST_PUNCTUATION.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()
