"""Title similarity and artist comparison.

Pure functions on normalized strings; the resolver combines them into scores.
"""

from __future__ import annotations

from setlister.core.parsing.normalize import normalize_artist

DEFAULT_MAX_LENGTH_RATIO = 0.5

CONTAINMENT_SIMILARITY = 0.8


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance with unit costs."""
    if len(a) < len(b):
        a, b = b, a

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(
                min(
                    previous[j] + 1,  # deletion
                    current[j - 1] + 1,  # insertion
                    previous[j - 1] + cost,  # substitution
                )
            )
        previous = current

    return previous[-1]


def levenshtein_similarity(
    a: str,
    b: str,
    max_length_ratio: float = DEFAULT_MAX_LENGTH_RATIO,
) -> float:
    """Edit-distance similarity in [0.0, 1.0].

    Args:
        a: First string
        b: Second string
        max_length_ratio: Give up (0.0) when the length difference exceeds this
            share of the longer string

    Returns:
        1.0 for two empty strings, otherwise max(0, 1 - distance / max_len)
    """
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0

    if abs(len(a) - len(b)) > max_len * max_length_ratio:
        return 0.0

    return max(0.0, 1.0 - levenshtein_distance(a, b) / max_len)


def calculate_title_similarity(
    a: str,
    b: str,
    max_length_ratio: float = DEFAULT_MAX_LENGTH_RATIO,
) -> float:
    """Similarity of two titles in [0.0, 1.0].

    Rules, first match wins:
    1. Equal (case-insensitive) -> 1.0
    2. Either empty -> 0.0
    3. One contains the other -> 0.8
    4. Shared words -> common / max(word counts), over word sets
    5. Two single words -> Levenshtein similarity
    6. Otherwise -> 0.0

    Examples:
        >>> calculate_title_similarity("Sugaree", "sugaree")
        1.0
        >>> calculate_title_similarity("moon", "fly me to the moon")
        0.8
    """
    title_a = a.lower()
    title_b = b.lower()

    if title_a == title_b:
        return 1.0
    if not title_a or not title_b:
        return 0.0
    if title_a in title_b or title_b in title_a:
        return CONTAINMENT_SIMILARITY

    words_a = set(title_a.split())
    words_b = set(title_b.split())
    common = words_a & words_b
    if common:
        return len(common) / max(len(words_a), len(words_b))

    if len(words_a) == 1 and len(words_b) == 1:
        return levenshtein_similarity(title_a, title_b, max_length_ratio)

    return 0.0


def artist_matches(candidate_artist: str | None, song_artists: list[str]) -> bool:
    """Check whether a candidate's artist agrees with a catalog song.

    True when the normalized artist equals any of the song's artists, or when
    neither side has an artist.
    """
    artist = normalize_artist(candidate_artist or "")
    names = [normalize_artist(name) for name in song_artists]
    names = [name for name in names if name]

    if not artist:
        return not names
    return artist in names
