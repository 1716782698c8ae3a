"""Song match resolver.

Finds likely catalog songs for parsed setlist candidates using exact,
substring and fuzzy title comparison with configurable thresholds.
"""

from .config import DEFAULT_CONFIG, MatchingConfig, get_matching_config, reload_matching_config
from .resolver import find_song_matches, match_setlist, merge_matches, score_match
from .results import NEW_SONG, MatchConfidence, MatchSearchResult, SongMatch
from .similarity import (
    artist_matches,
    calculate_title_similarity,
    levenshtein_distance,
    levenshtein_similarity,
)

__all__ = [
    "MatchingConfig",
    "DEFAULT_CONFIG",
    "get_matching_config",
    "reload_matching_config",
    "MatchConfidence",
    "NEW_SONG",
    "SongMatch",
    "MatchSearchResult",
    "find_song_matches",
    "match_setlist",
    "merge_matches",
    "score_match",
    "calculate_title_similarity",
    "levenshtein_distance",
    "levenshtein_similarity",
    "artist_matches",
]
