"""Matching configuration - search limits, thresholds and scoring weights."""

from dataclasses import dataclass, fields

import structlog

from setlister.core.config import load_settings_file

logger = structlog.get_logger("setlister.matching")


@dataclass
class MatchingConfig:
    """Configuration for catalog song matching.

    Centralizes every limit and threshold used by the resolver so they can be
    tuned from the "matching" block of settings.json.
    """

    # Stage 1: exact title lookup
    exact_search_limit: int = 20

    # Stage 2: substring lookup
    partial_search_limit: int = 20
    partial_min_score: float = 0.4  # Exclusive

    # Stage 3: similarity scan over a catalog sample
    sample_size: int = 200
    similarity_min_title: float = 0.3  # Exclusive, on title similarity alone
    similarity_top_n: int = 10
    similarity_min_score: float = 0.3  # Exclusive, on the weighted score

    # Scoring weights (sum to 1.0 so exact = 1.0, title-only = 0.8)
    title_weight: float = 0.8
    artist_weight: float = 0.2

    # Levenshtein gives up when lengths differ by more than this share
    levenshtein_max_length_ratio: float = 0.5


# Default config instance
DEFAULT_CONFIG = MatchingConfig()

# Cached config instance (loaded from settings file)
_cached_config: MatchingConfig | None = None


def get_matching_config() -> MatchingConfig:
    """Get the current matching configuration.

    Loads the "matching" block of settings.json if present, otherwise returns
    defaults. Unknown keys are ignored.

    Returns:
        MatchingConfig instance with current settings
    """
    global _cached_config

    if _cached_config is not None:
        return _cached_config

    matching_settings = load_settings_file().get("matching")
    if isinstance(matching_settings, dict) and matching_settings:
        known = {f.name for f in fields(MatchingConfig)}
        unknown = sorted(set(matching_settings) - known)
        if unknown:
            logger.warning("Ignoring unknown matching settings", keys=unknown)

        _cached_config = MatchingConfig(
            **{k: v for k, v in matching_settings.items() if k in known}
        )
        return _cached_config

    _cached_config = DEFAULT_CONFIG
    return _cached_config


def reload_matching_config() -> MatchingConfig:
    """Reload matching configuration from settings file.

    Call this after updating settings to ensure new values are used.
    """
    global _cached_config
    _cached_config = None
    return get_matching_config()
