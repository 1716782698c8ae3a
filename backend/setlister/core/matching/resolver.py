"""Song match resolver - finds catalog songs for parsed candidates.

Search runs in three stages against a SongCatalog:
1. Exact: case-insensitive title equality. If anything matches, stop here.
2. Partial: catalog titles containing the candidate title.
3. Similarity: fuzzy title comparison over a bounded catalog sample.

Stages 2 and 3 are merged, deduplicated by song id and ranked by score.
"""

from __future__ import annotations

import structlog

from setlister.core.catalog import CatalogSong, SongCatalog
from setlister.core.metrics import catalog_lookup_errors_total, song_match_total
from setlister.core.parsing.models import ParsedSetlist, SongCandidate
from setlister.core.parsing.normalize import normalize_title

from .config import MatchingConfig, get_matching_config
from .results import MatchConfidence, MatchSearchResult, SongMatch
from .similarity import artist_matches, calculate_title_similarity

logger = structlog.get_logger("setlister.matching")


def score_match(
    candidate: SongCandidate,
    song: CatalogSong,
    config: MatchingConfig,
) -> tuple[float, float, bool]:
    """Score a catalog song against a candidate.

    Returns:
        Tuple of (score, title_similarity, artist_match)
    """
    similarity = calculate_title_similarity(
        candidate.title,
        normalize_title(song.title),
        config.levenshtein_max_length_ratio,
    )
    artist_match = artist_matches(candidate.artist, song.artists)
    score = similarity * config.title_weight + (config.artist_weight if artist_match else 0.0)
    return min(score, 1.0), similarity, artist_match


def _describe(tier: MatchConfidence, similarity: float, artist_match: bool) -> str:
    if tier is MatchConfidence.EXACT:
        return "Title and artist match"
    if tier is MatchConfidence.TITLE_ONLY:
        return "Title matches, artist differs"
    artist_note = "artist matches" if artist_match else "artist differs"
    return f"Title similarity {similarity:.2f}, {artist_note}"


async def _exact_matches(
    candidate: SongCandidate,
    catalog: SongCatalog,
    config: MatchingConfig,
) -> list[SongMatch]:
    songs = await catalog.find_exact(candidate.title, config.exact_search_limit)

    matches = []
    for song in songs:
        # Title equality was established by the catalog, so similarity is 1.0
        artist_match = artist_matches(candidate.artist, song.artists)
        tier = MatchConfidence.EXACT if artist_match else MatchConfidence.TITLE_ONLY
        score = config.title_weight + (config.artist_weight if artist_match else 0.0)
        matches.append(
            SongMatch(
                song=song,
                confidence=tier,
                score=min(score, 1.0),
                reason=_describe(tier, 1.0, artist_match),
            )
        )
    return matches


async def _partial_matches(
    candidate: SongCandidate,
    catalog: SongCatalog,
    config: MatchingConfig,
) -> list[SongMatch]:
    songs = await catalog.find_containing(candidate.title, config.partial_search_limit)

    matches = []
    for song in songs:
        score, similarity, artist_match = score_match(candidate, song, config)
        if score > config.partial_min_score:
            matches.append(
                SongMatch(
                    song=song,
                    confidence=MatchConfidence.PARTIAL,
                    score=score,
                    reason=_describe(MatchConfidence.PARTIAL, similarity, artist_match),
                )
            )
    return matches


async def _similarity_matches(
    candidate: SongCandidate,
    catalog: SongCatalog,
    config: MatchingConfig,
) -> list[SongMatch]:
    songs = await catalog.sample(config.sample_size)

    qualifying: list[tuple[float, CatalogSong]] = []
    for song in songs:
        similarity = calculate_title_similarity(
            candidate.title,
            normalize_title(song.title),
            config.levenshtein_max_length_ratio,
        )
        if similarity > config.similarity_min_title:
            qualifying.append((similarity, song))

    # Stable top-N: similarity descending, then title and id
    qualifying.sort(key=lambda item: (-item[0], item[1].title.lower(), item[1].id))

    matches = []
    for _, song in qualifying[: config.similarity_top_n]:
        score, similarity, artist_match = score_match(candidate, song, config)
        if score > config.similarity_min_score:
            matches.append(
                SongMatch(
                    song=song,
                    confidence=MatchConfidence.SIMILARITY,
                    score=score,
                    reason=_describe(MatchConfidence.SIMILARITY, similarity, artist_match),
                )
            )
    return matches


def merge_matches(*groups: list[SongMatch]) -> list[SongMatch]:
    """Merge match lists, keeping the higher-scoring entry per song id."""
    best: dict[str, SongMatch] = {}
    for group in groups:
        for match in group:
            existing = best.get(match.song.id)
            if existing is None or match.sort_key() < existing.sort_key():
                best[match.song.id] = match
    return sorted(best.values(), key=SongMatch.sort_key)


async def find_song_matches(
    candidate: SongCandidate,
    catalog: SongCatalog,
    config: MatchingConfig | None = None,
) -> MatchSearchResult:
    """Find likely catalog matches for a song candidate.

    Never raises for catalog failures: those are logged and reported as a
    result with confidence "error".

    Args:
        candidate: Normalized candidate from the parser
        catalog: Catalog to search
        config: Matching configuration (if None, loads from settings file)

    Returns:
        MatchSearchResult with matches ranked best first
    """
    if config is None:
        config = get_matching_config()

    if not candidate.title:
        result = MatchSearchResult()
        song_match_total.labels(confidence=result.confidence).inc()
        return result

    try:
        exact = await _exact_matches(candidate, catalog, config)
        if exact:
            result = MatchSearchResult.from_matches(sorted(exact, key=SongMatch.sort_key))
        else:
            partial = await _partial_matches(candidate, catalog, config)
            similar = await _similarity_matches(candidate, catalog, config)
            result = MatchSearchResult.from_matches(merge_matches(partial, similar))
    except Exception:
        catalog_lookup_errors_total.inc()
        logger.error(
            "Catalog lookup failed during matching",
            title=candidate.title,
            artist=candidate.artist,
            line_number=candidate.line_number,
            exc_info=True,
        )
        result = MatchSearchResult.error()

    song_match_total.labels(confidence=result.confidence).inc()
    logger.debug(
        "Matched song candidate",
        title=candidate.title,
        artist=candidate.artist,
        confidence=result.confidence,
        match_count=len(result.matches),
    )
    return result


async def match_setlist(
    parsed: ParsedSetlist,
    catalog: SongCatalog,
    config: MatchingConfig | None = None,
) -> list[MatchSearchResult]:
    """Match every candidate of a parsed setlist, in input order.

    Also records each result's confidence on its candidate.
    """
    if config is None:
        config = get_matching_config()

    results = []
    for candidate in parsed.songs:
        result = await find_song_matches(candidate, catalog, config)
        candidate.confidence = result.confidence
        results.append(result)

    logger.info(
        "Matched setlist",
        songs=len(results),
        new_songs=sum(1 for r in results if r.is_new_song),
    )
    return results
