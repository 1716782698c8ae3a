"""Match result types."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from setlister.core.catalog import CatalogSong


class MatchConfidence(str, Enum):
    """How a catalog song was matched to a candidate."""

    EXACT = "exact"
    TITLE_ONLY = "title-only"
    PARTIAL = "partial"
    SIMILARITY = "similarity"
    ERROR = "error"

    @property
    def rank(self) -> int:
        """Tier order, strongest first. Used to break score ties."""
        return _TIER_RANK[self]


_TIER_RANK = {
    MatchConfidence.EXACT: 0,
    MatchConfidence.TITLE_ONLY: 1,
    MatchConfidence.PARTIAL: 2,
    MatchConfidence.SIMILARITY: 3,
    MatchConfidence.ERROR: 4,
}

# Result-level confidence when nothing in the catalog matched
NEW_SONG = "new"


class SongMatch(BaseModel):
    """A catalog song proposed for a candidate."""

    song: CatalogSong
    confidence: MatchConfidence
    score: float = Field(..., ge=0.0, le=1.0, description="Higher is better")
    reason: str = ""

    def sort_key(self) -> tuple[float, int, str, str]:
        """Score descending, then tier, title and id."""
        return (-self.score, self.confidence.rank, self.song.title.lower(), self.song.id)


class MatchSearchResult(BaseModel):
    """Outcome of matching one candidate against the catalog."""

    matches: list[SongMatch] = Field(default_factory=list)
    is_new_song: bool = True
    best_match: SongMatch | None = None
    confidence: str = NEW_SONG

    @classmethod
    def from_matches(cls, matches: list[SongMatch]) -> MatchSearchResult:
        """Build a result from matches already in ranked order."""
        if not matches:
            return cls()
        best = matches[0]
        return cls(
            matches=matches,
            is_new_song=False,
            best_match=best,
            confidence=best.confidence.value,
        )

    @classmethod
    def error(cls) -> MatchSearchResult:
        """Empty result for a failed catalog lookup."""
        return cls(confidence=MatchConfidence.ERROR.value)
