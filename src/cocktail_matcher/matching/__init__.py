"""Recipe matching and ranking."""

from .engine import (
    FederatedMatchEngine,
    IndexedMatchEngine,
    MatchEngine,
    create_match_engine,
)
from .models import MatchResult
from .ranking import build_match_result, match_percentage, minimum_matches, rank_matches

__all__ = [
    "MatchEngine",
    "IndexedMatchEngine",
    "FederatedMatchEngine",
    "create_match_engine",
    "MatchResult",
    "build_match_result",
    "match_percentage",
    "minimum_matches",
    "rank_matches",
]
