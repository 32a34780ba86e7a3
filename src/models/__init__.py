"""searchCache domain models — re-exports all public model classes.

    - search.py -- the upstream search response, also the cached record
    - cache.py  -- resolution outcomes and fuzzy candidates
"""

from __future__ import annotations

from src.models.cache import (
    CandidateMatch,
    ExactHit,
    FuzzyHit,
    MatchMethod,
    Miss,
    ResolutionOutcome,
)
from src.models.search import SearchRecord

__all__ = [
    "CandidateMatch",
    "ExactHit",
    "FuzzyHit",
    "MatchMethod",
    "Miss",
    "ResolutionOutcome",
    "SearchRecord",
]
