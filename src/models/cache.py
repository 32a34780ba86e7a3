"""Cache resolution models.

Value objects produced while resolving a query against the cache:

    - CandidateMatch -- one scored key from the fuzzy scan (transient)
    - ExactHit       -- a stored record found under one of the query's variations
    - FuzzyHit       -- a stored record found by similarity to an existing key
    - Miss           -- nothing usable cached; the caller must fetch upstream

These are plain frozen dataclasses rather than Pydantic models: they never
cross the HTTP boundary directly and need no validation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from src.models.search import SearchRecord


class MatchMethod(str, Enum):  # noqa: UP042 — StrEnum requires Python 3.11+
    """How a fuzzy candidate was accepted."""

    EDIT_DISTANCE = "edit-distance"  # whole query within N edits of the key
    WORD_OVERLAP = "word-overlap"    # enough words individually close


@dataclass(frozen=True)
class CandidateMatch:
    """A cached key that scored above threshold during the fuzzy scan.

    Attributes
    ----------
    key:
        Full cache key, e.g. ``"search_cache:search:harry potter"``.
    variant:
        The query portion of the key (what was matched against).
    score:
        Similarity in ``[0.0, 1.0]``; higher is better.
    method:
        Which scoring rule accepted the key.
    """

    key: str
    variant: str
    score: float
    method: MatchMethod


@dataclass(frozen=True)
class ExactHit:
    """Record found under one of the deterministic query variations."""

    record: SearchRecord
    matched_variant: str
    key: str


@dataclass(frozen=True)
class FuzzyHit:
    """Record found via the best-scoring fuzzy candidate."""

    record: SearchRecord
    matched_variant: str
    key: str
    score: float
    method: MatchMethod


@dataclass(frozen=True)
class Miss:
    """Nothing cached for this query.

    ``canonical_key`` is the fully normalized query -- the only key a fresh
    upstream result may be written under.
    """

    canonical_key: str
    variations_tried: tuple[str, ...] = ()
    fuzzy_candidates: tuple[CandidateMatch, ...] = field(default_factory=tuple)


ResolutionOutcome = Union[ExactHit, FuzzyHit, Miss]
