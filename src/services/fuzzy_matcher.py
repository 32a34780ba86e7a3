"""Fuzzy cache matching for queries that missed every exact variation.

Scans every cached search key and scores it against the normalized query
with two rules, applied in order per key:

1. **edit-distance** -- the whole query is within ``max_edit_distance``
   Levenshtein edits of the cached query.  Score ``1 / (distance + 1)``.
2. **word-overlap** -- enough query words are each within
   ``word_edit_distance`` edits of some cached word.  Score is the matched
   fraction, measured against the longer of the two word lists.

Accepted candidates are returned best first.  The scan is O(number of
cached searches) and only runs after the cheap exact lookups failed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog
from rapidfuzz.distance import Levenshtein

from src.interfaces.cache_provider import ICacheProvider
from src.models.cache import CandidateMatch, MatchMethod
from src.utils.cache_keys import search_key_pattern, variant_from_key
from src.utils.errors import ConfigurationError
from src.utils.logging import get_logger
from src.utils.text_normalizer import normalize_query

logger: structlog.BoundLogger = get_logger(__name__)


@dataclass(frozen=True)
class FuzzyMatchConfig:
    """Tunable thresholds for the fuzzy scan.

    Attributes
    ----------
    max_edit_distance:
        Inclusive whole-query edit distance for an ``edit-distance`` match.
    word_edit_distance:
        Inclusive per-word edit distance for the word-overlap rule.
    min_word_overlap:
        Minimum matched-word ratio for a ``word-overlap`` match.
    max_candidates:
        How many candidates the resolver asks for.
    """

    max_edit_distance: int = 3
    word_edit_distance: int = 2
    min_word_overlap: float = 0.6
    max_candidates: int = 5

    def __post_init__(self) -> None:
        if self.max_edit_distance < 0 or self.word_edit_distance < 0:
            raise ConfigurationError("Fuzzy edit distances must be non-negative")
        if not 0.0 < self.min_word_overlap <= 1.0:
            raise ConfigurationError(
                f"min_word_overlap must be in (0.0, 1.0], got {self.min_word_overlap}"
            )
        if self.max_candidates < 1:
            raise ConfigurationError("max_candidates must be at least 1")

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> FuzzyMatchConfig:
        """Build a config from the ``fuzzy`` section of ``config.yaml``."""
        if not data:
            return cls()
        try:
            return cls(
                max_edit_distance=int(data.get("max_edit_distance", cls.max_edit_distance)),
                word_edit_distance=int(data.get("word_edit_distance", cls.word_edit_distance)),
                min_word_overlap=float(data.get("min_word_overlap", cls.min_word_overlap)),
                max_candidates=int(data.get("max_candidates", cls.max_candidates)),
            )
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Invalid fuzzy matching config: {exc}") from exc


class FuzzyCacheMatcher:
    """Score every cached search key against a query.

    Parameters
    ----------
    cache:
        The cache store to enumerate.
    prefix:
        Process-wide key prefix.
    config:
        Thresholds; defaults reproduce the production tuning.
    """

    def __init__(
        self,
        cache: ICacheProvider,
        prefix: str,
        config: FuzzyMatchConfig | None = None,
    ) -> None:
        self._cache = cache
        self._prefix = prefix
        self._config = config or FuzzyMatchConfig()

    @property
    def config(self) -> FuzzyMatchConfig:
        return self._config

    async def find_similar(self, query: str, max_results: int) -> list[CandidateMatch]:
        """Return up to *max_results* candidates for *query*, best first."""
        normalized = normalize_query(query)
        if not normalized or max_results <= 0:
            return []

        try:
            keys = await self._cache.keys_matching(search_key_pattern(self._prefix))
        except Exception as exc:  # noqa: BLE001 — enumeration failure means "no candidates"
            logger.warning("fuzzy_key_enumeration_failed", query=normalized, error=str(exc))
            return []

        query_words = normalized.split()
        candidates: list[CandidateMatch] = []
        for key in keys:
            variant = variant_from_key(self._prefix, key)
            # Already tried as an exact lookup.
            if variant == normalized:
                continue
            candidate = self._score(key, variant, normalized, query_words)
            if candidate is not None:
                candidates.append(candidate)

        # sorted() is stable: equal scores keep enumeration order.
        candidates = sorted(candidates, key=lambda c: c.score, reverse=True)[:max_results]

        logger.debug(
            "fuzzy_scan_complete",
            query=normalized,
            keys_scanned=len(keys),
            candidates=len(candidates),
        )
        return candidates

    def _score(
        self,
        key: str,
        variant: str,
        normalized: str,
        query_words: list[str],
    ) -> CandidateMatch | None:
        cfg = self._config

        # score_cutoff makes rapidfuzz stop early and return cutoff + 1 for
        # anything further away.
        distance = Levenshtein.distance(normalized, variant, score_cutoff=cfg.max_edit_distance)
        if distance <= cfg.max_edit_distance:
            return CandidateMatch(
                key=key,
                variant=variant,
                score=1.0 / (distance + 1),
                method=MatchMethod.EDIT_DISTANCE,
            )

        ratio = self._word_overlap(query_words, variant.split())
        if ratio >= cfg.min_word_overlap:
            return CandidateMatch(
                key=key,
                variant=variant,
                score=ratio,
                method=MatchMethod.WORD_OVERLAP,
            )
        return None

    def _word_overlap(self, query_words: list[str], cached_words: list[str]) -> float:
        longest = max(len(query_words), len(cached_words))
        if longest == 0:
            return 0.0

        limit = self._config.word_edit_distance
        matched = 0
        for q_word in query_words:
            if any(
                Levenshtein.distance(q_word, c_word, score_cutoff=limit) <= limit
                for c_word in cached_words
            ):
                matched += 1
        return matched / longest
