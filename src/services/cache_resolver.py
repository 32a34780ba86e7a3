"""Cache resolution orchestrator — the single entry point into the cache.

Resolves a raw query to one of three outcomes:

    ExactHit  -- a record stored under one of the query's variations
    FuzzyHit  -- a record stored under a key similar enough to the query
    Miss      -- nothing usable; the caller fetches upstream, then calls
                 :meth:`CacheResolver.record_miss` with the canonical key

Resolution order (cheapest first):
  1. NORMALIZE   -- lower-case, strip punctuation, collapse whitespace.
  2. EXACT       -- point lookups of each variation in priority order.
  3. FUZZY       -- scan all cached keys, fetch the best candidate.
  4. MISS        -- report the canonical key for write-back.

Everything the resolver needs (store, prefix, TTL, thresholds) is passed
in at construction; there is no module-level state, so tests build a fresh
resolver around a fake store per test.
"""

from __future__ import annotations

import time

import structlog
from pydantic import ValidationError

from src.interfaces.cache_provider import ICacheProvider
from src.models.cache import CandidateMatch, ExactHit, FuzzyHit, Miss, ResolutionOutcome
from src.models.search import SearchRecord
from src.services.exact_lookup import ExactVariationLookup
from src.services.fuzzy_matcher import FuzzyCacheMatcher, FuzzyMatchConfig
from src.utils.cache_keys import search_key
from src.utils.errors import QueryValidationError
from src.utils.logging import get_logger
from src.utils.text_normalizer import generate_variations, normalize_query
from src.utils.timing import elapsed_ms

logger: structlog.BoundLogger = get_logger(__name__)

_DEFAULT_TTL_SECONDS = 30 * 60


class CacheResolver:
    """Resolve search queries against the cache, tolerating query variation.

    Parameters
    ----------
    cache:
        Key-value store holding cached search records.
    prefix:
        Process-wide key prefix; keys are ``<prefix>:search:<variant>``.
    ttl_seconds:
        TTL requested for every :meth:`record_miss` write.
    fuzzy_config:
        Thresholds for the fuzzy fallback.
    """

    def __init__(
        self,
        cache: ICacheProvider,
        prefix: str,
        ttl_seconds: int = _DEFAULT_TTL_SECONDS,
        fuzzy_config: FuzzyMatchConfig | None = None,
    ) -> None:
        self._cache = cache
        self._prefix = prefix
        self._ttl_seconds = ttl_seconds
        self._exact = ExactVariationLookup(cache, prefix)
        self._fuzzy = FuzzyCacheMatcher(cache, prefix, fuzzy_config)

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    async def resolve(self, raw_query: str) -> ResolutionOutcome:
        """Resolve *raw_query* to an :class:`ExactHit`, :class:`FuzzyHit` or :class:`Miss`.

        Raises
        ------
        QueryValidationError
            If the query has no searchable content after normalization.
        """
        normalized = normalize_query(raw_query)
        if not normalized:
            raise QueryValidationError("Search query has no searchable content")

        variations = generate_variations(normalized)
        assert variations and variations[0] == normalized, "canonical variation must come first"

        start = time.perf_counter()
        exact = await self._exact.lookup(normalized, variations)
        if exact.hit:
            logger.info(
                "cache_exact_hit",
                original_query=raw_query,
                matched_variation=exact.matched_variant,
                cache_key=exact.matched_key,
                num_results=len(exact.record.docs),
                cache_lookup_ms=elapsed_ms(start),
            )
            return ExactHit(
                record=exact.record,
                matched_variant=exact.matched_variant,
                key=exact.matched_key,
            )

        logger.debug("cache_trying_fuzzy", query=normalized, variations_tried=len(variations))
        candidates = await self._fuzzy.find_similar(normalized, self._fuzzy.config.max_candidates)
        if candidates:
            best = candidates[0]
            record = await self._fetch_candidate(best)
            if record is not None:
                logger.info(
                    "cache_fuzzy_hit",
                    original_query=raw_query,
                    matched_query=best.variant,
                    similarity_score=best.score,
                    match_method=best.method.value,
                    num_candidates=len(candidates),
                    cache_lookup_ms=elapsed_ms(start),
                )
                return FuzzyHit(
                    record=record,
                    matched_variant=best.variant,
                    key=best.key,
                    score=best.score,
                    method=best.method,
                )

        logger.info(
            "cache_miss",
            query=normalized,
            variations_tried=len(variations),
            fuzzy_matches_found=len(candidates),
            cache_lookup_ms=elapsed_ms(start),
        )
        return Miss(
            canonical_key=normalized,
            variations_tried=tuple(variations),
            fuzzy_candidates=tuple(candidates),
        )

    async def record_miss(
        self,
        canonical_key: str,
        record: SearchRecord,
        ttl: int | None = None,
    ) -> bool:
        """Write a freshly fetched *record* under the canonical key.

        Never raises: a failed write is logged and reported as ``False`` so a
        successful upstream fetch is still returned to the client.
        """
        key = search_key(self._prefix, canonical_key)
        effective_ttl = ttl if ttl is not None else self._ttl_seconds
        start = time.perf_counter()
        try:
            await self._cache.set(key, record.to_cache_payload(), ttl=effective_ttl)
        except Exception as exc:  # noqa: BLE001 — write-back is best effort
            logger.warning(
                "cache_write_failed",
                key=key,
                error=str(exc),
                cache_write_ms=elapsed_ms(start),
            )
            return False

        logger.info(
            "cache_write_complete",
            key=key,
            ttl=effective_ttl,
            cache_write_ms=elapsed_ms(start),
        )
        return True

    async def _fetch_candidate(self, candidate: CandidateMatch) -> SearchRecord | None:
        # The key may have expired between enumeration and this read.
        try:
            payload = await self._cache.get(candidate.key)
        except Exception as exc:  # noqa: BLE001 — fall through to a miss
            logger.warning("cache_lookup_failed", key=candidate.key, error=str(exc))
            return None
        if payload is None:
            logger.debug("fuzzy_candidate_vanished", key=candidate.key)
            return None
        try:
            return SearchRecord.model_validate(payload)
        except ValidationError as exc:
            logger.warning("cache_payload_invalid", key=candidate.key, error_count=exc.error_count())
            return None
