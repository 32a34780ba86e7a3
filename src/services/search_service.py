"""Request-level search flow: cache first, upstream on miss, write back.

    1. VALIDATE  -- reject blank queries and queries with no searchable text.
    2. RESOLVE   -- CacheResolver: exact variations, then fuzzy match.
    3. FETCH     -- on Miss only, one call to the upstream search provider.
    4. WRITE     -- store the fresh record under the canonical key.  A failed
                    write is logged by the resolver and ignored here.

Upstream failures propagate (there is no data to return); cache failures
never do.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

import structlog

from src.interfaces.search_provider import ISearchProvider
from src.models.cache import ExactHit, FuzzyHit
from src.models.search import SearchRecord
from src.services.cache_resolver import CacheResolver
from src.utils.errors import QueryValidationError
from src.utils.logging import get_logger
from src.utils.text_normalizer import normalize_query
from src.utils.timing import elapsed_ms

logger: structlog.BoundLogger = get_logger(__name__)


@dataclass(frozen=True)
class SearchOutcome:
    """Everything the HTTP layer needs to render a search response."""

    query: str
    record: SearchRecord
    cached: bool
    cache_key: str | None = None
    fuzzy_match: bool = False
    matched_query: str | None = None
    similarity_score: float | None = None
    match_method: str | None = None
    cache_written: bool | None = None
    cache_lookup_ms: float = 0.0
    api_call_ms: float | None = None
    total_ms: float = 0.0


class SearchService:
    """Serve searches from the cache, falling back to the upstream provider.

    Parameters
    ----------
    resolver:
        Cache resolution engine.
    provider:
        Upstream search provider called on a miss.
    result_limit:
        Number of documents requested from the upstream provider.
    """

    def __init__(
        self,
        resolver: CacheResolver,
        provider: ISearchProvider,
        result_limit: int = 3,
    ) -> None:
        self._resolver = resolver
        self._provider = provider
        self._result_limit = result_limit

    async def search(self, raw_query: str | None) -> SearchOutcome:
        """Return results for *raw_query*.

        Raises
        ------
        QueryValidationError
            If the query is missing, blank, or only punctuation.
        UpstreamSearchError
            If nothing was cached and the upstream call failed.
        """
        if raw_query is None or not raw_query.strip():
            raise QueryValidationError()
        if not normalize_query(raw_query):
            raise QueryValidationError("Search query has no searchable content")

        start = time.perf_counter()
        outcome = await self._resolver.resolve(raw_query)
        cache_lookup_ms = elapsed_ms(start)

        if isinstance(outcome, ExactHit):
            return SearchOutcome(
                query=raw_query,
                record=outcome.record,
                cached=True,
                cache_key=outcome.matched_variant,
                cache_lookup_ms=cache_lookup_ms,
                total_ms=elapsed_ms(start),
            )

        if isinstance(outcome, FuzzyHit):
            return SearchOutcome(
                query=raw_query,
                record=outcome.record,
                cached=True,
                cache_key=outcome.matched_variant,
                fuzzy_match=True,
                matched_query=outcome.matched_variant,
                similarity_score=outcome.score,
                match_method=outcome.method.value,
                cache_lookup_ms=cache_lookup_ms,
                total_ms=elapsed_ms(start),
            )

        logger.info("cache_miss_calling_api", query=outcome.canonical_key)
        api_start = time.perf_counter()
        record = await self._provider.search(outcome.canonical_key, self._result_limit)
        api_call_ms = elapsed_ms(api_start)

        cache_written = await self._resolver.record_miss(outcome.canonical_key, record)

        total_ms = elapsed_ms(start)
        logger.info(
            "search_performance_summary",
            query=outcome.canonical_key,
            api_call_ms=api_call_ms,
            total_request_ms=total_ms,
            api_percentage=round(api_call_ms / total_ms * 100, 2) if total_ms else 0.0,
        )
        return SearchOutcome(
            query=raw_query,
            record=record,
            cached=False,
            cache_written=cache_written,
            cache_lookup_ms=cache_lookup_ms,
            api_call_ms=api_call_ms,
            total_ms=total_ms,
        )
