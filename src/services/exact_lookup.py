"""Exact-variation cache lookup.

Tries each deterministic query variation, in priority order, as a point
lookup.  The first stored record wins.  A cache malfunction is never fatal:
a store error or an unreadable payload only rules out that one variation,
and the worst case is a miss that sends the caller to the upstream API.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog
from pydantic import ValidationError

from src.interfaces.cache_provider import ICacheProvider
from src.models.search import SearchRecord
from src.utils.cache_keys import search_key
from src.utils.errors import CacheStoreError
from src.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)


@dataclass(frozen=True)
class ExactLookupResult:
    """Outcome of an exact-variation lookup.

    ``record``, ``matched_key`` and ``matched_variant`` are ``None`` unless
    ``hit`` is ``True``.
    """

    hit: bool
    record: SearchRecord | None = None
    matched_key: str | None = None
    matched_variant: str | None = None


class ExactVariationLookup:
    """Point lookups of query variations against the cache store.

    Parameters
    ----------
    cache:
        The cache store to read from.
    prefix:
        Process-wide key prefix (keys are ``<prefix>:search:<variant>``).
    """

    def __init__(self, cache: ICacheProvider, prefix: str) -> None:
        self._cache = cache
        self._prefix = prefix

    async def lookup(self, query: str, variations: list[str]) -> ExactLookupResult:
        """Return the first variation that has a readable cached record."""
        for variation in variations:
            key = search_key(self._prefix, variation)
            record = await self._read(key)
            if record is not None:
                logger.debug(
                    "exact_variation_hit",
                    query=query,
                    variation=variation,
                    key=key,
                )
                return ExactLookupResult(
                    hit=True,
                    record=record,
                    matched_key=key,
                    matched_variant=variation,
                )

        return ExactLookupResult(hit=False)

    async def _read(self, key: str) -> SearchRecord | None:
        try:
            payload = await self._cache.get(key)
        except CacheStoreError as exc:
            logger.warning("cache_lookup_failed", key=key, error=str(exc))
            return None
        except Exception as exc:  # noqa: BLE001 — a broken store must degrade to a miss
            logger.warning(
                "cache_lookup_failed",
                key=key,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return None

        if payload is None:
            return None

        try:
            return SearchRecord.model_validate(payload)
        except ValidationError as exc:
            logger.warning(
                "cache_payload_invalid",
                key=key,
                error_count=exc.error_count(),
            )
            return None
