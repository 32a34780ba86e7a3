"""FastAPI API routes for the searchCache service.

# ─── API ROUTE MAP ────────────────────────────────────────────────────
#
# Endpoint              Method  Description
# ─────────────────────────────────────────────────────────────────────
# /api/v1/search?q=...  GET     Cached search (exact → fuzzy → upstream)
# /api/v1/health        GET     Health check + provider status
#
# DEPENDENCY INJECTION PATTERN:
# Route functions declare their dependencies as Annotated params.  FastAPI
# resolves them via Depends() helpers that read from app.state (populated
# at startup in main.py's _build_all), so tests can put fakes on app.state.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, Query, Request

from src.api.schemas import ErrorResponse, HealthResponse, SearchMetrics, SearchResponse
from src.services.search_service import SearchOutcome, SearchService
from src.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/api/v1")

_VERSION = "0.1.0"


# ---------------------------------------------------------------------------
# Dependency injection helpers — resolve singletons from app.state
# ---------------------------------------------------------------------------


def _get_search_service(request: Request) -> SearchService:
    """Return the search service from application state."""
    return request.app.state.search_service


SearchServiceDep = Annotated[SearchService, Depends(_get_search_service)]


def _to_response(outcome: SearchOutcome) -> SearchResponse:
    return SearchResponse(
        query=outcome.query,
        num_found=outcome.record.num_found,
        results=outcome.record.docs,
        cached=outcome.cached,
        cache_key=outcome.cache_key,
        fuzzy_match=outcome.fuzzy_match,
        matched_query=outcome.matched_query,
        similarity_score=outcome.similarity_score,
        match_method=outcome.match_method,
        response_time=f"{outcome.total_ms:.2f}ms",
        metrics=SearchMetrics(
            cache_lookup_ms=outcome.cache_lookup_ms,
            total_ms=outcome.total_ms,
            api_call_ms=outcome.api_call_ms,
        ),
    )


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


@router.get(
    "/search",
    response_model=SearchResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
    summary="Search with a typo-tolerant cache in front of the upstream API",
)
async def search(
    service: SearchServiceDep,
    q: Annotated[str | None, Query(description="Free-text search query")] = None,
) -> SearchResponse:
    """Return results for ``q`` from the cache when possible, else upstream.

    Validation and upstream failures are raised as ``SearchCacheError``
    subclasses and rendered by ``ErrorHandlingMiddleware``.
    """
    _logger.info("search_request_received", query=q)
    outcome = await service.search(q)
    return _to_response(outcome)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


async def build_health(request: Request) -> HealthResponse:
    """Assemble the health payload, pinging the cache when it supports it."""
    state = request.app.state
    providers: dict[str, Any] = dict(getattr(state, "provider_registry", {}))

    cache = getattr(state, "cache", None)
    ping = getattr(cache, "ping", None)
    if ping is not None:
        providers["cache_reachable"] = await ping()

    return HealthResponse(
        status="healthy",
        service=getattr(state, "service_name", "custom-search-service"),
        version=_VERSION,
        time=datetime.now(tz=timezone.utc).isoformat(timespec="seconds"),  # noqa: UP017
        providers=providers,
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Application health check",
)
async def health_check(request: Request) -> HealthResponse:
    """Return application health, version, and provider availability."""
    return await build_health(request)
