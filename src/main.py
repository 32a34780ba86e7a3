"""searchCache FastAPI application entry point.

Wires together the cache backend, the resolution engine, the upstream
search provider, and the routes via dependency injection.  Loads
configuration from ``.env`` and ``config/config.yaml`` and configures
structured logging before the app is built.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI, Request

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from src.api.routes import build_health
from src.api.routes import router as api_router
from src.api.schemas import HealthResponse
from src.config.loader import load_config
from src.config.settings import Settings
from src.interfaces.cache_provider import ICacheProvider
from src.providers.cache.memory_cache import MemoryCacheProvider
from src.providers.cache.redis_cache import RedisCacheProvider
from src.providers.search.openlibrary_provider import OpenLibrarySearchProvider
from src.services.cache_resolver import CacheResolver
from src.services.fuzzy_matcher import FuzzyMatchConfig
from src.services.search_service import SearchService
from src.utils.errors import ConfigurationError
from src.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()
config = load_config(settings=settings)

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Cache backend selection
# ---------------------------------------------------------------------------


def _build_cache_provider(app_settings: Settings) -> ICacheProvider:
    """Return the cache backend named by ``CACHE_BACKEND``.

    ``memory`` keeps entries in-process; ``redis`` shares them across
    workers.  Any other value is a configuration error.
    """
    backend = app_settings.cache_backend.strip().lower()
    if backend == "memory":
        return MemoryCacheProvider(
            max_size=app_settings.cache_max_size,
            ttl=app_settings.cache_ttl_seconds,
        )
    if backend == "redis":
        return RedisCacheProvider.from_settings(app_settings)
    raise ConfigurationError(
        f"Unknown cache backend {app_settings.cache_backend!r} (expected 'memory' or 'redis')"
    )


# ---------------------------------------------------------------------------
# Full DI assembly for the FastAPI application
# ---------------------------------------------------------------------------


def _build_all(app_settings: Settings, app_config: dict[str, Any] | None = None) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    app_config = app_config if app_config is not None else {}

    # -- Shared resources --
    http_client = httpx.AsyncClient(timeout=app_settings.upstream_timeout)

    # -- Cache + resolution engine --
    cache = _build_cache_provider(app_settings)
    fuzzy_config = FuzzyMatchConfig.from_dict(app_config.get("fuzzy") or {})
    resolver = CacheResolver(
        cache=cache,
        prefix=app_settings.cache_prefix,
        ttl_seconds=app_settings.cache_ttl_seconds,
        fuzzy_config=fuzzy_config,
    )

    # -- Upstream search --
    search_provider = OpenLibrarySearchProvider(
        http_client=http_client,
        base_url=app_settings.openlibrary_base_url,
    )
    search_service = SearchService(
        resolver=resolver,
        provider=search_provider,
        result_limit=app_settings.search_result_limit,
    )

    # -- Provider registry for /health --
    provider_registry: dict[str, Any] = {
        "cache": type(cache).__name__,
        "search": search_provider.get_provider_name(),
        "search_available": search_provider.is_available(),
    }

    return {
        "http_client": http_client,
        "cache": cache,
        "resolver": resolver,
        "search_provider": search_provider,
        "search_service": search_service,
        "provider_registry": provider_registry,
        "service_name": app_settings.service_name,
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise all providers and services on startup, clean up on shutdown."""
    components = _build_all(settings, config)

    for key, value in components.items():
        setattr(application.state, key, value)

    _logger.info(
        "app_startup",
        version="0.1.0",
        environment=settings.app_env,
        cache_backend=settings.cache_backend,
        cache_prefix=settings.cache_prefix,
        ttl_minutes=settings.cache_ttl_minutes,
    )

    yield

    # -- Shutdown: close shared httpx client and the cache connection --
    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()
    cache: ICacheProvider = components["cache"]
    await cache.close()
    _logger.info("app_shutdown", message="HTTP client and cache closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="searchCache API",
        version="0.1.0",
        description=(
            "Typo-tolerant caching front end for the OpenLibrary search API. "
            "Queries that differ only in case, punctuation, word order or small "
            "misspellings are served from a previously cached response."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application)

    # -- API routes --
    application.include_router(api_router)

    # -- Unversioned health alias for load balancers --
    @application.get("/health", response_model=HealthResponse, include_in_schema=False)
    async def root_health(request: Request) -> HealthResponse:
        return await build_health(request)

    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
