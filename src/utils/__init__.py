"""Utility modules for searchCache.

Available utility modules (all re-exported here for convenience):

- **errors** -- Domain-specific exception hierarchy rooted at SearchCacheError;
  validation, cache-store and upstream failures each get their own subclass
  so the HTTP layer can map them onto status codes.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **text_normalizer** -- Query normalization and the priority-ordered
  cache-key variations derived from it.
- **cache_keys** -- The ``<prefix>:search:<variant>`` key namespace.
- **timing** -- Millisecond stopwatch helper used in log events and metrics.
"""

# -- Cache key namespace ---------------------------------------------------
from src.utils.cache_keys import search_key, search_key_pattern, variant_from_key

# -- Domain exception hierarchy --------------------------------------------
from src.utils.errors import (
    CacheStoreError,
    ConfigurationError,
    QueryValidationError,
    RateLimitError,
    SearchCacheError,
    UpstreamSearchError,
)

# -- Structured logging setup ----------------------------------------------
from src.utils.logging import configure_logging, get_logger

# -- Query normalization ---------------------------------------------------
from src.utils.text_normalizer import generate_variations, normalize_query

# -- Timing ----------------------------------------------------------------
from src.utils.timing import elapsed_ms

__all__ = [
    "CacheStoreError",
    "ConfigurationError",
    "QueryValidationError",
    "RateLimitError",
    "SearchCacheError",
    "UpstreamSearchError",
    "configure_logging",
    "elapsed_ms",
    "generate_variations",
    "get_logger",
    "normalize_query",
    "search_key",
    "search_key_pattern",
    "variant_from_key",
]
