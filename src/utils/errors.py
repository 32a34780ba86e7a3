"""Custom exception hierarchy for searchCache.

All application exceptions inherit from :class:`SearchCacheError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "openlibrary", "redis") caused the failure.

    SearchCacheError  (base -- catch-all for any searchCache error)
    +-- QueryValidationError  (empty / unusable search query)
    +-- CacheStoreError       (cache connectivity or deserialization failure)
    +-- UpstreamSearchError   (upstream search API failed)
    |   +-- RateLimitError    (upstream rate-limit exceeded)
    +-- ConfigurationError    (startup / invalid config)

Only ``QueryValidationError`` and ``UpstreamSearchError`` ever reach the
client.  ``CacheStoreError`` is absorbed inside the resolution engine and
degrades to a cache miss.
"""


class SearchCacheError(Exception):
    """Base exception for all searchCache errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name``.  ``__str__`` prefixes the provider name in brackets,
    e.g. ``[redis] Connection refused``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Request validation
# ---------------------------------------------------------------------------

class QueryValidationError(SearchCacheError):
    """Raised when a search query is empty or has no searchable content."""

    def __init__(
        self,
        message: str = "Search query parameter 'q' is required",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Cache store errors
# ---------------------------------------------------------------------------

class CacheStoreError(SearchCacheError):
    """Raised by cache providers on transport or deserialization failures.

    A missing key is NOT an error -- providers return ``None`` for that.
    """

    def __init__(
        self,
        message: str = "Cache store operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Upstream provider errors
# ---------------------------------------------------------------------------

class UpstreamSearchError(SearchCacheError):
    """Raised when the upstream search API call fails or returns garbage."""

    def __init__(
        self,
        message: str = "Failed to get search results",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class RateLimitError(UpstreamSearchError):
    """Raised when the upstream search API rejects us with HTTP 429."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class ConfigurationError(SearchCacheError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
