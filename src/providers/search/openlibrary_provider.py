"""OpenLibrary search provider implementing ISearchProvider.

Calls the public ``/search.json`` endpoint (no API key required) and maps
the JSON body onto :class:`~src.models.search.SearchRecord`.  Unlike the
cache, the upstream is allowed to fail loudly: with nothing cached there is
no data to return, so every failure surfaces as ``UpstreamSearchError``.
"""

from __future__ import annotations

import time

import httpx
import structlog
from pydantic import ValidationError

from src.interfaces.search_provider import ISearchProvider
from src.models.search import SearchRecord
from src.utils.errors import RateLimitError, UpstreamSearchError
from src.utils.logging import get_logger
from src.utils.timing import elapsed_ms

_PROVIDER = "openlibrary"
_SEARCH_PATH = "/search.json"
_USER_AGENT = "searchCache/0.1.0"


class OpenLibrarySearchProvider(ISearchProvider):
    """Upstream search backed by OpenLibrary.

    Parameters
    ----------
    http_client:
        Shared ``httpx.AsyncClient``; its timeout bounds every call.
    base_url:
        API root, e.g. ``"https://openlibrary.org"``.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str = "https://openlibrary.org",
    ) -> None:
        self._http = http_client
        self._base_url = base_url.rstrip("/")
        self._logger: structlog.BoundLogger = get_logger(__name__)

    async def search(self, query: str, limit: int = 3) -> SearchRecord:
        # httpx form-encodes spaces as "+", matching "q=project+hail+mary".
        params = {"q": query, "limit": limit}
        url = f"{self._base_url}{_SEARCH_PATH}"
        start = time.perf_counter()

        try:
            response = await self._http.get(
                url,
                params=params,
                headers={"User-Agent": _USER_AGENT, "Accept": "application/json"},
            )
        except httpx.HTTPError as exc:
            self._logger.error(
                "upstream_request_failed",
                query=query,
                error=str(exc),
                api_duration_ms=elapsed_ms(start),
            )
            raise UpstreamSearchError(
                "Failed to get search results", provider_name=_PROVIDER
            ) from exc

        api_duration_ms = elapsed_ms(start)
        self._logger.info(
            "upstream_response_received",
            status_code=response.status_code,
            api_duration_ms=api_duration_ms,
        )

        if response.status_code == 429:
            raise RateLimitError("OpenLibrary rate limit exceeded", provider_name=_PROVIDER)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise UpstreamSearchError(
                f"OpenLibrary returned HTTP {response.status_code}", provider_name=_PROVIDER
            ) from exc

        try:
            record = SearchRecord.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            self._logger.error("upstream_parse_failed", query=query, error=str(exc))
            raise UpstreamSearchError(
                "Failed to parse API response", provider_name=_PROVIDER
            ) from exc

        self._logger.info(
            "upstream_search_complete",
            query=query,
            num_found=record.num_found,
            num_returned=len(record.docs),
        )
        return record

    def get_provider_name(self) -> str:
        return _PROVIDER

    def is_available(self) -> bool:
        """OpenLibrary needs no credentials; configured means available."""
        return bool(self._base_url)
