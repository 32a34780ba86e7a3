"""Abstract base class for upstream search providers.

The upstream provider is the expensive thing the cache sits in front of.
Implementations wrap a concrete search API (OpenLibrary today) and return
a :class:`~src.models.search.SearchRecord` the cache can store verbatim.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.models.search import SearchRecord


# Concrete implementation: OpenLibrarySearchProvider (src/providers/search/)
class ISearchProvider(ABC):
    """Contract for the upstream search API."""

    @abstractmethod
    async def search(self, query: str, limit: int = 3) -> SearchRecord:
        """Execute a search and return the ranked results.

        Parameters
        ----------
        query:
            The normalized search query.
        limit:
            Maximum number of documents to return.

        Returns
        -------
        SearchRecord
            Total-found count plus up to *limit* documents, in ranking order.

        Raises
        ------
        src.utils.errors.UpstreamSearchError
            If the search API call fails or returns an unparseable body.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"openlibrary"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured."""
