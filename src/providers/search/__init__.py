"""Upstream search providers.

OpenLibrarySearchProvider wraps the free OpenLibrary ``search.json`` API.
Another search backend only needs to implement ISearchProvider.
"""

from src.providers.search.openlibrary_provider import OpenLibrarySearchProvider

__all__ = ["OpenLibrarySearchProvider"]
