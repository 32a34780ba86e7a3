"""Public interface definitions for the external collaborators.

The resolution engine and the search service talk to the cache store and the
upstream search API exclusively through these abstract base classes.
Concrete adapters live in ``src/providers/`` and are injected in
``src/main.py`` at startup, so tests can substitute fakes per test.

CONCRETE PROVIDER MAP:
    Interface          →  Concrete implementations (in src/providers/)
    ─────────────────────────────────────────────────────────────────────
    ICacheProvider     →  MemoryCacheProvider, RedisCacheProvider
    ISearchProvider    →  OpenLibrarySearchProvider
"""

from src.interfaces.cache_provider import ICacheProvider
from src.interfaces.search_provider import ISearchProvider

__all__ = [
    "ICacheProvider",
    "ISearchProvider",
]
