"""Cache key namespace helpers.

Every cached search lives under ``<prefix>:search:<variant>``; these helpers
are the only place that format is spelled out.
"""

_SEARCH_SEGMENT = "search"


def search_key(prefix: str, variant: str) -> str:
    """Return the full cache key for a query *variant*."""
    return f"{prefix}:{_SEARCH_SEGMENT}:{variant}"


def search_key_pattern(prefix: str) -> str:
    """Return the glob pattern that enumerates every cached search."""
    return f"{prefix}:{_SEARCH_SEGMENT}:*"


def variant_from_key(prefix: str, key: str) -> str:
    """Strip the namespace from *key*, leaving the query variant."""
    namespace = f"{prefix}:{_SEARCH_SEGMENT}:"
    if key.startswith(namespace):
        return key[len(namespace):]
    return key
