"""Query normalization and cache-key variation generation.

Two concerns live here:

1. **Query normalization** -- lower-cases, strips punctuation and collapses
   whitespace so that "Harry, Potter!!" and "harry  potter" produce the same
   cache key.  Idempotent: normalizing a normalized query is a no-op.

2. **Key variations** -- derives a short, priority-ordered list of
   deterministic alternates for a query (sorted words, long words only,
   no spaces) so word reordering, stop words and missing spaces still land
   on an existing cache entry.
"""

import re

# Anything that is not a letter, digit or whitespace.  ``\w`` also covers
# the underscore, so it is removed explicitly.
_NON_SEARCHABLE = re.compile(r"[^\w\s]|_")
_WHITESPACE = re.compile(r"\s+")

# Words at or below this length are dropped by the "long words" variation.
_SHORT_WORD_MAX_LEN = 3


def normalize_query(query: str) -> str:
    """Normalize a raw search query for cache-key derivation.

    Steps, in order: lower-case, strip, remove every character that is not a
    letter/digit/whitespace, collapse whitespace runs to a single space.

    Args:
        query: Raw user query.

    Returns:
        The normalized query.  May be the empty string when the input held
        only punctuation/whitespace.
    """
    normalized = query.lower().strip()
    normalized = _NON_SEARCHABLE.sub("", normalized)
    normalized = _WHITESPACE.sub(" ", normalized)
    # Removing punctuation can expose leading/trailing spaces ("! foo").
    return normalized.strip()


def generate_variations(query: str) -> list[str]:
    """Return cache-key variations for *query* in priority order.

    1. the normalized query (the canonical write-back key)
    2. its words sorted alphabetically ("mary hail project" == "project hail mary")
    3. only words longer than three characters, if any survive
    4. the words joined with no spaces ("projecthailmary")

    Duplicates and empty strings are removed while keeping first-seen order.

    Args:
        query: Raw or normalized query.

    Returns:
        Ordered, de-duplicated variations.  Empty when the query has no
        searchable content.
    """
    normalized = normalize_query(query)
    words = normalized.split()

    candidates = [
        normalized,
        " ".join(sorted(words)),
    ]

    long_words = [word for word in words if len(word) > _SHORT_WORD_MAX_LEN]
    if long_words:
        candidates.append(" ".join(long_words))

    candidates.append("".join(words))

    seen: set[str] = set()
    variations: list[str] = []
    for candidate in candidates:
        if candidate and candidate not in seen:
            seen.add(candidate)
            variations.append(candidate)
    return variations
