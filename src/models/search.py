"""Search result models for the searchCache service.

Defines the Pydantic v2 model for an upstream search response.  The same
model is what the cache stores: a record is written wholesale under the
canonical key and never mutated in place.

Field aliases mirror the OpenLibrary ``search.json`` payload
(``numFound``, ``numFoundExact``) so the upstream JSON validates directly
and cached entries round-trip through ``model_dump(by_alias=True)``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SearchRecord(BaseModel):
    """One upstream search response: total hit count plus ordered documents."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    # Total number of matches the upstream index reports (not len(docs)).
    num_found: int = Field(default=0, ge=0, alias="numFound")
    start: int = Field(default=0, ge=0)
    num_found_exact: bool = Field(default=False, alias="numFoundExact")
    # Opaque result documents, in upstream ranking order.
    docs: list[dict[str, Any]] = Field(default_factory=list)

    def to_cache_payload(self) -> dict[str, Any]:
        """Return the JSON-compatible dict stored in the cache."""
        return self.model_dump(by_alias=True)
