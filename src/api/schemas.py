"""Pydantic response schemas for the searchCache API.

# ─── HOW SCHEMAS WORK ─────────────────────────────────────────────────
#
# These models define the *shape* of every HTTP response body.  FastAPI
# uses them for serialization (response_model=...) and for the generated
# OpenAPI docs at /docs.
#
# Wire names are camelCase (numFound, fuzzyMatch, ...) to stay compatible
# with existing clients; Python attributes are snake_case and mapped via
# Field(alias=...).  Routes return models with by_alias serialization.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SearchMetrics(BaseModel):
    """Per-request timing breakdown, in milliseconds."""

    cache_lookup_ms: float
    total_ms: float
    api_call_ms: float | None = None


class SearchResponse(BaseModel):
    """Search results plus how they were obtained (cache or upstream)."""

    model_config = ConfigDict(populate_by_name=True)

    query: str
    num_found: int = Field(alias="numFound")
    results: list[dict[str, Any]] = Field(default_factory=list)
    cached: bool
    # Variation (exact hit) or cached query (fuzzy hit) that served the request.
    cache_key: str | None = Field(default=None, alias="cacheKey")
    fuzzy_match: bool = Field(default=False, alias="fuzzyMatch")
    matched_query: str | None = Field(default=None, alias="matchedQuery")
    similarity_score: float | None = Field(
        default=None, ge=0.0, le=1.0, alias="similarityScore"
    )
    match_method: str | None = Field(default=None, alias="matchMethod")
    response_time: str = Field(alias="responseTime", description='e.g. "12.34ms"')
    metrics: SearchMetrics


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    service: str
    version: str
    time: str
    providers: dict[str, Any]


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None
