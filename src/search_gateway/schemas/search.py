"""Pydantic models describing the search endpoint contract."""

from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TimeFilter(str, Enum):
    """Recency constraint accepted on the wire as ``timeFilter``."""

    LAST_DAY = "24h"
    LAST_WEEK = "week"
    LAST_MONTH = "month"
    LAST_YEAR = "year"
    ALL_TIME = "all"


class SearchQuery(BaseModel):
    """Validated inbound search request."""

    model_config = ConfigDict(extra="ignore")

    text: str = Field(..., alias="query", description="Free-text query forwarded to the provider.")
    time_filter: TimeFilter = Field(
        TimeFilter.ALL_TIME,
        alias="timeFilter",
        description="Optional recency constraint; defaults to no restriction.",
    )

    @field_validator("text")
    @classmethod
    def reject_blank(cls, value: str) -> str:
        """Ensure the query carries at least one non-whitespace character."""
        if not value.strip():
            raise ValueError("query must not be blank")
        return value

    @field_validator("time_filter", mode="before")
    @classmethod
    def default_when_null(cls, value: object) -> object:
        """Treat an explicit ``null`` like an omitted filter."""
        return TimeFilter.ALL_TIME if value is None else value


class SearchResult(BaseModel):
    """Canonical search hit, identical whichever provider served it.

    Field names follow the Python side; the wire names (``name``,
    ``datePublished``) are kept stable for callers through aliases.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., alias="name", description="Result title.")
    url: str = Field(..., description="Link to the resource.")
    snippet: str = Field(..., description="Short text excerpt describing the result.")
    published_at: str | None = Field(
        default=None,
        alias="datePublished",
        description=(
            "ISO-8601 publish timestamp. For Serper results this is the time the "
            "gateway processed the request, not the article's publish date."
        ),
    )


class WebPages(BaseModel):
    """Container holding the ordered result list."""

    value: List[SearchResult] = Field(default_factory=list)


class SearchResponse(BaseModel):
    """Envelope returned by ``POST /api/search``."""

    model_config = ConfigDict(populate_by_name=True)

    web_pages: WebPages = Field(default_factory=WebPages, alias="webPages")


class ErrorResponse(BaseModel):
    """Error document emitted for every failed request."""

    error: str = Field(..., description="Human-friendly error description.")


__all__ = [
    "ErrorResponse",
    "SearchQuery",
    "SearchResponse",
    "SearchResult",
    "TimeFilter",
    "WebPages",
]
