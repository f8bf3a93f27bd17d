"""Map provider-shaped result lists onto the canonical response schema."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Mapping

from search_gateway.schemas.search import SearchResponse, SearchResult, WebPages
from search_gateway.services.providers.base import ProviderKind, RawProviderResult


def _text(item: Mapping[str, object], key: str) -> str:
    value = item.get(key)
    return "" if value is None else str(value)


def _iso_now(now: datetime | None) -> str:
    moment = now or datetime.now(tz=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _from_bing(item: Mapping[str, object]) -> SearchResult:
    published = item.get("datePublished")
    return SearchResult(
        title=_text(item, "name"),
        url=_text(item, "url"),
        snippet=_text(item, "snippet"),
        published_at=str(published) if published else None,
    )


def _from_serper(item: Mapping[str, object], processed_at: str) -> SearchResult:
    # Older Serper payloads use ``description``, current ones ``snippet``.
    snippet = item.get("description") or item.get("snippet")
    return SearchResult(
        title=_text(item, "title"),
        url=_text(item, "link"),
        snippet="" if snippet is None else str(snippet),
        # Serper carries no publish date; the processing time stands in for it.
        published_at=processed_at,
    )


def normalize(
    raw: RawProviderResult | None, kind: ProviderKind, *, now: datetime | None = None
) -> SearchResponse:
    """Return the canonical response for a successful provider payload.

    The mapping is total: a missing item list yields an empty result list,
    missing fields become empty strings and entries that are not objects
    become empty results rather than errors. Upstream ordering is kept as
    is; nothing is sorted, merged or dropped.
    """
    items = raw.items if raw is not None else None
    if not items:
        return SearchResponse(web_pages=WebPages(value=[]))
    processed_at = _iso_now(now)
    results: List[SearchResult] = []
    for item in items:
        entry: Mapping[str, object] = item if isinstance(item, Mapping) else {}
        if kind is ProviderKind.BING:
            results.append(_from_bing(entry))
        else:
            results.append(_from_serper(entry, processed_at))
    return SearchResponse(web_pages=WebPages(value=results))


__all__ = ["normalize"]
