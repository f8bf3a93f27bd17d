"""Client for the Bing Web Search API, the market-scoped provider."""

from __future__ import annotations

from typing import Dict, Mapping, Sequence

import httpx
from pydantic import SecretStr

from search_gateway.config import BING_DEFAULT_ENDPOINT, Settings
from search_gateway.schemas.search import TimeFilter
from search_gateway.services.providers.base import HttpSearchClient, ProviderKind
from search_gateway.types import RawItem

# ``ALL_TIME`` is deliberately absent: no restriction means no ``freshness``
# parameter at all, an empty value is rejected upstream.
FRESHNESS_BY_TIME_FILTER: Dict[TimeFilter, str] = {
    TimeFilter.LAST_DAY: "Day",
    TimeFilter.LAST_WEEK: "Week",
    TimeFilter.LAST_MONTH: "Month",
    TimeFilter.LAST_YEAR: "Year",
}


class BingSearchClient(HttpSearchClient):
    """Synchronous wrapper around ``GET /v7.0/search``.

    Bing exposes locale, safe-search and freshness controls, and its
    ``webPages.value`` entries already use the canonical naming, so the
    normalizer only validates their shape.
    """

    kind = ProviderKind.BING

    def __init__(
        self,
        api_key: SecretStr | str | None,
        *,
        endpoint: str = BING_DEFAULT_ENDPOINT,
        count: int = 10,
        market: str = "en-US",
        safe_search: str = "Moderate",
        enabled: bool = True,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        super().__init__(
            api_key, endpoint=endpoint, enabled=enabled, timeout=timeout, transport=transport
        )
        self._count = count
        self._market = market
        self._safe_search = safe_search

    @classmethod
    def from_settings(
        cls, settings: Settings, *, transport: httpx.BaseTransport | None = None
    ) -> "BingSearchClient":
        """Build a client from the application settings."""
        return cls(
            settings.bing_api_key,
            endpoint=settings.bing_endpoint,
            count=settings.results_per_page,
            market=settings.market,
            safe_search=settings.safe_search,
            enabled=settings.bing_enabled,
            timeout=settings.provider_timeout,
            transport=transport,
        )

    def build_params(self, query: str, time_filter: TimeFilter | None) -> Dict[str, str]:
        """Return the query string parameters for one search call."""
        params = {
            "q": query,
            "count": str(self._count),
            "mkt": self._market,
            "safeSearch": self._safe_search,
            "textFormat": "HTML",
            "textDecorations": "true",
        }
        freshness = FRESHNESS_BY_TIME_FILTER.get(time_filter) if time_filter else None
        if freshness is not None:
            params["freshness"] = freshness
        return params

    def _send(
        self, http_client: httpx.Client, query: str, time_filter: TimeFilter | None
    ) -> httpx.Response:
        return http_client.get(
            self._endpoint,
            params=self.build_params(query, time_filter),
            headers={"Ocp-Apim-Subscription-Key": self._credential()},
        )

    def _extract_items(self, payload: Mapping[str, object]) -> Sequence[RawItem] | None:
        web_pages = payload.get("webPages")
        if not isinstance(web_pages, Mapping):
            return None
        value = web_pages.get("value")
        return value if isinstance(value, list) else None


__all__ = ["BingSearchClient", "FRESHNESS_BY_TIME_FILTER"]
