"""Client for the Serper Google Search API, the generic provider."""

from __future__ import annotations

from typing import Dict, Mapping, Sequence

import httpx
from pydantic import SecretStr

from search_gateway.config import SERPER_DEFAULT_ENDPOINT, Settings
from search_gateway.schemas.search import TimeFilter
from search_gateway.services.providers.base import HttpSearchClient, ProviderKind
from search_gateway.types import RawItem


class SerperSearchClient(HttpSearchClient):
    """Synchronous wrapper around Serper's ``POST /search``.

    Serper takes the query and a country code only; the time filter is
    accepted for interface compatibility and ignored.
    """

    kind = ProviderKind.SERPER

    def __init__(
        self,
        api_key: SecretStr | str | None,
        *,
        endpoint: str = SERPER_DEFAULT_ENDPOINT,
        country: str = "us",
        enabled: bool = True,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        super().__init__(
            api_key, endpoint=endpoint, enabled=enabled, timeout=timeout, transport=transport
        )
        self._country = country

    @classmethod
    def from_settings(
        cls, settings: Settings, *, transport: httpx.BaseTransport | None = None
    ) -> "SerperSearchClient":
        """Build a client from the application settings."""
        return cls(
            settings.serper_api_key,
            endpoint=settings.serper_endpoint,
            country=settings.country_code,
            enabled=settings.serper_enabled,
            timeout=settings.provider_timeout,
            transport=transport,
        )

    def build_body(self, query: str) -> Dict[str, str]:
        """Return the JSON body for one search call."""
        return {"q": query, "gl": self._country}

    def _send(
        self, http_client: httpx.Client, query: str, time_filter: TimeFilter | None
    ) -> httpx.Response:
        return http_client.post(
            self._endpoint,
            json=self.build_body(query),
            headers={"X-API-KEY": self._credential(), "Content-Type": "application/json"},
        )

    def _extract_items(self, payload: Mapping[str, object]) -> Sequence[RawItem] | None:
        organic = payload.get("organic")
        return organic if isinstance(organic, list) else None


__all__ = ["SerperSearchClient"]
