"""Shared pieces of the search provider clients."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Protocol, Sequence

import httpx
from loguru import logger
from pydantic import SecretStr

from search_gateway.schemas.search import TimeFilter
from search_gateway.types import RawItem
from search_gateway.utils.errors import ProviderError


class ProviderKind(str, Enum):
    """Identifiers of the supported upstream providers."""

    BING = "bing"
    SERPER = "serper"


@dataclass(slots=True)
class RawProviderResult:
    """Provider-shaped result list handed from a client to the normalizer."""

    kind: ProviderKind
    items: Sequence[RawItem] | None


class SearchProvider(Protocol):
    """Capability the gateway relies on, implemented by every provider client."""

    kind: ProviderKind

    @property
    def is_configured(self) -> bool:
        """Return whether the client holds a credential and is enabled."""

    def search(self, query: str, time_filter: TimeFilter | None = None) -> RawProviderResult:
        """Execute one outbound search and return the raw result list."""


class HttpSearchClient(ABC):
    """Base class wiring credential handling, transport and error mapping.

    Subclasses implement :meth:`_send` and :meth:`_extract_items`; this class
    owns the one outbound call per :meth:`search` invocation and turns every
    failure into a :class:`ProviderError`.
    """

    kind: ProviderKind

    def __init__(
        self,
        api_key: SecretStr | str | None,
        *,
        endpoint: str,
        enabled: bool = True,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not endpoint:
            raise ValueError("endpoint must be provided for search clients")
        if isinstance(api_key, str):
            api_key = SecretStr(api_key)
        self._api_key = api_key
        self._endpoint = endpoint
        self._enabled = enabled
        self._timeout = timeout
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        """Return whether a non-blank credential is present and the client is enabled."""
        if not self._enabled or self._api_key is None:
            return False
        return bool(self._api_key.get_secret_value().strip())

    def _credential(self) -> str:
        if self._api_key is None:
            raise RuntimeError(f"{self.kind.value} client used without a credential")
        return self._api_key.get_secret_value()

    def search(self, query: str, time_filter: TimeFilter | None = None) -> RawProviderResult:
        """Fetch one page of results for *query* from the provider."""
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as http_client:
                response = self._send(http_client, query, time_filter)
        except httpx.TimeoutException as exc:
            logger.bind(provider=self.kind.value).warning("provider.timeout")
            raise ProviderError(
                504, f"Search provider timed out after {self._timeout:g}s"
            ) from exc
        except httpx.HTTPError as exc:
            logger.bind(provider=self.kind.value, error=str(exc)).warning("provider.unreachable")
            raise ProviderError(502, f"Failed to reach search provider: {exc}") from exc
        if not response.is_success:
            message = error_message_from(response)
            logger.bind(
                provider=self.kind.value, status_code=response.status_code
            ).warning("provider.rejected")
            raise ProviderError(response.status_code, message)
        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderError(502, "Search provider returned an invalid response") from exc
        if not isinstance(payload, Mapping):
            payload = {}
        return RawProviderResult(kind=self.kind, items=self._extract_items(payload))

    @abstractmethod
    def _send(
        self, http_client: httpx.Client, query: str, time_filter: TimeFilter | None
    ) -> httpx.Response:
        """Issue the provider-specific request on *http_client*."""

    @abstractmethod
    def _extract_items(self, payload: Mapping[str, object]) -> Sequence[RawItem] | None:
        """Return the raw result list from a successful response payload."""


def error_message_from(response: httpx.Response) -> str:
    """Best-effort extraction of a provider error message.

    Understands ``{"error": "..."}``, ``{"error": {"message": "..."}}``,
    ``{"errors": [{"message": "..."}]}`` and ``{"message": "..."}``. Anything
    else degrades to a message embedding the numeric status.
    """
    fallback = f"Search API returned error {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        return fallback
    if not isinstance(body, Mapping):
        return fallback
    error = body.get("error")
    if isinstance(error, str) and error:
        return error
    if isinstance(error, Mapping):
        nested = error.get("message")
        if isinstance(nested, str) and nested:
            return nested
    errors = body.get("errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], Mapping):
        first = errors[0].get("message")
        if isinstance(first, str) and first:
            return first
    message = body.get("message")
    if isinstance(message, str) and message:
        return message
    return fallback


__all__ = [
    "HttpSearchClient",
    "ProviderKind",
    "RawProviderResult",
    "SearchProvider",
    "error_message_from",
]
