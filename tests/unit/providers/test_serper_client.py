"""Unit tests covering the Serper client."""

from __future__ import annotations

import json

import httpx
import pytest

from search_gateway.schemas.search import TimeFilter
from search_gateway.services.providers import ProviderKind, SerperSearchClient
from search_gateway.utils.errors import ProviderError


def _client(handler, **kwargs) -> SerperSearchClient:
    return SerperSearchClient(
        "serper-key",
        endpoint="https://serper.test/search",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def test_search_posts_query_and_locale_only(serper_payload) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=serper_payload)

    raw = _client(handler, country="gb").search("weather", TimeFilter.LAST_DAY)

    request = seen[0]
    assert request.method == "POST"
    assert request.headers["X-API-KEY"] == "serper-key"
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content) == {"q": "weather", "gl": "gb"}
    assert raw.kind is ProviderKind.SERPER
    assert [item["link"] for item in raw.items] == [
        "https://example.com/today",
        "https://example.net/outlook",
    ]


def test_missing_organic_block_yields_no_items() -> None:
    raw = _client(lambda _: httpx.Response(200, json={"searchParameters": {}})).search("zxqv")
    assert raw.items is None


def test_error_string_body_is_forwarded() -> None:
    with pytest.raises(ProviderError) as exc_info:
        _client(lambda _: httpx.Response(403, json={"error": "Unauthorized."})).search("weather")

    assert exc_info.value.status_code == 403
    assert exc_info.value.message == "Unauthorized."


def test_message_body_is_forwarded() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"message": "Not enough credits", "statusCode": 400})

    with pytest.raises(ProviderError) as exc_info:
        _client(handler).search("weather")

    assert exc_info.value.message == "Not enough credits"


def test_unparsable_error_body_falls_back_to_status_message() -> None:
    with pytest.raises(ProviderError) as exc_info:
        _client(lambda _: httpx.Response(500, content=b"\xff\xfe")).search("weather")

    assert exc_info.value.status_code == 500
    assert exc_info.value.message == "Search API returned error 500"


def test_timeout_is_mapped_to_provider_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("slow", request=request)

    with pytest.raises(ProviderError) as exc_info:
        _client(handler).search("weather")

    assert exc_info.value.status_code == 504


def test_from_settings_derives_country_from_market(make_settings) -> None:
    settings = make_settings(serper_api_key="serper-key", market="de-DE")
    client = SerperSearchClient.from_settings(settings)
    assert client.build_body("wetter") == {"q": "wetter", "gl": "de"}
    assert client.is_configured
