"""Test fixtures for search_gateway."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Callable, Iterator, List

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

# Credentials from the developer shell must never leak into the suite.
for _name in ("BING_API_KEY", "SERPER_API_KEY", "BING_ENABLED", "SERPER_ENABLED"):
    os.environ.pop(_name, None)
os.environ.setdefault("LOG_LEVEL", "WARNING")

from search_gateway.app import create_app  # noqa: E402
from search_gateway.config import Settings  # noqa: E402
from search_gateway.services.providers import (  # noqa: E402
    BingSearchClient,
    SerperSearchClient,
)


class RecordingTransport(httpx.MockTransport):
    """Mock transport remembering every outbound request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: List[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)


@pytest.fixture()
def make_settings() -> Callable[..., Settings]:
    """Return a factory building isolated settings from keyword overrides."""

    def factory(**overrides: object) -> Settings:
        values: dict[str, object] = {"rate_limit_enabled": False, "log_level": "WARNING"}
        values.update(overrides)
        return Settings(_env_file=None, **values)  # type: ignore[call-arg]

    return factory


@pytest.fixture()
def bing_payload() -> dict[str, object]:
    return {
        "_type": "SearchResponse",
        "webPages": {
            "value": [
                {
                    "name": "Weather forecast",
                    "url": "https://example.com/forecast",
                    "snippet": "Sunny with a chance of rain.",
                    "datePublished": "2024-05-01T08:00:00.0000000Z",
                },
                {
                    "name": "Radar",
                    "url": "https://example.org/radar",
                    "snippet": "Live precipitation radar.",
                },
            ]
        },
    }


@pytest.fixture()
def serper_payload() -> dict[str, object]:
    return {
        "searchParameters": {"q": "weather", "gl": "us"},
        "organic": [
            {
                "title": "Weather today",
                "link": "https://example.com/today",
                "snippet": "Cloudy in the morning.",
                "position": 1,
            },
            {
                "title": "Ten day outlook",
                "link": "https://example.net/outlook",
                "snippet": "Warmer next week.",
                "position": 2,
            },
        ],
    }


def build_client(
    settings: Settings,
    *,
    bing_transport: httpx.BaseTransport | None = None,
    serper_transport: httpx.BaseTransport | None = None,
) -> TestClient:
    """Return a test client whose provider clients use the given transports."""
    providers = (
        BingSearchClient.from_settings(settings, transport=bing_transport),
        SerperSearchClient.from_settings(settings, transport=serper_transport),
    )
    app: FastAPI = create_app(settings, providers=providers)
    return TestClient(app)


@pytest.fixture()
def serper_only_client(
    make_settings: Callable[..., Settings], serper_payload: dict[str, object]
) -> Iterator[tuple[TestClient, RecordingTransport]]:
    transport = RecordingTransport(lambda _: httpx.Response(200, json=serper_payload))
    settings = make_settings(serper_api_key="serper-key")
    with build_client(settings, serper_transport=transport) as client:
        yield client, transport


@pytest.fixture()
def make_transport() -> Callable[..., RecordingTransport]:
    """Return a factory for recording mock transports."""
    return RecordingTransport


@pytest.fixture()
def make_client() -> Callable[..., TestClient]:
    """Return :func:`build_client` for tests wiring their own transports."""
    return build_client
