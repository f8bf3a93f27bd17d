"""FastAPI application factory for search_gateway."""

from __future__ import annotations

from typing import Sequence

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException

from search_gateway import __version__
from search_gateway.config import Settings, get_settings
from search_gateway.routes import health, search
from search_gateway.services.gateway import SearchGateway
from search_gateway.services.providers import (
    BingSearchClient,
    SearchProvider,
    SerperSearchClient,
)
from search_gateway.utils.errors import (
    ApiError,
    api_error_handler,
    http_exception_handler,
    unexpected_exception_handler,
)
from search_gateway.utils.logging import configure_logging, logging_middleware
from search_gateway.utils.ratelimit import RateLimiter

OPENAPI_TAGS: list[dict[str, str]] = [
    {
        "name": "health",
        "description": "Monitoring endpoint exposing uptime and provider availability.",
    },
    {
        "name": "search",
        "description": "Web search normalised across the Bing and Serper providers.",
    },
]


def build_providers(settings: Settings) -> Sequence[SearchProvider]:
    """Return the provider clients in fixed preference order: Bing, then Serper."""
    return (
        BingSearchClient.from_settings(settings),
        SerperSearchClient.from_settings(settings),
    )


def create_app(
    settings: Settings | None = None,
    *,
    providers: Sequence[SearchProvider] | None = None,
) -> FastAPI:
    """Instantiate the FastAPI application with configured routes and services."""
    settings = settings or get_settings()
    configure_logging(settings)
    app = FastAPI(
        title="search-gateway",
        description="Single search endpoint returning one result schema for every provider.",
        version=__version__,
        default_response_class=ORJSONResponse,
        openapi_tags=OPENAPI_TAGS,
    )
    if settings.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.allowed_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.middleware("http")(logging_middleware)

    limiter = (
        RateLimiter(settings.search_rate_limit_per_minute)
        if settings.rate_limit_enabled
        else None
    )
    gateway = SearchGateway(
        settings,
        providers if providers is not None else build_providers(settings),
        limiter=limiter,
    )
    app.state.settings = settings
    app.state.rate_limiter = limiter
    app.state.search_gateway = gateway

    app.include_router(health.router)
    app.include_router(search.router)

    app.add_exception_handler(Exception, unexpected_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(ApiError, api_error_handler)

    return app


app = create_app()
