"""Query gateway: validation, admission, provider selection and normalization."""

from __future__ import annotations

from typing import Mapping, Sequence

import orjson
from loguru import logger
from pydantic import ValidationError

from search_gateway.config import Settings
from search_gateway.schemas.search import SearchQuery, SearchResponse
from search_gateway.services.normalizer import normalize
from search_gateway.services.providers.base import SearchProvider
from search_gateway.utils.errors import (
    GENERIC_ERROR_MESSAGE,
    ApiError,
    InternalError,
    InvalidRequest,
    Misconfigured,
    RateLimited,
)
from search_gateway.utils.logging import get_trace_id, log_stage, set_request_metadata
from search_gateway.utils.ratelimit import AdmissionPolicy

QUERY_REQUIRED_MESSAGE = "Query parameter is required"
INVALID_TIME_FILTER_MESSAGE = "Invalid timeFilter value"
RATE_LIMITED_MESSAGE = "Too many requests. Please wait a moment before trying again."
NO_PROVIDER_MESSAGE = (
    "No valid search API keys configured. Please check your environment variables."
)

RequestBody = bytes | Mapping[str, object]


def select_provider(providers: Sequence[SearchProvider]) -> SearchProvider | None:
    """Return the first usable provider in preference order, if any."""
    for provider in providers:
        if provider.is_configured:
            return provider
    return None


def parse_query(body: RequestBody) -> SearchQuery:
    """Decode and validate the inbound body.

    Undecodable JSON is left to propagate: it is a fault of the transport
    layer rather than a missing query and surfaces as an internal error.
    """
    payload = orjson.loads(body) if isinstance(body, (bytes, bytearray)) else body
    if not isinstance(payload, Mapping):
        raise InvalidRequest(QUERY_REQUIRED_MESSAGE)
    try:
        return SearchQuery.model_validate(payload)
    except ValidationError as exc:
        fields = {str(error["loc"][0]) for error in exc.errors() if error["loc"]}
        if fields == {"timeFilter"}:
            raise InvalidRequest(INVALID_TIME_FILTER_MESSAGE) from exc
        raise InvalidRequest(QUERY_REQUIRED_MESSAGE) from exc


class SearchGateway:
    """Single entry point turning a request body into canonical results.

    Providers are given in preference order; the first usable one serves the
    request. Selection is recomputed on every call so credential changes on
    the clients take effect without rebuilding the gateway.
    """

    def __init__(
        self,
        settings: Settings,
        providers: Sequence[SearchProvider],
        *,
        limiter: AdmissionPolicy | None = None,
    ) -> None:
        if settings.rate_limit_enabled and limiter is None:
            raise ValueError("a limiter is required when rate limiting is enabled")
        self._settings = settings
        self._providers = tuple(providers)
        self._limiter = limiter

    @property
    def providers(self) -> tuple[SearchProvider, ...]:
        """Return the providers in preference order."""
        return self._providers

    def handle(self, body: RequestBody) -> SearchResponse:
        """Serve one search request or raise an :class:`ApiError`."""
        try:
            return self._handle(body)
        except ApiError:
            raise
        except Exception as exc:
            logger.bind(trace_id=get_trace_id()).exception("search.unexpected_error")
            raise InternalError(str(exc) or GENERIC_ERROR_MESSAGE) from exc

    def _handle(self, body: RequestBody) -> SearchResponse:
        with log_stage("validate"):
            query = parse_query(body)
        set_request_metadata(time_filter=query.time_filter.value)

        if self._settings.rate_limit_enabled and self._limiter is not None:
            with log_stage("rate_limit"):
                if not self._limiter.allow(query.text):
                    raise RateLimited(RATE_LIMITED_MESSAGE)

        with log_stage("select_provider"):
            provider = select_provider(self._providers)
            if provider is None:
                raise Misconfigured(NO_PROVIDER_MESSAGE)
        set_request_metadata(provider=provider.kind.value)

        with log_stage("provider.search"):
            raw = provider.search(query.text.strip(), query.time_filter)

        with log_stage("normalize"):
            response = normalize(raw, provider.kind)
        logger.bind(
            trace_id=get_trace_id(),
            provider=provider.kind.value,
            results=len(response.web_pages.value),
        ).info("search.completed")
        return response


__all__ = [
    "INVALID_TIME_FILTER_MESSAGE",
    "NO_PROVIDER_MESSAGE",
    "QUERY_REQUIRED_MESSAGE",
    "RATE_LIMITED_MESSAGE",
    "SearchGateway",
    "parse_query",
    "select_provider",
]
