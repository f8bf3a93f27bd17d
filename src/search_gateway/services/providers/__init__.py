"""Search provider clients and the protocol the gateway depends on."""

from .base import HttpSearchClient, ProviderKind, RawProviderResult, SearchProvider
from .bing import FRESHNESS_BY_TIME_FILTER, BingSearchClient
from .serper import SerperSearchClient

__all__ = [
    "BingSearchClient",
    "FRESHNESS_BY_TIME_FILTER",
    "HttpSearchClient",
    "ProviderKind",
    "RawProviderResult",
    "SearchProvider",
    "SerperSearchClient",
]
