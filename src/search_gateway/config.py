"""Application configuration powered by Pydantic settings."""

from __future__ import annotations

from functools import lru_cache
from typing import List, Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BING_DEFAULT_ENDPOINT = "https://api.bing.microsoft.com/v7.0/search"
SERPER_DEFAULT_ENDPOINT = "https://google.serper.dev/search"


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables.

    The instance is built once at process start and handed to the gateway and
    provider clients explicitly; nothing below the application factory reads
    the environment on its own.
    """

    rate_limit_enabled: bool = Field(True, alias="RATE_LIMIT_ENABLED")
    search_rate_limit_per_minute: int = Field(
        2,
        alias="SEARCH_RATE_LIMIT_PER_MINUTE",
        ge=1,
        description="Admissions granted per query key within a one minute window.",
    )
    results_per_page: int = Field(10, alias="SEARCH_RESULTS_PER_PAGE", ge=1, le=50)
    market: str = Field(
        "en-US",
        alias="SEARCH_MARKET",
        min_length=2,
        description="Locale forwarded to Bing as ``mkt``; its region feeds Serper's ``gl``.",
    )
    safe_search: Literal["Off", "Moderate", "Strict"] = Field(
        "Moderate", alias="SEARCH_SAFE_SEARCH"
    )
    bing_api_key: SecretStr | None = Field(None, alias="BING_API_KEY")
    bing_enabled: bool = Field(True, alias="BING_ENABLED")
    bing_endpoint: str = Field(BING_DEFAULT_ENDPOINT, alias="BING_ENDPOINT")
    serper_api_key: SecretStr | None = Field(None, alias="SERPER_API_KEY")
    serper_enabled: bool = Field(True, alias="SERPER_ENABLED")
    serper_endpoint: str = Field(SERPER_DEFAULT_ENDPOINT, alias="SERPER_ENDPOINT")
    provider_timeout: float = Field(
        10.0,
        alias="PROVIDER_TIMEOUT",
        ge=1.0,
        le=60.0,
        description="Timeout in seconds for outbound search provider calls.",
    )
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    allowed_origins_raw: str = Field(
        "",
        alias="ALLOWED_ORIGINS",
        description="Comma-separated list of origins allowed to access the API.",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_by_name=True,
    )

    @field_validator("bing_api_key", "serper_api_key", mode="before")
    @classmethod
    def blank_key_is_missing(cls, value: object) -> object:
        """Treat empty or whitespace-only credentials as not configured.

        ``docker run -e NAME=$NAME`` forwards an empty string when the host
        variable is unset, which must not count as a usable credential.
        """
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def allowed_origins(self) -> List[str]:
        """Return the sanitized CORS origins as a list."""
        return [origin.strip() for origin in self.allowed_origins_raw.split(",") if origin.strip()]

    @property
    def country_code(self) -> str:
        """Return the region part of :attr:`market` in Serper's ``gl`` format."""
        return self.market.rsplit("-", 1)[-1].lower()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()  # type: ignore[call-arg]


__all__ = ["BING_DEFAULT_ENDPOINT", "SERPER_DEFAULT_ENDPOINT", "Settings", "get_settings"]
