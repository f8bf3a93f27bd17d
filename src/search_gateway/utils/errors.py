"""Error handling utilities providing uniform JSON responses.

Every failure leaves the service as a single ``{"error": message}`` document
paired with one status code, so callers never have to untangle a partial
result from an error.
"""

from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from search_gateway.types import JSONDict

GENERIC_ERROR_MESSAGE = "An unexpected error occurred while fetching search results"


class ApiError(Exception):
    """Base application exception carrying the HTTP status to respond with."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Capture the human message and an optional per-instance status override."""
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_payload(self) -> JSONDict:
        """Return the error document used across HTTP handlers."""
        return {"error": self.message}


class InvalidRequest(ApiError):
    """Raised when the caller sent an unusable request body."""

    status_code = 400
    code = "invalid_request"


class RateLimited(ApiError):
    """Raised when the admission key exhausted its budget for the window."""

    status_code = 429
    code = "rate_limited"


class Misconfigured(ApiError):
    """Raised when no search provider is usable with the current settings."""

    status_code = 500
    code = "misconfigured"


class ProviderError(ApiError):
    """Raised when an upstream search provider fails.

    The upstream status is forwarded unchanged, so unlike the other
    subclasses the status is always supplied per instance.
    """

    status_code = 502
    code = "provider_error"

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message, status_code=status_code)


class InternalError(ApiError):
    """Raised for any fault the gateway did not anticipate."""

    status_code = 500
    code = "internal_error"


def api_error_handler(_: Request, exc: Exception) -> JSONResponse:
    """Return a standardized JSON response for custom exceptions."""
    assert isinstance(exc, ApiError)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


def http_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    """Translate routing and framework HTTP errors into the project JSON schema."""
    assert isinstance(exc, HTTPException)
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


def unexpected_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected exceptions."""
    return JSONResponse(status_code=500, content={"error": str(exc) or GENERIC_ERROR_MESSAGE})


__all__ = [
    "GENERIC_ERROR_MESSAGE",
    "ApiError",
    "InvalidRequest",
    "RateLimited",
    "Misconfigured",
    "ProviderError",
    "InternalError",
    "api_error_handler",
    "http_exception_handler",
    "unexpected_exception_handler",
]
