"""Structured logging utilities leveraging loguru.

Each request carries a trace identifier plus a small amount of search
context (selected provider, time filter, current stage).  The helpers below
configure loguru for JSON output and let the gateway enrich that context as
the request moves through validation, admission, provider selection and
normalization.
"""

from __future__ import annotations

import sys
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterator

from fastapi import Request, Response
from loguru import logger

from search_gateway.config import Settings, get_settings


@dataclass
class RequestLogContext:
    """State carried across the lifecycle of a request for logging.

    Attributes
    ----------
    provider:
        Kind of the search provider serving the request (``bing``,
        ``serper``).  Populated once the gateway selected one.
    time_filter:
        Recency constraint requested by the caller (``24h``, ``week``, ...).
    stage:
        Name of the gateway stage currently executing.  ``None`` until the
        :func:`log_stage` context manager is invoked.
    stage_started_at:
        ``time.perf_counter`` value recorded when the active stage began.

    """

    provider: str | None = None
    time_filter: str | None = None
    stage: str | None = None
    stage_started_at: float | None = None


_TRACE_ID: ContextVar[str] = ContextVar("trace_id", default="unknown")
_REQUEST_CONTEXT: ContextVar[RequestLogContext | None] = ContextVar("request_context", default=None)


def configure_logging(settings: Settings | None = None) -> None:
    """Configure loguru to output JSON logs at the configured level."""
    settings = settings or get_settings()
    logger.remove()
    logger.add(sys.stdout, level=settings.log_level.upper(), serialize=True)


def get_trace_id() -> str:
    """Return the current request trace identifier."""
    return _TRACE_ID.get()


def get_request_context() -> RequestLogContext:
    """Return the current structured logging context."""
    context = _REQUEST_CONTEXT.get()
    if context is None:
        context = RequestLogContext()
        _REQUEST_CONTEXT.set(context)
    return context


def set_request_metadata(*, provider: str | None = None, time_filter: str | None = None) -> None:
    """Enrich the structured context with provider and time filter information."""
    context = get_request_context()
    if provider is not None:
        context.provider = provider
    if time_filter is not None:
        context.time_filter = time_filter


def _elapsed_ms(context: RequestLogContext) -> float:
    if context.stage_started_at is None:
        return 0.0
    return (time.perf_counter() - context.stage_started_at) * 1000


@contextmanager
def log_stage(stage: str) -> Iterator[None]:
    """Context manager logging stage completion/failure with latency metrics."""
    context = get_request_context()
    previous_stage = context.stage
    previous_started_at = context.stage_started_at
    context.stage = stage
    context.stage_started_at = time.perf_counter()
    try:
        yield
    except Exception:
        logger.bind(
            trace_id=get_trace_id(),
            stage=stage,
            latency_ms=_elapsed_ms(context),
            provider=context.provider,
            time_filter=context.time_filter,
        ).warning("stage.failed")
        raise
    else:
        logger.bind(
            trace_id=get_trace_id(),
            stage=stage,
            latency_ms=_elapsed_ms(context),
            provider=context.provider,
            time_filter=context.time_filter,
        ).info("stage.completed")
    finally:
        context.stage = previous_stage
        context.stage_started_at = previous_started_at


async def logging_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """FastAPI middleware injecting a trace identifier into logging context."""
    trace_id = request.headers.get("x-trace-id", str(uuid.uuid4()))
    trace_token = _TRACE_ID.set(trace_id)
    context_token = _REQUEST_CONTEXT.set(RequestLogContext())
    start = time.perf_counter()
    response: Response | None = None
    try:
        response = await call_next(request)
    finally:
        duration_ms = (time.perf_counter() - start) * 1000
        status_code = response.status_code if response is not None else 500
        context = get_request_context()
        # Only method, path, status and timing are logged; headers may carry
        # credentials and the query text is user data.
        logger.bind(
            path=request.url.path,
            method=request.method,
            status_code=status_code,
            duration_ms=duration_ms,
            trace_id=trace_id,
            stage=context.stage or "request",
            provider=context.provider,
            time_filter=context.time_filter,
        ).info("request.completed")
        _TRACE_ID.reset(trace_token)
        _REQUEST_CONTEXT.reset(context_token)
    if response is None:
        raise RuntimeError("Downstream middleware returned no response object")
    response.headers["X-Trace-Id"] = trace_id
    return response


__all__ = [
    "RequestLogContext",
    "configure_logging",
    "get_request_context",
    "get_trace_id",
    "log_stage",
    "logging_middleware",
    "set_request_metadata",
]
