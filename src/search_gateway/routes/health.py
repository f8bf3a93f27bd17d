"""Health endpoint reporting service status."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Dict

from fastapi import APIRouter, Request

from search_gateway import __version__

_router_start = time.time()

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    summary="Report service health",
    description="Expose uptime and which search providers are usable.",
    response_description="Current service status.",
)
def health(request: Request) -> Dict[str, object]:
    """Return uptime, version and provider availability."""
    gateway = request.app.state.search_gateway
    settings = request.app.state.settings
    return {
        "status": "ok",
        "version": __version__,
        "uptime": time.time() - _router_start,
        "providers": {
            provider.kind.value: provider.is_configured for provider in gateway.providers
        },
        "rate_limit_enabled": settings.rate_limit_enabled,
        "checked_at": datetime.now(tz=timezone.utc).isoformat(),
    }
