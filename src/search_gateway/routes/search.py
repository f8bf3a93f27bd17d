"""HTTP endpoint exposing the provider-agnostic web search."""

from __future__ import annotations

from typing import Annotated, cast

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from search_gateway.schemas.search import ErrorResponse, SearchResponse
from search_gateway.services.gateway import SearchGateway
from search_gateway.utils.errors import InternalError

router = APIRouter(prefix="/api/search", tags=["search"])


def get_gateway(request: Request) -> SearchGateway:
    """Return the search gateway from the FastAPI application state."""
    gateway = getattr(request.app.state, "search_gateway", None)
    if gateway is None:
        raise InternalError("Search gateway is not initialised")
    return cast(SearchGateway, gateway)


GatewayDep = Annotated[SearchGateway, Depends(get_gateway)]


@router.post(
    "",
    response_model=SearchResponse,
    response_model_exclude_none=True,
    summary="Search the web through the configured provider",
    description=(
        "Forward the query to Bing when configured, otherwise to Serper, and return "
        "the results in one stable schema."
    ),
    response_description="Results in provider relevance order.",
    responses={
        400: {"model": ErrorResponse, "description": "Missing or invalid query."},
        429: {"model": ErrorResponse, "description": "Rate limit reached for this query."},
        500: {"model": ErrorResponse, "description": "Misconfiguration or internal fault."},
    },
)
async def search(request: Request, gateway: GatewayDep) -> SearchResponse:
    """Read the raw body and run the synchronous gateway off the event loop."""
    # The body is parsed by the gateway so a malformed document goes through
    # the same error boundary as every other fault.
    body = await request.body()
    return await run_in_threadpool(gateway.handle, body)
