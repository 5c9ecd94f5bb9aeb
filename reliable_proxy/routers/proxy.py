"""Catch-all proxy endpoint.

- ``/`` with no target origin: service status, plus the region when known
- any other request: forwarded to the target origin
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from reliable_proxy.models.responses import StatusResponse

if TYPE_CHECKING:
    from reliable_proxy.proxy.forwarder import Forwarder
    from reliable_proxy.region.state import RegionState

PROXY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE"]


def create_proxy_router(
    *,
    forwarder: Forwarder,
    region_state: RegionState,
) -> APIRouter:
    """Factory that creates the proxy router with injected dependencies."""

    proxy_router = APIRouter(tags=["proxy"])

    @proxy_router.api_route(
        "/{path:path}", methods=PROXY_METHODS, include_in_schema=False
    )
    async def proxy(request: Request) -> Response:
        origin = forwarder.resolve_origin(request.headers)

        # Status only when both the origin is unknown and the path is the root;
        # other paths without an origin fall through to the missing-origin error.
        if not origin and request.url.path == "/":
            status = StatusResponse(region=region_state.get() or None)
            return JSONResponse(content=status.model_dump(exclude_none=True))

        return await forwarder.forward(request, origin)

    return proxy_router
