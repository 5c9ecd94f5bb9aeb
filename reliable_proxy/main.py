"""FastAPI application entry point with lifespan management.

Startup: configure logging, start region resolution in the background so the
server accepts connections immediately.
Shutdown: cancel region resolution if it is still running and drain any
outstanding geolocation probes.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from reliable_proxy import __version__
from reliable_proxy.config.settings import ProxySettings
from reliable_proxy.logging_config import configure_logging
from reliable_proxy.middleware.error_handler import register_error_handlers
from reliable_proxy.middleware.request_id import RequestIdMiddleware
from reliable_proxy.proxy.forwarder import Forwarder
from reliable_proxy.region.cache import FileBlobStore
from reliable_proxy.region.resolver import RegionResolver
from reliable_proxy.region.state import RegionState
from reliable_proxy.routers.proxy import create_proxy_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown logic."""
    settings: ProxySettings = app.state.settings

    configure_logging(settings.log_level)
    logger.info("Reliable Proxy running on :%d", settings.port)

    resolver: RegionResolver | None = None
    resolve_task: asyncio.Task[str] | None = None
    if settings.resolve_region:
        resolver = RegionResolver(
            state=app.state.region,
            cache=FileBlobStore(settings.region_cache_dir),
            services=settings.geo_services,
            probe_timeout_seconds=settings.geo_probe_timeout_seconds,
            deadline_seconds=settings.geo_deadline_seconds,
        )
        resolve_task = asyncio.create_task(resolver.run())

    yield

    # --- Shutdown ---
    if resolve_task is not None and not resolve_task.done():
        resolve_task.cancel()
        try:
            await resolve_task
        except asyncio.CancelledError:
            pass
    if resolver is not None:
        await resolver.aclose()

    logger.info("Reliable Proxy shut down")


def create_app(settings: ProxySettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Documentation routes are disabled so that every path, ``/docs`` included,
    is forwarded.
    """
    if settings is None:
        settings = ProxySettings()

    app = FastAPI(
        title="Reliable Proxy",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.region = RegionState()

    register_error_handlers(app)
    app.add_middleware(RequestIdMiddleware)

    forwarder = Forwarder(
        settings.target_api_url,
        timeout_seconds=settings.upstream_timeout_seconds,
    )
    app.include_router(
        create_proxy_router(forwarder=forwarder, region_state=app.state.region)
    )

    return app


def run() -> None:
    """Serve the proxy with uvicorn on the configured host and port."""
    settings = ProxySettings()
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
