"""HTTP routers."""

from reliable_proxy.routers.proxy import PROXY_METHODS, create_proxy_router

__all__ = ["PROXY_METHODS", "create_proxy_router"]
