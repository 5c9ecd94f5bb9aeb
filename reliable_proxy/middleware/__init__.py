"""Middleware package: error hierarchy and request ID."""

from reliable_proxy.middleware.error_handler import (
    MISSING_ORIGIN_MESSAGE,
    InvalidTargetUrlError,
    MissingOriginError,
    ProxyError,
    RequestBuildError,
    UpstreamDispatchError,
    register_error_handlers,
)
from reliable_proxy.middleware.request_id import RequestIdMiddleware

__all__ = [
    "MISSING_ORIGIN_MESSAGE",
    "InvalidTargetUrlError",
    "MissingOriginError",
    "ProxyError",
    "RequestBuildError",
    "RequestIdMiddleware",
    "UpstreamDispatchError",
    "register_error_handlers",
]
