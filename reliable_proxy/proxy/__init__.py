"""Forwarding package: target URL construction, header filtering, dispatch."""

from reliable_proxy.proxy.forwarder import (
    EXCLUDED_HEADERS,
    OVERRIDE_HEADER,
    Forwarder,
    build_target_url,
    filter_headers,
)

__all__ = [
    "EXCLUDED_HEADERS",
    "Forwarder",
    "OVERRIDE_HEADER",
    "build_target_url",
    "filter_headers",
]
