"""Public models for the proxy service."""

from reliable_proxy.models.geo import GeoResult
from reliable_proxy.models.responses import STATUS_MESSAGE, ErrorResponse, StatusResponse

__all__ = [
    "ErrorResponse",
    "GeoResult",
    "STATUS_MESSAGE",
    "StatusResponse",
]
