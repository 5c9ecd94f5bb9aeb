"""Locally generated response bodies.

Proxied responses are never wrapped; only the status endpoint and forwarding
errors produce JSON of their own.
"""

from __future__ import annotations

from pydantic import BaseModel

STATUS_MESSAGE = "Reliable Proxy server is running"


class StatusResponse(BaseModel):
    """Liveness payload for ``GET /``. ``region`` is omitted when unknown."""

    status: str = STATUS_MESSAGE
    region: str | None = None


class ErrorResponse(BaseModel):
    """Body of every forwarding error."""

    error: str
