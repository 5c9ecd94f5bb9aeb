"""Global error hierarchy and FastAPI exception handlers.

All forwarding errors extend ProxyError. The FastAPI exception handlers catch
these errors (plus unhandled exceptions) and return a JSON body of the form
``{"error": "<message>"}`` with the error's status code.
"""

from __future__ import annotations

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from reliable_proxy.models.responses import ErrorResponse

logger = logging.getLogger(__name__)

MISSING_ORIGIN_MESSAGE = (
    "Missing target-api-url header or TARGET_API_URL environment variable"
)


# ---------------------------------------------------------------------------
# Error hierarchy
# ---------------------------------------------------------------------------


class ProxyError(Exception):
    """Base error for all forwarding errors."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.__class__.message
        super().__init__(self.message)


class MissingOriginError(ProxyError):
    """Neither the override header nor the default origin is set."""

    status_code = 400
    message = MISSING_ORIGIN_MESSAGE


class InvalidTargetUrlError(ProxyError):
    """The outbound URL built from origin and path does not parse."""

    status_code = 400
    message = "Invalid URL"


class RequestBuildError(ProxyError):
    """The outbound request could not be constructed."""

    status_code = 500
    message = "Error creating request"


class UpstreamDispatchError(ProxyError):
    """The outbound call failed before a response was received."""

    status_code = 500
    message = "Error sending request"


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------


def error_response(status_code: int, error: str) -> JSONResponse:
    """Build a ``{"error": ...}`` JSON response."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error).model_dump(),
    )


async def _proxy_error_handler(_request: Request, exc: ProxyError) -> JSONResponse:
    """Handle ProxyError subclasses."""
    return error_response(exc.status_code, exc.message)


async def _unhandled_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions; logs the traceback and returns a generic 500."""
    logger.error(
        "Unhandled exception: %s\n%s",
        exc,
        traceback.format_exc(),
    )
    return error_response(500, "Internal server error")


# ---------------------------------------------------------------------------
# Registration helper
# ---------------------------------------------------------------------------


def register_error_handlers(app: FastAPI) -> None:
    """Wire up all exception handlers on the FastAPI application."""
    app.add_exception_handler(ProxyError, _proxy_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error_handler)  # type: ignore[arg-type]
