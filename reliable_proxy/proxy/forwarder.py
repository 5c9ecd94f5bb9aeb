"""Request forwarding to a per-request target origin.

The origin comes from the ``target-api-url`` header or, failing that, the
configured default. The inbound path and raw query string are appended to the
origin, every header except ``host`` and ``target-api-url`` is copied, and the
request body is streamed through. The upstream status, headers, and raw body
bytes are relayed back unchanged.

Outbound calls use a fresh client per request with certificate verification
disabled; failed calls are not retried.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator, Iterable

import httpx
from fastapi import Request
from fastapi.responses import StreamingResponse
from starlette.datastructures import Headers

from reliable_proxy.middleware.error_handler import (
    InvalidTargetUrlError,
    MissingOriginError,
    RequestBuildError,
    UpstreamDispatchError,
)

logger = logging.getLogger(__name__)

OVERRIDE_HEADER = "target-api-url"

# Never copied to the outbound request (compared lowercased)
EXCLUDED_HEADERS = frozenset({b"host", OVERRIDE_HEADER.encode("ascii")})


def build_target_url(origin: str, path: str, query: bytes | str = b"") -> httpx.URL:
    """Join origin and path with exactly one ``/`` and attach the inbound query.

    Any query or fragment carried by the origin itself is replaced by the
    inbound query string, which is copied without re-encoding.

    Raises ``InvalidTargetUrlError`` if the result does not parse as a URL.
    """
    if isinstance(query, bytes):
        query = query.decode("latin-1")

    joined = f"{origin.rstrip('/')}/{path.lstrip('/')}"
    base = joined.split("#", 1)[0].split("?", 1)[0]
    target = f"{base}?{query}" if query else base

    try:
        return httpx.URL(target)
    except httpx.InvalidURL as exc:
        raise InvalidTargetUrlError(f"Invalid URL: {exc}") from exc


def filter_headers(raw_headers: Iterable[tuple[bytes, bytes]]) -> list[tuple[bytes, bytes]]:
    """Drop excluded headers, keeping order and repeated headers intact."""
    return [
        (name, value)
        for name, value in raw_headers
        if name.lower() not in EXCLUDED_HEADERS
    ]


def _request_path(request: Request) -> str:
    """Inbound path as sent by the client, percent-escapes preserved."""
    raw_path = request.scope.get("raw_path")
    if raw_path:
        return raw_path.split(b"?", 1)[0].decode("latin-1")
    return request.url.path


def _has_body(headers: Headers) -> bool:
    length = headers.get("content-length")
    if length is not None:
        return length.strip() != "0"
    return "transfer-encoding" in headers


async def _relay(
    upstream: httpx.Response, client: httpx.AsyncClient
) -> AsyncIterator[bytes]:
    """Yield upstream body bytes as received, then release the connection."""
    try:
        async for chunk in upstream.aiter_raw():
            yield chunk
    finally:
        await upstream.aclose()
        await client.aclose()


class Forwarder:
    """Forwards inbound requests to their target origin.

    Parameters
    ----------
    default_origin:
        Origin used when a request carries no ``target-api-url`` header.
    timeout_seconds:
        Optional timeout applied to each outbound call. ``None`` leaves
        outbound calls unbounded.
    """

    def __init__(
        self,
        default_origin: str | None = None,
        *,
        timeout_seconds: float | None = None,
    ) -> None:
        self._default_origin = default_origin or None
        self._timeout_seconds = timeout_seconds

    @property
    def default_origin(self) -> str | None:
        return self._default_origin

    def resolve_origin(self, headers: Headers) -> str | None:
        """Header override first, then the configured default."""
        return headers.get(OVERRIDE_HEADER) or self._default_origin

    def build_request(self, request: Request, target_url: httpx.URL) -> httpx.Request:
        """Outbound request carrying the inbound method, headers, and body stream."""
        extensions = {}
        if self._timeout_seconds is not None:
            extensions["timeout"] = httpx.Timeout(self._timeout_seconds).as_dict()

        try:
            return httpx.Request(
                request.method,
                target_url,
                headers=filter_headers(request.headers.raw),
                content=request.stream() if _has_body(request.headers) else None,
                extensions=extensions,
            )
        except (httpx.InvalidURL, TypeError, ValueError) as exc:
            raise RequestBuildError(f"Error creating request: {exc}") from exc

    async def forward(
        self, request: Request, origin: str | None = None
    ) -> StreamingResponse:
        """Send ``request`` to its origin and stream the upstream response back.

        Raises
        ------
        MissingOriginError
            If neither a header nor a default origin is available.
        InvalidTargetUrlError
            If the outbound URL does not parse.
        RequestBuildError
            If the outbound request cannot be constructed.
        UpstreamDispatchError
            If the outbound call fails before a response arrives.
        """
        origin = origin or self.resolve_origin(request.headers)
        if not origin:
            raise MissingOriginError()

        target_url = build_target_url(
            origin, _request_path(request), request.scope.get("query_string", b"")
        )
        outbound = self.build_request(request, target_url)

        # Fresh transport per request: no pooling, no environment proxies.
        client = httpx.AsyncClient(verify=False, trust_env=False, follow_redirects=False)
        started = time.monotonic()
        try:
            upstream = await client.send(outbound, stream=True)
        except httpx.HTTPError as exc:
            await client.aclose()
            logger.warning(
                "Upstream request failed: %s %s",
                request.method,
                target_url,
                extra={
                    "method": request.method,
                    "target_url": str(target_url),
                    "error_reason": str(exc),
                },
            )
            raise UpstreamDispatchError(f"Error sending request: {exc}") from exc

        duration_ms = round((time.monotonic() - started) * 1000, 1)
        logger.info(
            "Proxied %s %s -> %d",
            request.method,
            target_url,
            upstream.status_code,
            extra={
                "method": request.method,
                "target_url": str(target_url),
                "upstream_status": upstream.status_code,
                "duration_ms": duration_ms,
            },
        )

        response = StreamingResponse(
            _relay(upstream, client), status_code=upstream.status_code
        )
        # Copy upstream headers verbatim, repeated names included.
        response.raw_headers = [
            (name.lower(), value) for name, value in upstream.headers.raw
        ]
        return response
