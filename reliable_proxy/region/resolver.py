"""Best-effort region resolution.

The region label is read from the blob store when a previous run cached it.
Otherwise every configured geolocation service is probed concurrently; the
first probe to produce a non-empty label wins, and the result is cached for
later starts. Nothing in here raises: every failure degrades to an empty label.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from reliable_proxy.config.settings import DEFAULT_GEO_SERVICES
from reliable_proxy.models.geo import GeoResult
from reliable_proxy.region.cache import REGION_CACHE_KEY, FileBlobStore
from reliable_proxy.region.state import RegionState

logger = logging.getLogger(__name__)


class RegionResolver:
    """Resolves the region label once and publishes it to ``RegionState``.

    Parameters
    ----------
    state:
        Shared cell the resolved label is written to.
    cache:
        Blob store consulted before probing and updated after a live result.
    services:
        Geolocation endpoints returning ``region``/``country_code``/
        ``country_name``/``city`` JSON.
    probe_timeout_seconds:
        Hard bound on each individual probe.
    deadline_seconds:
        Overall bound on the race; should be slightly above the probe timeout.
    """

    def __init__(
        self,
        *,
        state: RegionState,
        cache: FileBlobStore,
        services: list[str] | None = None,
        probe_timeout_seconds: float = 3.0,
        deadline_seconds: float = 3.1,
    ) -> None:
        self._state = state
        self._cache = cache
        self._services = list(services) if services is not None else list(DEFAULT_GEO_SERVICES)
        self._probe_timeout_seconds = probe_timeout_seconds
        self._deadline_seconds = deadline_seconds

        # Strong references to in-flight probes, including stragglers
        self._probes: set[asyncio.Task[str]] = set()

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    async def run(self) -> str:
        """Resolve the label, publish it, and cache live results."""
        cached = await self._read_cache()
        if cached:
            self._state.set(cached)
            logger.info("Proxy region: %s", cached, extra={"region": cached})
            return cached

        label = await self.race()
        self._state.set(label)

        if not label:
            logger.info("Proxy region could not be determined")
            return label

        logger.info("Proxy region: %s", label, extra={"region": label})
        await self._write_cache(label)
        return label

    # ------------------------------------------------------------------
    # Probing
    # ------------------------------------------------------------------

    async def race(self) -> str:
        """Return the first non-empty probe label, or ``""`` at the deadline.

        Probes still running when a winner is found are left to finish on
        their own; they are bounded by the probe timeout and their results
        are discarded.
        """
        if not self._services:
            return ""

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._deadline_seconds

        pending: set[asyncio.Task[str]] = set()
        for url in self._services:
            task = asyncio.create_task(self.probe(url))
            self._probes.add(task)
            task.add_done_callback(self._probes.discard)
            pending.add(task)

        while pending:
            remaining = deadline - loop.time()
            if remaining <= 0:
                break
            done, pending = await asyncio.wait(
                pending, timeout=remaining, return_when=asyncio.FIRST_COMPLETED
            )
            for task in done:
                if task.cancelled():
                    continue
                label = task.result()
                if label:
                    return label

        logger.debug("No geolocation service answered within %.1fs", self._deadline_seconds)
        return ""

    async def probe(self, url: str) -> str:
        """Query one service. Returns ``""`` on any failure."""
        try:
            return await asyncio.wait_for(
                self._fetch_label(url), timeout=self._probe_timeout_seconds
            )
        except asyncio.TimeoutError:
            logger.debug("Geolocation probe timed out: %s", url)
            return ""

    async def _fetch_label(self, url: str) -> str:
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(url, timeout=self._probe_timeout_seconds)
        except httpx.HTTPError as exc:
            logger.debug("Geolocation probe failed: %s (%s)", url, exc)
            return ""

        if response.status_code != httpx.codes.OK:
            logger.debug("Geolocation probe %s returned status %d", url, response.status_code)
            return ""

        try:
            result = GeoResult.model_validate(response.json())
        except ValueError as exc:  # invalid JSON or unexpected shape
            logger.debug("Geolocation probe %s returned an unusable body: %s", url, exc)
            return ""

        return result.label()

    async def aclose(self) -> None:
        """Cancel and drain probes that are still running."""
        probes = list(self._probes)
        for task in probes:
            task.cancel()
        if probes:
            await asyncio.gather(*probes, return_exceptions=True)

    # ------------------------------------------------------------------
    # Cache (blob I/O runs in a worker thread, off the event loop)
    # ------------------------------------------------------------------

    async def _read_cache(self) -> str | None:
        try:
            return await asyncio.to_thread(self._cache.get, REGION_CACHE_KEY)
        except (OSError, ValueError) as exc:  # unreadable or undecodable blob
            logger.debug("Region cache read failed: %s", exc)
            return None

    async def _write_cache(self, label: str) -> None:
        try:
            await asyncio.to_thread(self._cache.put, REGION_CACHE_KEY, label)
        except (OSError, ValueError) as exc:
            logger.debug("Region cache write failed: %s", exc)
