"""Shared test fixtures for the proxy test suite."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from reliable_proxy.config.settings import ProxySettings
from reliable_proxy.main import create_app
from reliable_proxy.region.cache import FileBlobStore
from reliable_proxy.region.state import RegionState

_SETTINGS_ENV = (
    "HOST",
    "PORT",
    "LOG_LEVEL",
    "TARGET_API_URL",
    "UPSTREAM_TIMEOUT_SECONDS",
    "RESOLVE_REGION",
    "GEO_SERVICES",
    "GEO_PROBE_TIMEOUT_SECONDS",
    "GEO_DEADLINE_SECONDS",
    "REGION_CACHE_DIR",
)


# ---------------------------------------------------------------------------
# Isolate tests from the developer's environment and .env file
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Clear proxy env vars and run from an empty directory."""
    for key in _SETTINGS_ENV:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Settings / app fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def settings() -> ProxySettings:
    """Test settings with region resolution disabled."""
    return ProxySettings(_env_file=None, resolve_region=False)


@pytest.fixture
def app(settings: ProxySettings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def client_factory() -> Callable[..., TestClient]:
    """Build a client for an app with the given default origin."""

    def _factory(target_api_url: str | None = None, **overrides: object) -> TestClient:
        settings = ProxySettings(
            _env_file=None,
            resolve_region=False,
            target_api_url=target_api_url,
            **overrides,
        )
        return TestClient(create_app(settings))

    return _factory


# ---------------------------------------------------------------------------
# Region fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def region_state() -> RegionState:
    return RegionState()


@pytest.fixture
def blob_store(tmp_path: Path) -> FileBlobStore:
    return FileBlobStore(tmp_path)
