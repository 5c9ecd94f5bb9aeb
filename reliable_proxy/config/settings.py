"""Pydantic Settings for the proxy service.

Variables are read without a prefix, e.g. PORT=8080, TARGET_API_URL=https://api.example.com.
An optional ``.env`` file in the working directory supplies values that are not
already present in the environment.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_GEO_SERVICES = ["https://ipapi.co/json/", "https://ipinfo.io/json"]


class ProxySettings(BaseSettings):
    """Proxy service configuration validated from environment variables."""

    # Service
    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)
    log_level: str = "INFO"

    # Forwarding
    target_api_url: str | None = None  # Default origin when no header is sent
    upstream_timeout_seconds: float | None = Field(default=None, gt=0)  # None = unbounded

    # Region resolution
    resolve_region: bool = True
    geo_services: list[str] = Field(default_factory=lambda: list(DEFAULT_GEO_SERVICES))
    geo_probe_timeout_seconds: float = Field(default=3.0, gt=0)
    geo_deadline_seconds: float = Field(default=3.1, gt=0)
    region_cache_dir: str | None = None  # None = /app/data if present, else cwd

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )
