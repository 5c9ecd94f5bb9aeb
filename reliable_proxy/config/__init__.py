"""Configuration module: environment settings."""

from reliable_proxy.config.settings import DEFAULT_GEO_SERVICES, ProxySettings

__all__ = [
    "DEFAULT_GEO_SERVICES",
    "ProxySettings",
]
