"""Region resolution package: shared label cell, blob cache, and resolver."""

from reliable_proxy.region.cache import REGION_CACHE_KEY, FileBlobStore, default_cache_dir
from reliable_proxy.region.resolver import RegionResolver
from reliable_proxy.region.state import RegionState

__all__ = [
    "FileBlobStore",
    "REGION_CACHE_KEY",
    "RegionResolver",
    "RegionState",
    "default_cache_dir",
]
