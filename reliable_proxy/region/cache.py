"""File-backed blob store used to persist the resolved region between starts.

Each key maps to one file under the store directory holding the raw value
with no framing.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

DATA_DIR = Path("/app/data")
REGION_CACHE_KEY = "region_cache.txt"


def default_cache_dir() -> Path:
    """Prefer the container data directory, fall back to the working directory."""
    if DATA_DIR.is_dir():
        return DATA_DIR
    return Path(".")


class FileBlobStore:
    """Opaque key/value store backed by one UTF-8 file per key.

    Parameters
    ----------
    directory:
        Directory holding the blobs. Defaults to ``default_cache_dir()``.
    """

    def __init__(self, directory: str | Path | None = None) -> None:
        self._directory = Path(directory) if directory is not None else default_cache_dir()

    def path_for(self, key: str) -> Path:
        return self._directory / key

    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the blob is missing or empty.

        Raises
        ------
        OSError
            If the blob exists but cannot be read.
        """
        try:
            data = self.path_for(key).read_bytes()
        except FileNotFoundError:
            return None
        # Undecodable bytes become U+FFFD; the rest of the blob is returned exactly
        return data.decode("utf-8", errors="replace") or None

    def put(self, key: str, value: str) -> None:
        """Write ``value`` as the whole content of the blob.

        Raises
        ------
        OSError
            If the blob cannot be written.
        """
        path = self.path_for(key)
        path.write_bytes(value.encode("utf-8"))
        logger.debug("Stored blob %s (%d bytes)", path, len(value))
