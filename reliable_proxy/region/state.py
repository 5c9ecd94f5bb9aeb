"""Shared region label cell.

Written at most once by the region resolver and read by every status request.
"""

from __future__ import annotations

import threading


class RegionState:
    """Lock-guarded, set-once holder for the resolved region label."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._label = ""
        self._resolved = False

    def get(self) -> str:
        """Return the current label, or an empty string when unknown."""
        with self._lock:
            return self._label

    def set(self, label: str) -> bool:
        """Store the label once. Returns False if a label was already stored."""
        with self._lock:
            if self._resolved:
                return False
            self._label = label
            self._resolved = True
            return True

    @property
    def is_resolved(self) -> bool:
        with self._lock:
            return self._resolved
