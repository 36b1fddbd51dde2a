"""Bounded, thread-safe memo of nutation results.

Results are keyed by the MJD rounded to a hundredth of a day. When the
cache is full, entries are removed in no particular order until it is
down to half its capacity. A hit returns exactly the value that was
stored for the rounded key; nothing else about eviction is guaranteed.
"""

from __future__ import annotations

import logging
import threading

from jax import Array

logger = logging.getLogger(__name__)

_DEFAULT_MAXSIZE = 100

_KEY_RESOLUTION_DAYS = 0.01


def cache_key(mjd: float) -> int:
    """Return the cache bucket of an MJD (hundredths of a day)."""
    return int(round(float(mjd) / _KEY_RESOLUTION_DAYS))


class NutationCache:
    """Memo of (delta psi, delta epsilon) results keyed by time bucket.

    Thread-safe via internal lock. Each :class:`NutationModel` owns one,
    and tests may construct fresh instances to stay isolated.

    Args:
        maxsize: Maximum number of entries before eviction. Default: 100.

    Raises:
        ValueError: If *maxsize* is less than 1.
    """

    def __init__(self, maxsize: int = _DEFAULT_MAXSIZE) -> None:
        if maxsize < 1:
            raise ValueError(f"maxsize must be at least 1, got {maxsize}")
        self._maxsize = maxsize
        self._entries: dict[int, Array] = {}
        self._lock = threading.Lock()

    @property
    def maxsize(self) -> int:
        """Capacity of the cache."""
        return self._maxsize

    def get(self, mjd: float) -> Array | None:
        """Return the stored result for the bucket of *mjd*, or None."""
        with self._lock:
            return self._entries.get(cache_key(mjd))

    def put(self, mjd: float, value: Array) -> None:
        """Store a result for the bucket of *mjd*, evicting if full.

        Args:
            mjd: Modified Julian Date the value was computed at.
            value: The (delta psi, delta epsilon) pair [rad].
        """
        key = cache_key(mjd)
        with self._lock:
            if key not in self._entries and len(self._entries) >= self._maxsize:
                self._evict()
            self._entries[key] = value

    def clear(self) -> None:
        """Remove every entry."""
        with self._lock:
            self._entries.clear()

    def _evict(self) -> None:
        target = self._maxsize // 2
        n_before = len(self._entries)
        while len(self._entries) > target:
            self._entries.pop(next(iter(self._entries)))
        logger.debug("Nutation cache evicted %d entries", n_before - len(self._entries))

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, mjd: float) -> bool:
        with self._lock:
            return cache_key(mjd) in self._entries
