"""In-memory sliding window rate limiting keyed by arbitrary strings."""

from __future__ import annotations

import time
from collections import deque
from threading import Lock
from typing import Callable, Deque, Dict, Protocol

from search_gateway.utils.errors import RateLimited

Clock = Callable[[], float]


class AdmissionPolicy(Protocol):
    """Capability consumed by the gateway: admit or deny a call for a key."""

    def allow(self, key: str) -> bool:
        """Return ``True`` when the call identified by *key* may proceed."""


class RateLimiter:
    """Sliding window limiter that enforces a per-minute quota per key."""

    def __init__(
        self,
        requests_per_minute: int,
        *,
        window_seconds: float = 60.0,
        clock: Clock | None = None,
    ) -> None:
        """Configure the limiter and storage buckets."""
        if requests_per_minute <= 0:
            raise ValueError("requests_per_minute must be positive")
        self._limit = requests_per_minute
        self._window_seconds = window_seconds
        self._clock: Clock = clock or time.monotonic
        self._hits: Dict[str, Deque[float]] = {}
        self._lock = Lock()

    def _admit(self, key: str) -> int | None:
        """Record a call for *key*; return the remaining budget or ``None`` if denied.

        Timestamps older than the window are evicted first and a bucket left
        empty is dropped, so only keys with live hits are kept in memory. A
        denied call does not consume a slot.
        """
        now = self._clock()
        window_start = now - self._window_seconds
        with self._lock:
            bucket = self._hits.pop(key, None) or deque()
            while bucket and bucket[0] <= window_start:
                bucket.popleft()
            if len(bucket) >= self._limit:
                self._hits[key] = bucket
                return None
            bucket.append(now)
            self._hits[key] = bucket
            self._sweep(window_start)
            return self._limit - len(bucket)

    def _sweep(self, window_start: float) -> None:
        # Called under the lock. Buckets are appended in time order, so a
        # bucket whose newest hit left the window is entirely stale.
        stale = [key for key, hits in self._hits.items() if hits[-1] <= window_start]
        for key in stale:
            del self._hits[key]

    def acquire(self, key: str) -> int:
        """Record a call for *key* and return the remaining budget.

        Raises :class:`RateLimited` if the caller already consumed the entire
        budget for the current window.
        """
        remaining = self._admit(key)
        if remaining is None:
            raise RateLimited("Rate limit exceeded for key")
        return remaining

    def allow(self, key: str) -> bool:
        """Boolean form of :meth:`acquire` used by the search gateway."""
        return self._admit(key) is not None


__all__ = ["AdmissionPolicy", "RateLimiter"]
