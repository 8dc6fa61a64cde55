"""Fixed-window request limiter keyed by client address.

Counters live in process memory, so limits are per instance. Deployments
running several replicas need a shared counter store behind the same
interface.
"""

import math
import time
from collections.abc import Callable
from dataclasses import dataclass

MAX_TRACKED_KEYS_DEFAULT = 10_000


@dataclass
class RateLimitEntry:
    """Request count for one client within the current window."""

    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a single ``RateLimiter.check`` call."""

    allowed: bool
    remaining: int
    retry_after: float

    def headers(self) -> dict[str, str]:
        if self.allowed:
            return {}
        return {"Retry-After": str(max(1, math.ceil(self.retry_after)))}


class RateLimiter:
    """Allow at most ``max_requests`` per ``window_seconds`` for each key.

    The window opens on the first request from a key and the counter resets
    once it has elapsed.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = MAX_TRACKED_KEYS_DEFAULT,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, RateLimitEntry] = {}

    def check(self, key: str) -> RateLimitDecision:
        """Count one request for ``key`` and report whether it may proceed."""
        now = self._clock()
        entry = self._entries.get(key)
        if entry is None and len(self._entries) >= self.max_entries:
            self.cleanup()
        if entry is None or now >= entry.reset_at:
            self._entries[key] = RateLimitEntry(
                count=1, reset_at=now + self.window_seconds
            )
            return RateLimitDecision(True, self.max_requests - 1, 0.0)

        if entry.count >= self.max_requests:
            return RateLimitDecision(False, 0, entry.reset_at - now)

        entry.count += 1
        return RateLimitDecision(True, self.max_requests - entry.count, 0.0)

    def allow(self, key: str) -> bool:
        return self.check(key).allowed

    def cleanup(self) -> int:
        """Drop entries whose window has closed. Returns count removed."""
        now = self._clock()
        stale = [k for k, e in self._entries.items() if now >= e.reset_at]
        for k in stale:
            del self._entries[k]
        return len(stale)
