"""Single-slot TTL cache for the last radar response.

Holds exactly one response keyed by the serialised filter. A different
filter key, or an entry older than the TTL, is a miss. Writes always
overwrite; there is no locking, so when two aggregations race the one
that finishes last wins the slot regardless of which started first.
A multi-process deployment would need a shared store with
compare-and-swap on (key, stored_at).
"""

import time
from collections.abc import Callable
from dataclasses import dataclass

from radar.logging import get_logger
from radar.models import RadarResponse

logger = get_logger(__name__)


@dataclass
class CacheEntry:
    key: str
    response: RadarResponse
    stored_at: float


class ResponseCache:
    """In-memory radar response cache with a single slot.

    Args:
        ttl_seconds: Freshness window (default 300 = 5 minutes).
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        ttl_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entry: CacheEntry | None = None

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @property
    def key(self) -> str | None:
        """Filter key currently held, or None when empty."""
        return self._entry.key if self._entry is not None else None

    def age(self) -> float | None:
        """Seconds since the slot was written, or None when empty."""
        if self._entry is None:
            return None
        return self._clock() - self._entry.stored_at

    def get(self, key: str) -> RadarResponse | None:
        """Return the cached response for ``key`` if fresh, else None."""
        entry = self._entry
        if entry is None or entry.key != key:
            return None
        if self._clock() - entry.stored_at >= self._ttl:
            return None
        return entry.response

    def put(self, key: str, response: RadarResponse) -> None:
        """Overwrite the slot unconditionally."""
        self._entry = CacheEntry(key=key, response=response, stored_at=self._clock())
        logger.debug("radar_cache_stored", key=key, count=response.count)

    def invalidate(self) -> None:
        """Clear the slot so the next request recomputes."""
        self._entry = None
        logger.info("radar_cache_invalidated")
