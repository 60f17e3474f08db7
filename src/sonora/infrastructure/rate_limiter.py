"""Minimum-interval rate limiter for the external recording database.

Hey future me - this is THE one place that decides when we may talk to
MusicBrainz / Cover Art Archive. Their limit is a courtesy/ToS thing (about
1 req/sec per client), not a performance knob, and they ban clients that ignore
it. So:

- ONE limiter instance per process, shared by every client that hits the
  service (search, cover art, the HTTP API routes). Build it once and pass it
  around explicitly - there is no module-level singleton on purpose, so tests
  can inject a fake clock.
- The gap is measured between dispatch STARTS. We stamp the dispatch time the
  moment a caller is let through, before the request goes out.
- Waiters are served FIFO. asyncio.Lock wakes waiters in arrival order, and
  only the lock holder sleeps, so nobody can jump the queue.

USAGE:
    limiter = RateLimiter.for_musicbrainz()

    async with limiter:
        response = await client.get(url)
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# MusicBrainz asks for <= 1 req/sec. 1.1s leaves headroom for clock jitter.
MUSICBRAINZ_MIN_INTERVAL = 1.1


@dataclass
class RateLimiter:
    """Serializes dispatches so two never start closer than min_interval.

    Attributes:
        min_interval: Minimum seconds between two dispatch starts
        clock: Monotonic time source (injectable for tests)
        sleep: Async sleep (injectable for tests)
        name: Label used in log messages
    """

    min_interval: float = MUSICBRAINZ_MIN_INTERVAL
    clock: Callable[[], float] = time.monotonic
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    name: str = "default"

    _last_dispatch: float | None = field(default=None, init=False)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False)

    @classmethod
    def for_musicbrainz(
        cls, min_interval: float = MUSICBRAINZ_MIN_INTERVAL
    ) -> "RateLimiter":
        """Create the limiter shared by all MusicBrainz / CAA traffic."""
        return cls(min_interval=min_interval, name="musicbrainz")

    async def acquire(self) -> float:
        """Wait for our turn, then record the dispatch time.

        Returns:
            Seconds this caller spent waiting
        """
        async with self._lock:
            waited = 0.0
            if self._last_dispatch is not None:
                remaining = self.min_interval - (self.clock() - self._last_dispatch)
                if remaining > 0:
                    logger.debug(
                        "RateLimiter[%s]: waiting %.2fs before dispatch",
                        self.name,
                        remaining,
                    )
                    await self.sleep(remaining)
                    waited = remaining
            self._last_dispatch = self.clock()
            return waited

    @property
    def last_dispatch(self) -> float | None:
        """Clock value of the most recent dispatch (for debugging)."""
        return self._last_dispatch

    async def __aenter__(self) -> "RateLimiter":
        """Enter async context - wait for a dispatch slot."""
        await self.acquire()
        return self

    async def __aexit__(
        self, exc_type: type | None, exc_val: Exception | None, exc_tb: object
    ) -> None:
        """Exit async context (slot already consumed)."""
        return None


__all__ = ["MUSICBRAINZ_MIN_INTERVAL", "RateLimiter"]
