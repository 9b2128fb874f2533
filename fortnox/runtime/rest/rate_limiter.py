"""Concurrency-1 gate with minimum spacing between request starts."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable

from ...config import DEFAULT_MIN_INTERVAL


class RateLimiter:
    """Serializes requests and paces their start times.

    Holding the limiter (``async with limiter``) grants exclusive use of the
    connection slot; ``pace()`` then waits until at least ``min_interval``
    seconds have passed since the previous request started.

    Waiters are served in lock acquisition order, which asyncio.Lock keeps
    FIFO.
    """

    def __init__(
        self,
        min_interval: float = DEFAULT_MIN_INTERVAL,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if min_interval < 0:
            raise ValueError("min_interval must be >= 0")
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._last_start: float | None = None

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    def delay_until_next(self) -> float:
        """Seconds to wait before the next request may start."""
        if self._last_start is None:
            return 0.0
        return max(0.0, self._last_start + self.min_interval - self._clock())

    async def pace(self) -> None:
        """Wait out the minimum spacing and stamp a request start.

        Must be called while holding the limiter.
        """
        delay = self.delay_until_next()
        if delay > 0:
            await self._sleep(delay)
        self._last_start = self._clock()

    async def __aenter__(self) -> RateLimiter:
        await self._lock.acquire()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self._lock.release()
