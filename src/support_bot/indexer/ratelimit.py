"""Fixed-interval pacing for gateway requests.

One :class:`FixedIntervalLimiter` is created per guild run so concurrent runs for
different guilds never share (or starve) each other's request budget.
"""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable


class FixedIntervalLimiter:
    """Space successive ``acquire`` calls at least ``interval`` seconds apart."""

    def __init__(
        self,
        interval: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if interval < 0:
            raise ValueError("interval must be >= 0")
        self.interval = interval
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._last: float | None = None

    async def acquire(self) -> None:
        async with self._lock:
            if self._last is not None:
                remaining = self._last + self.interval - self._clock()
                if remaining > 0:
                    await self._sleep(remaining)
            self._last = self._clock()


__all__ = ["FixedIntervalLimiter"]
