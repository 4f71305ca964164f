"""
Fixed-interval rate limiter for outbound API calls.
"""

import asyncio
import math
import time
from typing import Awaitable, Callable, TypeVar


T = TypeVar('T')


class RateLimiter:
    """
    Paces operations to at most ``qps`` starts per second.

    Every call is assigned a slot ``1000 / qps`` milliseconds after the
    previous one. Slots are handed out when ``schedule`` is called, not
    when the previous operation finishes, so concurrent callers queue onto
    successively later slots. An idle limiter gives no burst credit.
    """

    def __init__(self, qps: float = 20.0):
        if qps <= 0:
            raise ValueError("qps must be positive")
        self.qps = qps
        self._last_slot = 0.0  # milliseconds since the epoch

    @property
    def interval_ms(self) -> float:
        return 1000.0 / self.qps

    def _reserve_slot(self) -> float:
        """Reserve the next slot and return how many seconds to wait for it."""

        now = time.time() * 1000.0
        next_slot = math.ceil(self._last_slot + self.interval_ms)
        if next_slot > now:
            self._last_slot = next_slot
            return (next_slot - now) / 1000.0

        self._last_slot = now
        return 0.0

    async def acquire(self) -> None:
        """Wait until the next slot is due."""

        delay = self._reserve_slot()
        if delay > 0:
            await asyncio.sleep(delay)

    async def schedule(self, operation: Callable[[], Awaitable[T]]) -> T:
        """
        Run ``operation`` in its slot.

        Exceptions raised by the operation propagate unchanged; the slot
        it used stays consumed.
        """
        await self.acquire()
        return await operation()
