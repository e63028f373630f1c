"""
Courtesy pacing between provider calls.

The sleep function and clock are injected so tests can run the scanner
without real delays and with a deterministic elapsed time.
"""

import asyncio
import time
from typing import Awaitable, Callable

SleepFn = Callable[[float], Awaitable[None]]
ClockFn = Callable[[], float]


class Pacer:
    """Fixed pause after each successful provider call, plus a scan stopwatch."""

    def __init__(
        self,
        delay_seconds: float = 0.5,
        sleep: SleepFn = asyncio.sleep,
        clock: ClockFn = time.monotonic,
    ):
        self.delay_seconds = delay_seconds
        self._sleep = sleep
        self._clock = clock
        self._started_at = clock()

    async def courtesy_pause(self) -> None:
        if self.delay_seconds > 0:
            await self._sleep(self.delay_seconds)

    def elapsed(self) -> float:
        """Seconds since the pacer was created."""
        return self._clock() - self._started_at
