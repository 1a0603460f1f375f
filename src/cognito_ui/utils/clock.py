"""
Clock abstraction for polling loops.

Retry and wait loops read time and sleep through a ``Clock`` so tests can
drive them with a fake clock instead of real delays.
"""

import asyncio
import time
from abc import ABC, abstractmethod


class Clock(ABC):
    """Source of monotonic time and cooperative sleeping."""

    @abstractmethod
    def monotonic(self) -> float:
        """Current time in seconds from an arbitrary fixed origin."""
        ...

    @abstractmethod
    async def sleep(self, seconds: float) -> None:
        """Suspend the current task for ``seconds``."""
        ...

    def elapsed_ms(self, since: float) -> float:
        """Milliseconds elapsed since a previous ``monotonic()`` reading."""
        return (self.monotonic() - since) * 1000


class SystemClock(Clock):
    """Wall-clock implementation backed by ``time`` and ``asyncio``."""

    def monotonic(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)
