"""System clock for clearhead."""

import time

from clearhead.interfaces.clock import ClockInterface

__all__ = [
    "SystemClock",
]


class SystemClock(ClockInterface):
    """Wall-clock time in epoch milliseconds."""

    def now(self) -> int:
        return time.time_ns() // 1_000_000
