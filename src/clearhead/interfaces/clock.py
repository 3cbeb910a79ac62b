"""Clock interface for clearhead.

Every engine reads the current time through this Protocol so tests can
pin it.
"""

from typing import Protocol, runtime_checkable

__all__ = [
    "ClockInterface",
]


@runtime_checkable
class ClockInterface(Protocol):
    """Source of the current time."""

    def now(self) -> int:
        """Return the current time in epoch milliseconds."""
        ...
