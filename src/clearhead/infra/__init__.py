"""Infrastructure adapters for clearhead."""

from clearhead.infra.clock import SystemClock

__all__ = [
    "SystemClock",
]
