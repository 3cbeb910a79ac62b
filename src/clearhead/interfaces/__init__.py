"""Interface contracts for clearhead.

This module exports all Protocol-based interfaces for dependency injection.
"""

from clearhead.interfaces.clock import ClockInterface
from clearhead.interfaces.storage import StorageInterface

__all__ = [
    "ClockInterface",
    "StorageInterface",
]
