"""Decay classification for study topics.

Maps elapsed time against a reference timestamp (normally the topic's
``next_review_at``) to a discrete urgency bucket.
"""

import math

from clearhead.models.topic import DecayState
from clearhead.utils.dates import DAY_MS

__all__ = [
    "CRITICAL_AFTER_DAYS",
    "calculate_decay_state",
    "days_until_review",
    "integrity_after_neglect",
    "needs_review_today",
]

# More than this many whole days late is critical
CRITICAL_AFTER_DAYS = 3


def calculate_decay_state(reference_at: int | None, now: int) -> DecayState:
    """Classify how late a review is.

    Days late = floor((now - reference_at) / 1 day):
        < 0     -> fresh (not due yet)
        0       -> due (same day)
        1 - 3   -> overdue
        > 3     -> critical

    Args:
        reference_at: Due timestamp (epoch ms) or None if never scheduled
        now: Current time (epoch ms)

    Returns:
        The decay bucket
    """
    if reference_at is None:
        return DecayState.FRESH

    days_late = math.floor((now - reference_at) / DAY_MS)
    if days_late < 0:
        return DecayState.FRESH
    if days_late == 0:
        return DecayState.DUE
    if days_late <= CRITICAL_AFTER_DAYS:
        return DecayState.OVERDUE
    return DecayState.CRITICAL


def needs_review_today(next_review_at: int | None, now: int) -> bool:
    """True iff a review is scheduled and due at or before ``now``."""
    return next_review_at is not None and next_review_at <= now


def days_until_review(next_review_at: int | None, now: int) -> int:
    """Whole days until the next review (negative when late, 0 if unset)."""
    if next_review_at is None:
        return 0
    return math.ceil((next_review_at - now) / DAY_MS)


def integrity_after_neglect(days_since_review: int, daily_decay: int = 2) -> int:
    """Integrity left after going ``days_since_review`` days without review.

    The first day is free; every further day costs ``daily_decay`` points.
    """
    lost = max(0, days_since_review - 1) * daily_decay
    return max(0, 100 - lost)
