"""Review interval tables.

Two tables exist. ``REVIEW_INTERVALS`` is indexed by mastery level and
drives the canonical level-based scheduler. ``CONFIDENCE_INTERVALS`` is
indexed by completed review count and is only used by the alternative
confidence-based model.
"""

__all__ = [
    "CONFIDENCE_INTERVALS",
    "MAX_LEVEL",
    "REVIEW_INTERVALS",
    "interval_description",
    "interval_for_level",
    "interval_for_review_count",
]

# Days until the next review, per level (0-8)
REVIEW_INTERVALS: tuple[int, ...] = (1, 2, 5, 10, 21, 50, 90, 180, 365)

MAX_LEVEL = len(REVIEW_INTERVALS) - 1

# Days until the next review, per completed review count
CONFIDENCE_INTERVALS: tuple[int, ...] = (1, 3, 7, 14, 30)


def _clamped(table: tuple[int, ...], index: int) -> int:
    return table[min(max(index, 0), len(table) - 1)]


def interval_for_level(level: int) -> int:
    """Interval in days for a mastery level.

    Levels past the end of the table reuse the longest interval and
    negative levels use the shortest.
    """
    return _clamped(REVIEW_INTERVALS, level)


def interval_for_review_count(review_count: int) -> int:
    """Base interval in days for the confidence model."""
    return _clamped(CONFIDENCE_INTERVALS, review_count)


def interval_description(level: int) -> str:
    """Human readable label for the interval of a level."""
    days = interval_for_level(level)
    if days == 1:
        return "Tomorrow"
    if days < 7:
        return f"{days} days"
    if days < 30:
        return f"{round(days / 7)} weeks"
    if days < 365:
        return f"{round(days / 30)} months"
    return "1 year"
