"""Spaced-repetition scheduling rules.

The canonical model is level-based: feedback moves a topic through the
levels of ``REVIEW_INTERVALS`` and the level alone decides the next
interval. The confidence-based functions at the bottom implement the
alternative model, which scales a review-count interval by the
confidence reported after a review. A topic is scheduled by one model
or the other, never both.
"""

from dataclasses import dataclass

from clearhead.domain.intervals import (
    MAX_LEVEL,
    interval_for_level,
    interval_for_review_count,
)
from clearhead.models.topic import ReviewFeedback
from clearhead.utils.dates import add_days

__all__ = [
    "DEFAULT_MASTERY_LEVEL",
    "ReviewOutcome",
    "advance_level",
    "calculate_confidence_interval",
    "calculate_next_review",
    "calculate_next_review_from_feedback",
    "confidence_multiplier",
    "is_mastered",
    "level_progress",
]

DEFAULT_MASTERY_LEVEL = 5


@dataclass(frozen=True)
class ReviewOutcome:
    """Result of scheduling one review."""

    next_level: int
    next_review_at: int
    is_mastered: bool


def advance_level(
    level: int,
    feedback: ReviewFeedback,
    max_level: int = MAX_LEVEL,
) -> int:
    """Move a level according to review feedback.

    again -> 0, hard -> one level down (floor 0), good -> unchanged,
    easy -> one level up (capped at ``max_level``).
    """
    match feedback:
        case ReviewFeedback.AGAIN:
            return 0
        case ReviewFeedback.HARD:
            return max(0, level - 1)
        case ReviewFeedback.GOOD:
            return level
        case ReviewFeedback.EASY:
            return min(max_level, level + 1)
    raise ValueError(f"unknown feedback: {feedback!r}")


def calculate_next_review(level: int, now: int) -> int:
    """Due timestamp for a topic sitting at ``level``."""
    return add_days(now, interval_for_level(level))


def is_mastered(level: int, mastery_level: int = DEFAULT_MASTERY_LEVEL) -> bool:
    return level >= mastery_level


def calculate_next_review_from_feedback(
    level: int,
    feedback: ReviewFeedback,
    now: int,
    mastery_level: int = DEFAULT_MASTERY_LEVEL,
) -> ReviewOutcome:
    """Compute the next level, due time and mastery flag in one step.

    Args:
        level: Current level
        feedback: Submitted feedback
        now: Review time (epoch ms)
        mastery_level: Level at which a topic counts as mastered

    Returns:
        ReviewOutcome for the new level
    """
    next_level = advance_level(level, feedback)
    return ReviewOutcome(
        next_level=next_level,
        next_review_at=calculate_next_review(next_level, now),
        is_mastered=is_mastered(next_level, mastery_level),
    )


def level_progress(level: int, mastery_level: int = DEFAULT_MASTERY_LEVEL) -> float:
    """Progress towards mastery as a percentage (0 - 100)."""
    return min(100.0, level / mastery_level * 100)


def confidence_multiplier(confidence: int) -> float:
    """Interval scale factor for the confidence model.

    Below 50 the interval shrinks linearly down to half at 0. Above 70
    it grows linearly up to +30% at 100. In between it is unchanged.
    """
    if confidence < 50:
        return 0.5 + (confidence / 50) * 0.5
    if confidence > 70:
        return 1.0 + ((confidence - 70) / 30) * 0.3
    return 1.0


def calculate_confidence_interval(review_count: int, confidence: int) -> int:
    """Interval in days for the confidence model (at least one day)."""
    base = interval_for_review_count(review_count)
    return max(1, round(base * confidence_multiplier(confidence)))
