"""Internal StudyTopic entity for clearhead.

This module contains the mutable StudyTopic domain model with the
review, missed-review and neglect transitions.
"""

import math
from dataclasses import dataclass

from clearhead.domain.decay import calculate_decay_state, integrity_after_neglect
from clearhead.domain.scheduler import ReviewOutcome
from clearhead.models.topic import DecayState, StudyTopicDTO, TopicPriority
from clearhead.utils.dates import DAY_MS

__all__ = [
    "StudyTopic",
]


@dataclass
class StudyTopic:
    """Internal StudyTopic entity with review business logic.

    This is a mutable internal representation used while applying a
    transition. Convert to StudyTopicDTO for persistence.
    """

    topic_id: str
    topic: str
    created_at: int
    updated_at: int
    tags: str = ""
    time_spent_minutes: int = 0
    confidence_level: int = 50
    integrity_percent: int = 100
    level: int = 0
    review_count: int = 0
    decay_state: DecayState = DecayState.FRESH
    is_mastered: bool = False
    priority: TopicPriority = TopicPriority.MEDIUM
    last_reviewed_at: int | None = None
    next_review_at: int | None = None

    def apply_review(self, outcome: ReviewOutcome, now: int) -> None:
        """Apply a scheduled review outcome.

        Every review restores the topic to full health: integrity goes
        back to 100 and the decay state to fresh.

        Args:
            outcome: Level, due time and mastery flag from the scheduler
            now: Review time (epoch ms)
        """
        self.level = outcome.next_level
        self.is_mastered = outcome.is_mastered
        self.next_review_at = outcome.next_review_at
        self._mark_reviewed(now)

    def apply_confidence_review(
        self,
        confidence: int,
        next_review_at: int,
        now: int,
    ) -> None:
        """Apply a review under the confidence model."""
        self.confidence_level = confidence
        self.next_review_at = next_review_at
        self._mark_reviewed(now)

    def _mark_reviewed(self, now: int) -> None:
        self.last_reviewed_at = now
        self.review_count += 1
        self.integrity_percent = 100
        self.decay_state = DecayState.FRESH
        self.updated_at = now

    def apply_missed_penalty(self, penalty: int, now: int) -> None:
        """Drop integrity for a missed review and refresh the decay state."""
        self.integrity_percent = max(0, self.integrity_percent - penalty)
        self.decay_state = calculate_decay_state(self.next_review_at, now)
        self.updated_at = now

    def apply_neglect(self, now: int, daily_decay: int = 2) -> bool:
        """Recompute decay state and integrity from elapsed time.

        Integrity never rises here; only a review restores it.

        Returns:
            True if anything changed
        """
        since = self.last_reviewed_at or self.created_at
        days_since = math.floor((now - since) / DAY_MS)
        new_integrity = min(
            self.integrity_percent,
            integrity_after_neglect(days_since, daily_decay),
        )
        new_state = calculate_decay_state(self.next_review_at, now)

        if new_integrity == self.integrity_percent and new_state == self.decay_state:
            return False

        self.integrity_percent = new_integrity
        self.decay_state = new_state
        self.updated_at = now
        return True

    def to_dto(self) -> StudyTopicDTO:
        """Convert to immutable DTO for persistence."""
        return StudyTopicDTO(
            topic_id=self.topic_id,
            topic=self.topic,
            tags=self.tags,
            time_spent_minutes=self.time_spent_minutes,
            confidence_level=self.confidence_level,
            integrity_percent=self.integrity_percent,
            level=self.level,
            review_count=self.review_count,
            decay_state=self.decay_state,
            is_mastered=self.is_mastered,
            priority=self.priority,
            last_reviewed_at=self.last_reviewed_at,
            next_review_at=self.next_review_at,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_dto(cls, dto: StudyTopicDTO) -> "StudyTopic":
        """Create from DTO."""
        return cls(
            topic_id=dto.topic_id,
            topic=dto.topic,
            tags=dto.tags,
            time_spent_minutes=dto.time_spent_minutes,
            confidence_level=dto.confidence_level,
            integrity_percent=dto.integrity_percent,
            level=dto.level,
            review_count=dto.review_count,
            decay_state=dto.decay_state,
            is_mastered=dto.is_mastered,
            priority=dto.priority,
            last_reviewed_at=dto.last_reviewed_at,
            next_review_at=dto.next_review_at,
            created_at=dto.created_at,
            updated_at=dto.updated_at,
        )
