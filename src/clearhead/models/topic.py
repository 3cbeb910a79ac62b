"""Study topic and revision models for clearhead.

These models represent learned topics and the review history that
the spaced-repetition scheduler produces for them.
"""

from enum import StrEnum

from pydantic import BaseModel, Field

__all__ = [
    "DecayState",
    "ReviewFeedback",
    "RevisionDTO",
    "StudyTopicDTO",
    "TopicPriority",
]


class DecayState(StrEnum):
    """Discrete urgency bucket derived from elapsed time.

    Ordered by severity: fresh < due < overdue < critical.
    """

    FRESH = "fresh"
    """Not due yet (or never scheduled)"""

    DUE = "due"
    """Due on the current day"""

    OVERDUE = "overdue"
    """One to three days late"""

    CRITICAL = "critical"
    """More than three days late"""

    @property
    def severity(self) -> int:
        return _DECAY_SEVERITY[self]


_DECAY_SEVERITY = {
    DecayState.FRESH: 0,
    DecayState.DUE: 1,
    DecayState.OVERDUE: 2,
    DecayState.CRITICAL: 3,
}


class ReviewFeedback(StrEnum):
    """User feedback submitted after reviewing a topic."""

    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"


class TopicPriority(StrEnum):
    """Ordering hint for review queues. Never affects interval math."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def weight(self) -> int:
        return {"high": 3, "medium": 2, "low": 1}[self.value]


class StudyTopicDTO(BaseModel, frozen=True):
    """Public study topic data transfer object.

    ``next_review_at`` is always produced by the scheduler; callers
    never set it directly.

    Attributes:
        topic_id: Opaque topic ID
        topic: Display text
        tags: Free-form comma separated tags
        time_spent_minutes: Time spent on the initial study session
        confidence_level: Self-reported confidence (0 - 100)
        integrity_percent: Health metric that decays with neglect (0 - 100)
        level: Step in the mastery interval table (0-based)
        review_count: Number of completed reviews
        decay_state: Urgency bucket derived from elapsed time
        is_mastered: True once level reaches the mastery threshold
        priority: Ordering hint for review queues
        last_reviewed_at: Last review timestamp (epoch ms)
        next_review_at: Next due timestamp (epoch ms)
        created_at: Creation timestamp (epoch ms)
        updated_at: Last mutation timestamp (epoch ms)
        schema_version: Schema version for forward compatibility
    """

    topic_id: str
    topic: str = Field(min_length=1)
    tags: str = ""
    time_spent_minutes: int = Field(default=0, ge=0)
    confidence_level: int = Field(default=50, ge=0, le=100)
    integrity_percent: int = Field(default=100, ge=0, le=100)
    level: int = Field(default=0, ge=0)
    review_count: int = Field(default=0, ge=0)
    decay_state: DecayState = DecayState.FRESH
    is_mastered: bool = False
    priority: TopicPriority = TopicPriority.MEDIUM
    last_reviewed_at: int | None = Field(default=None, description="Epoch ms")
    next_review_at: int | None = Field(default=None, description="Epoch ms")
    created_at: int = Field(description="Epoch ms")
    updated_at: int = Field(description="Epoch ms")
    schema_version: int = Field(default=1)


class RevisionDTO(BaseModel, frozen=True):
    """One scheduled review of a topic.

    A revision is completed or marked missed exactly once. Completed
    revisions are never modified again.

    Attributes:
        revision_id: Deterministic revision ID
        topic_id: Parent topic ID
        scheduled_at: When the review is due (epoch ms)
        completed_at: When the review happened (epoch ms)
        was_missed: True once the review was marked missed
        confidence_before: Topic confidence before the review
        confidence_after: Topic confidence after the review
        created_at: Creation timestamp (epoch ms)
        schema_version: Schema version for forward compatibility
    """

    revision_id: str
    topic_id: str
    scheduled_at: int = Field(description="Epoch ms")
    completed_at: int | None = Field(default=None, description="Epoch ms")
    was_missed: bool = False
    confidence_before: int | None = Field(default=None, ge=0, le=100)
    confidence_after: int | None = Field(default=None, ge=0, le=100)
    created_at: int = Field(description="Epoch ms")
    schema_version: int = Field(default=1)

    @property
    def is_open(self) -> bool:
        """Still waiting for a review."""
        return self.completed_at is None

    @property
    def is_settled(self) -> bool:
        """Completed or already marked missed."""
        return self.completed_at is not None or self.was_missed
