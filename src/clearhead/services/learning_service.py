"""Learning service for clearhead.

This module applies the spaced-repetition scheduler to stored topics:
it records reviews and missed reviews, keeps the revision history and
refreshes decay for neglected topics.
"""

from clearhead.config import ClearHeadConfig
from clearhead.domain.decay import needs_review_today
from clearhead.domain.scheduler import (
    calculate_confidence_interval,
    calculate_next_review,
    calculate_next_review_from_feedback,
)
from clearhead.domain.topic import StudyTopic
from clearhead.exceptions import (
    RevisionNotFoundError,
    SchedulingModelError,
    TopicNotFoundError,
)
from clearhead.interfaces.clock import ClockInterface
from clearhead.interfaces.storage import StorageInterface
from clearhead.logging import get_logger
from clearhead.models.timeline import TimelineEntryType
from clearhead.models.topic import (
    ReviewFeedback,
    RevisionDTO,
    StudyTopicDTO,
    TopicPriority,
)
from clearhead.services.timeline_service import TimelineService
from clearhead.utils.dates import add_days
from clearhead.utils.ids import generate_revision_id, new_id

__all__ = [
    "LearningService",
]

logger = get_logger(__name__)


class LearningService:
    """Spaced-repetition service over persisted topics.

    Every transition writes in a fixed order: the topic or revision
    being transitioned first, then derived revisions, then the timeline.
    A failure part way leaves the primary entity in a valid state and
    the remaining writes safe to retry.

    Example:
        service = LearningService(storage, clock, timeline)

        topic = await service.add_topic("Binary search", confidence=60)
        topic = await service.review_topic(topic.topic_id, ReviewFeedback.EASY)

        queue = await service.get_review_queue()
    """

    def __init__(
        self,
        storage: StorageInterface,
        clock: ClockInterface,
        timeline: TimelineService,
        config: ClearHeadConfig | None = None,
    ) -> None:
        """Initialize service with dependencies.

        Args:
            storage: Storage interface for topics and revisions
            clock: Source of the current time
            timeline: Timeline recorder for audit entries
            config: Scheduling policy, default: ClearHeadConfig()
        """
        self._storage = storage
        self._clock = clock
        self._timeline = timeline
        self._config = config or ClearHeadConfig()

    async def add_topic(
        self,
        topic: str,
        time_spent_minutes: int = 0,
        confidence: int = 50,
        priority: TopicPriority = TopicPriority.MEDIUM,
        tags: str = "",
    ) -> StudyTopicDTO:
        """Log a newly learned topic and schedule its first review.

        Args:
            topic: Display text
            time_spent_minutes: Time spent studying
            confidence: Self-reported confidence (0 - 100)
            priority: Ordering hint for review queues
            tags: Free-form tags

        Returns:
            The stored topic
        """
        now = self._clock.now()
        if self._config.scheduling_model == "confidence":
            next_review_at = add_days(now, calculate_confidence_interval(0, confidence))
        else:
            next_review_at = calculate_next_review(0, now)

        new_topic = StudyTopicDTO(
            topic_id=new_id(),
            topic=topic,
            tags=tags,
            time_spent_minutes=time_spent_minutes,
            confidence_level=confidence,
            priority=priority,
            last_reviewed_at=now,
            next_review_at=next_review_at,
            created_at=now,
            updated_at=now,
        )

        await self._storage.save_topic(new_topic)
        await self._schedule_revision(new_topic.topic_id, next_review_at, now)
        await self._timeline.record(
            TimelineEntryType.STUDY_SESSION,
            reference_id=new_topic.topic_id,
            title=topic,
            description=(
                f"Studied for {time_spent_minutes} minutes with {confidence}% confidence"
            ),
            was_avoided=False,
            created_at=now,
        )

        logger.info("topic_added", topic_id=new_topic.topic_id, next_review_at=next_review_at)
        return new_topic

    async def review_topic(
        self,
        topic_id: str,
        feedback: ReviewFeedback,
        confidence: int | None = None,
    ) -> StudyTopicDTO:
        """Record a review under the level model.

        Moves the topic's level by the feedback, reschedules it, restores
        integrity, closes the open revision and schedules the next one.

        Args:
            topic_id: Topic that was reviewed
            feedback: again / hard / good / easy
            confidence: Optional new confidence (0 - 100) to record

        Returns:
            Updated topic

        Raises:
            TopicNotFoundError: If the topic does not exist
            SchedulingModelError: If the confidence model is configured
        """
        self._require_model("level")
        current = await self.get_topic(topic_id)
        now = self._clock.now()

        outcome = calculate_next_review_from_feedback(
            current.level,
            ReviewFeedback(feedback),
            now,
            mastery_level=self._config.mastery_level,
        )
        topic = StudyTopic.from_dto(current)
        topic.apply_review(outcome, now)
        if confidence is not None:
            topic.confidence_level = confidence
        updated = topic.to_dto()

        await self._storage.save_topic(updated)
        await self._close_open_revision(
            topic_id,
            now,
            confidence_before=current.confidence_level if confidence is not None else None,
            confidence_after=confidence,
        )
        await self._schedule_revision(topic_id, outcome.next_review_at, now)

        logger.info(
            "topic_reviewed",
            topic_id=topic_id,
            feedback=str(feedback),
            old_level=current.level,
            new_level=outcome.next_level,
            is_mastered=outcome.is_mastered,
        )
        return updated

    async def complete_revision(
        self,
        revision_id: str,
        confidence_after: int,
    ) -> StudyTopicDTO:
        """Record a review under the confidence model.

        The next interval comes from the review-count table scaled by
        ``confidence_after``.

        Raises:
            RevisionNotFoundError: If the revision does not exist
            TopicNotFoundError: If its topic no longer exists
            SchedulingModelError: If the level model is configured
        """
        self._require_model("confidence")
        revision = await self._require_revision(revision_id)
        current = await self.get_topic(revision.topic_id)

        if revision.completed_at is not None:
            logger.warning("revision_already_completed", revision_id=revision_id)
            return current

        now = self._clock.now()
        days = calculate_confidence_interval(current.review_count + 1, confidence_after)
        next_review_at = add_days(now, days)

        topic = StudyTopic.from_dto(current)
        topic.apply_confidence_review(confidence_after, next_review_at, now)
        updated = topic.to_dto()

        await self._storage.save_topic(updated)
        await self._storage.save_revision(
            revision.model_copy(
                update={
                    "completed_at": now,
                    "confidence_before": current.confidence_level,
                    "confidence_after": confidence_after,
                }
            )
        )
        await self._schedule_revision(topic.topic_id, next_review_at, now)

        logger.info(
            "revision_completed",
            revision_id=revision_id,
            topic_id=topic.topic_id,
            interval_days=days,
        )
        return updated

    async def mark_revision_missed(self, revision_id: str) -> StudyTopicDTO:
        """Mark a revision as missed and penalize its topic.

        Integrity drops by the configured penalty (floor 0), the decay
        state is recomputed and an avoided missed_revision entry lands
        on the timeline. A revision is settled only once; repeating the
        call changes nothing.

        Raises:
            RevisionNotFoundError: If the revision does not exist
            TopicNotFoundError: If its topic no longer exists
        """
        revision = await self._require_revision(revision_id)
        current = await self.get_topic(revision.topic_id)

        if revision.is_settled:
            logger.warning("revision_already_settled", revision_id=revision_id)
            return current

        now = self._clock.now()
        await self._storage.save_revision(revision.model_copy(update={"was_missed": True}))

        topic = StudyTopic.from_dto(current)
        topic.apply_missed_penalty(self._config.missed_revision_penalty, now)
        updated = topic.to_dto()
        await self._storage.save_topic(updated)

        await self._timeline.record(
            TimelineEntryType.MISSED_REVISION,
            reference_id=revision_id,
            title=updated.topic,
            description=(
                f"Revision was missed - integrity dropped to {updated.integrity_percent}%"
            ),
            was_avoided=True,
            created_at=now,
        )

        logger.info(
            "revision_missed",
            revision_id=revision_id,
            topic_id=updated.topic_id,
            integrity=updated.integrity_percent,
            decay_state=updated.decay_state.value,
        )
        return updated

    async def update_decay_states(self) -> int:
        """Refresh decay state and integrity of every topic.

        Returns:
            Number of topics updated
        """
        now = self._clock.now()
        topics = await self._storage.get_all_topics()

        updated = 0
        for dto in topics:
            topic = StudyTopic.from_dto(dto)
            if topic.apply_neglect(now, self._config.daily_integrity_decay):
                await self._storage.save_topic(topic.to_dto())
                updated += 1

        logger.info("decay_refresh_completed", updated_count=updated, total=len(topics))
        return updated

    async def get_topic(self, topic_id: str) -> StudyTopicDTO:
        """Get a topic.

        Raises:
            TopicNotFoundError: If the topic does not exist
        """
        topic = await self._storage.get_topic(topic_id)
        if topic is None:
            raise TopicNotFoundError(topic_id)
        return topic

    async def get_all_topics(self) -> list[StudyTopicDTO]:
        return await self._storage.get_all_topics()

    async def get_revisions(self, topic_id: str) -> list[RevisionDTO]:
        """Get a topic's revision history, newest first."""
        return await self._storage.get_revisions_for_topic(topic_id)

    async def get_due_revisions(self) -> list[RevisionDTO]:
        """Get open revisions that are due now (empty when none are)."""
        return await self._storage.get_due_revisions(self._clock.now())

    async def get_review_queue(self) -> list[StudyTopicDTO]:
        """Get unmastered topics due for review.

        Sorted by priority (high first), then by how long they have
        been due.
        """
        now = self._clock.now()
        topics = await self._storage.get_all_topics()
        due = [
            t for t in topics
            if needs_review_today(t.next_review_at, now) and not t.is_mastered
        ]
        due.sort(key=lambda t: (-t.priority.weight, t.next_review_at))
        return due

    async def get_mastery_percent(self) -> int:
        """Share of mastered topics, rounded to a whole percent."""
        topics = await self._storage.get_all_topics()
        if not topics:
            return 0
        mastered = sum(1 for t in topics if t.is_mastered)
        return round(mastered / len(topics) * 100)

    async def update_topic_details(
        self,
        topic_id: str,
        topic: str | None = None,
        priority: TopicPriority | None = None,
        tags: str | None = None,
    ) -> StudyTopicDTO:
        """Edit the descriptive fields of a topic.

        Scheduling fields are not editable here; they only change
        through reviews.
        """
        current = await self.get_topic(topic_id)
        changes: dict[str, object] = {}
        if topic is not None:
            changes["topic"] = topic
        if priority is not None:
            changes["priority"] = priority
        if tags is not None:
            changes["tags"] = tags
        if not changes:
            return current

        changes["updated_at"] = self._clock.now()
        updated = StudyTopicDTO.model_validate({**current.model_dump(), **changes})
        await self._storage.save_topic(updated)
        return updated

    async def delete_topic(self, topic_id: str) -> None:
        """Delete a topic together with its revision history.

        Raises:
            TopicNotFoundError: If the topic does not exist
        """
        if not await self._storage.delete_topic(topic_id):
            raise TopicNotFoundError(topic_id)
        logger.info("topic_deleted", topic_id=topic_id)

    def _require_model(self, required: str) -> None:
        if self._config.scheduling_model != required:
            raise SchedulingModelError(self._config.scheduling_model, required)

    async def _require_revision(self, revision_id: str) -> RevisionDTO:
        revision = await self._storage.get_revision(revision_id)
        if revision is None:
            raise RevisionNotFoundError(revision_id)
        return revision

    async def _schedule_revision(self, topic_id: str, scheduled_at: int, now: int) -> None:
        await self._storage.append_revision(
            RevisionDTO(
                revision_id=generate_revision_id(topic_id, scheduled_at, now),
                topic_id=topic_id,
                scheduled_at=scheduled_at,
                created_at=now,
            )
        )

    async def _close_open_revision(
        self,
        topic_id: str,
        now: int,
        confidence_before: int | None = None,
        confidence_after: int | None = None,
    ) -> None:
        revision = await self._storage.get_open_revision(topic_id)
        if revision is None:
            return
        await self._storage.save_revision(
            revision.model_copy(
                update={
                    "completed_at": now,
                    "confidence_before": confidence_before,
                    "confidence_after": confidence_after,
                }
            )
        )
