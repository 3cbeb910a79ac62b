"""Unit tests for LearningService."""

from unittest.mock import AsyncMock

import pytest

from clearhead.config import ClearHeadConfig
from clearhead.exceptions import (
    RevisionNotFoundError,
    SchedulingModelError,
    TopicNotFoundError,
)
from clearhead.models.timeline import TimelineEntryType
from clearhead.models.topic import (
    DecayState,
    ReviewFeedback,
    RevisionDTO,
    StudyTopicDTO,
    TopicPriority,
)
from clearhead.services.learning_service import LearningService
from clearhead.services.timeline_service import TimelineService
from clearhead.utils.dates import DAY_MS
from clearhead.utils.ids import generate_revision_id
from tests.conftest import NOW
from tests.mocks.fixed_clock import FixedClock
from tests.mocks.memory_storage import InMemoryStorage


def confidence_service(storage: InMemoryStorage, clock: FixedClock) -> LearningService:
    return LearningService(
        storage,
        clock,
        TimelineService(storage, clock),
        ClearHeadConfig(scheduling_model="confidence"),
    )


class TestAddTopic:
    """Tests for logging new topics."""

    @pytest.mark.asyncio
    async def test_schedules_first_review_tomorrow(
        self,
        learning: LearningService,
        storage: InMemoryStorage,
    ) -> None:
        topic = await learning.add_topic("Binary search", time_spent_minutes=45, confidence=60)

        assert topic.level == 0
        assert topic.next_review_at == NOW + DAY_MS
        assert topic.last_reviewed_at == NOW
        assert storage.topics[topic.topic_id] == topic

        revisions = await storage.get_revisions_for_topic(topic.topic_id)
        assert [r.revision_id for r in revisions] == [
            generate_revision_id(topic.topic_id, NOW + DAY_MS, NOW)
        ]

    @pytest.mark.asyncio
    async def test_records_study_session(
        self,
        learning: LearningService,
        storage: InMemoryStorage,
    ) -> None:
        topic = await learning.add_topic("Binary search", time_spent_minutes=45, confidence=60)

        entries = await storage.get_timeline_entries(topic.topic_id)
        assert len(entries) == 1
        assert entries[0].entry_type == TimelineEntryType.STUDY_SESSION
        assert entries[0].description == "Studied for 45 minutes with 60% confidence"
        assert entries[0].was_avoided is False

    @pytest.mark.asyncio
    async def test_invalid_confidence_rejected(self, learning: LearningService) -> None:
        with pytest.raises(ValueError):
            await learning.add_topic("Binary search", confidence=120)


class TestReviewTopic:
    """Tests for level-based reviews."""

    @pytest.mark.asyncio
    async def test_easy_review_advances_level(
        self,
        learning: LearningService,
        storage: InMemoryStorage,
        clock: FixedClock,
    ) -> None:
        topic = await learning.add_topic("Binary search")
        clock.advance(days=1)

        reviewed = await learning.review_topic(topic.topic_id, ReviewFeedback.EASY)

        assert reviewed.level == 1
        assert reviewed.next_review_at == clock.now() + 2 * DAY_MS
        assert reviewed.review_count == 1
        assert reviewed.integrity_percent == 100
        assert reviewed.decay_state == DecayState.FRESH

    @pytest.mark.asyncio
    async def test_review_closes_open_revision(
        self,
        learning: LearningService,
        storage: InMemoryStorage,
        clock: FixedClock,
    ) -> None:
        topic = await learning.add_topic("Binary search")
        clock.advance(days=1)

        await learning.review_topic(topic.topic_id, ReviewFeedback.GOOD, confidence=80)

        revisions = await learning.get_revisions(topic.topic_id)
        assert len(revisions) == 2
        newest, first = revisions
        assert first.completed_at == clock.now()
        assert first.confidence_after == 80
        assert newest.is_open is True
        assert newest.scheduled_at == clock.now() + DAY_MS

    @pytest.mark.asyncio
    async def test_reviews_with_same_next_due_keep_history(
        self,
        learning: LearningService,
        clock: FixedClock,
    ) -> None:
        topic = await learning.add_topic("Binary search")
        clock.advance(days=1)
        easy = await learning.review_topic(topic.topic_id, ReviewFeedback.EASY)
        clock.advance(days=1)
        again = await learning.review_topic(topic.topic_id, ReviewFeedback.AGAIN)

        # level 1 after one day and level 0 after two both land on NOW + 3 days
        assert easy.next_review_at == again.next_review_at == NOW + 3 * DAY_MS

        revisions = await learning.get_revisions(topic.topic_id)
        assert len(revisions) == 3
        assert sum(1 for r in revisions if r.completed_at is not None) == 2
        assert sum(1 for r in revisions if r.is_open) == 1

    @pytest.mark.asyncio
    async def test_review_reaches_mastery(
        self,
        learning: LearningService,
        storage: InMemoryStorage,
        sample_topic_dto: StudyTopicDTO,
    ) -> None:
        await storage.save_topic(sample_topic_dto.model_copy(update={"level": 4}))

        reviewed = await learning.review_topic("topic123", ReviewFeedback.EASY)

        assert reviewed.level == 5
        assert reviewed.is_mastered is True
        assert await learning.get_mastery_percent() == 100

    @pytest.mark.asyncio
    async def test_again_resets_mastery(
        self,
        learning: LearningService,
        storage: InMemoryStorage,
        sample_topic_dto: StudyTopicDTO,
    ) -> None:
        await storage.save_topic(
            sample_topic_dto.model_copy(update={"level": 6, "is_mastered": True})
        )

        reviewed = await learning.review_topic("topic123", ReviewFeedback.AGAIN)

        assert reviewed.level == 0
        assert reviewed.is_mastered is False

    @pytest.mark.asyncio
    async def test_unknown_topic(self, learning: LearningService) -> None:
        with pytest.raises(TopicNotFoundError):
            await learning.review_topic("missing", ReviewFeedback.GOOD)

    @pytest.mark.asyncio
    async def test_rejected_under_confidence_model(
        self,
        storage: InMemoryStorage,
        clock: FixedClock,
    ) -> None:
        service = confidence_service(storage, clock)
        topic = await service.add_topic("Binary search")

        with pytest.raises(SchedulingModelError):
            await service.review_topic(topic.topic_id, ReviewFeedback.GOOD)


class TestCompleteRevision:
    """Tests for confidence-model reviews."""

    @pytest.mark.asyncio
    async def test_interval_scaled_by_confidence(
        self,
        storage: InMemoryStorage,
        clock: FixedClock,
    ) -> None:
        service = confidence_service(storage, clock)
        topic = await service.add_topic("Binary search", confidence=60)
        assert topic.next_review_at == NOW + DAY_MS

        clock.advance(days=1)
        (revision,) = await service.get_due_revisions()
        updated = await service.complete_revision(revision.revision_id, confidence_after=100)

        # review 1 -> 3 day base, x1.3 -> 4 days
        assert updated.next_review_at == clock.now() + 4 * DAY_MS
        assert updated.confidence_level == 100
        assert updated.review_count == 1

        stored = await storage.get_revision(revision.revision_id)
        assert stored is not None
        assert stored.completed_at == clock.now()
        assert stored.confidence_before == 60
        assert stored.confidence_after == 100

    @pytest.mark.asyncio
    async def test_rejected_under_level_model(
        self,
        learning: LearningService,
        storage: InMemoryStorage,
        sample_revision_dto: RevisionDTO,
    ) -> None:
        await storage.append_revision(sample_revision_dto)

        with pytest.raises(SchedulingModelError):
            await learning.complete_revision("rev123", confidence_after=80)

    @pytest.mark.asyncio
    async def test_unknown_revision(self, storage: InMemoryStorage, clock: FixedClock) -> None:
        service = confidence_service(storage, clock)
        with pytest.raises(RevisionNotFoundError):
            await service.complete_revision("missing", confidence_after=80)


class TestMarkRevisionMissed:
    """Tests for missed revisions."""

    @pytest.mark.asyncio
    async def test_penalizes_integrity(
        self,
        learning: LearningService,
        storage: InMemoryStorage,
        sample_topic_dto: StudyTopicDTO,
        sample_revision_dto: RevisionDTO,
    ) -> None:
        await storage.save_topic(sample_topic_dto)
        await storage.append_revision(sample_revision_dto)

        updated = await learning.mark_revision_missed("rev123")

        assert updated.integrity_percent == 85
        assert updated.decay_state == DecayState.DUE

        revision = await storage.get_revision("rev123")
        assert revision is not None
        assert revision.was_missed is True
        assert revision.completed_at is None

        entries = await storage.get_timeline_entries("rev123")
        assert len(entries) == 1
        assert entries[0].entry_type == TimelineEntryType.MISSED_REVISION
        assert entries[0].description == "Revision was missed - integrity dropped to 85%"
        assert entries[0].was_avoided is True

    @pytest.mark.asyncio
    async def test_integrity_floors_at_zero(
        self,
        learning: LearningService,
        storage: InMemoryStorage,
        sample_topic_dto: StudyTopicDTO,
        sample_revision_dto: RevisionDTO,
    ) -> None:
        await storage.save_topic(sample_topic_dto.model_copy(update={"integrity_percent": 10}))
        await storage.append_revision(sample_revision_dto)

        updated = await learning.mark_revision_missed("rev123")

        assert updated.integrity_percent == 0

    @pytest.mark.asyncio
    async def test_second_call_changes_nothing(
        self,
        learning: LearningService,
        storage: InMemoryStorage,
        sample_topic_dto: StudyTopicDTO,
        sample_revision_dto: RevisionDTO,
    ) -> None:
        await storage.save_topic(sample_topic_dto)
        await storage.append_revision(sample_revision_dto)

        await learning.mark_revision_missed("rev123")
        again = await learning.mark_revision_missed("rev123")

        assert again.integrity_percent == 85
        assert len(await storage.get_timeline_entries("rev123")) == 1

    @pytest.mark.asyncio
    async def test_write_order(
        self,
        mock_storage: AsyncMock,
        clock: FixedClock,
        sample_topic_dto: StudyTopicDTO,
        sample_revision_dto: RevisionDTO,
    ) -> None:
        mock_storage.get_revision.return_value = sample_revision_dto
        mock_storage.get_topic.return_value = sample_topic_dto
        service = LearningService(mock_storage, clock, TimelineService(mock_storage, clock))

        await service.mark_revision_missed("rev123")

        writes = [
            name for name, _, _ in mock_storage.method_calls
            if not name.startswith("get_")
        ]
        assert writes == ["save_revision", "save_topic", "append_timeline_entry"]


class TestDecayRefresh:
    """Tests for update_decay_states."""

    @pytest.mark.asyncio
    async def test_refresh_applies_neglect(
        self,
        learning: LearningService,
        storage: InMemoryStorage,
        sample_topic_dto: StudyTopicDTO,
    ) -> None:
        await storage.save_topic(sample_topic_dto)

        updated = await learning.update_decay_states()

        topic = await learning.get_topic("topic123")
        assert updated == 1
        # last reviewed 5 days ago -> 4 penalized days
        assert topic.integrity_percent == 92
        assert topic.decay_state == DecayState.DUE

    @pytest.mark.asyncio
    async def test_refresh_is_stable(
        self,
        learning: LearningService,
        storage: InMemoryStorage,
        sample_topic_dto: StudyTopicDTO,
    ) -> None:
        await storage.save_topic(sample_topic_dto)

        await learning.update_decay_states()

        assert await learning.update_decay_states() == 0


class TestQueries:
    """Tests for topic queries and edits."""

    @pytest.mark.asyncio
    async def test_review_queue_order(
        self,
        learning: LearningService,
        storage: InMemoryStorage,
        sample_topic_dto: StudyTopicDTO,
    ) -> None:
        def variant(topic_id: str, **update: object) -> StudyTopicDTO:
            return sample_topic_dto.model_copy(update={"topic_id": topic_id, **update})

        await storage.save_topic(variant("low-old", priority=TopicPriority.LOW,
                                         next_review_at=NOW - 3 * DAY_MS))
        await storage.save_topic(variant("high-new", priority=TopicPriority.HIGH,
                                         next_review_at=NOW))
        await storage.save_topic(variant("high-old", priority=TopicPriority.HIGH,
                                         next_review_at=NOW - DAY_MS))
        await storage.save_topic(variant("future", next_review_at=NOW + 1))
        await storage.save_topic(variant("mastered", level=6, is_mastered=True))

        queue = await learning.get_review_queue()

        assert [t.topic_id for t in queue] == ["high-old", "high-new", "low-old"]

    @pytest.mark.asyncio
    async def test_no_due_revisions_is_empty(self, learning: LearningService) -> None:
        assert await learning.get_due_revisions() == []

    @pytest.mark.asyncio
    async def test_mastery_percent_empty(self, learning: LearningService) -> None:
        assert await learning.get_mastery_percent() == 0

    @pytest.mark.asyncio
    async def test_update_topic_details(
        self,
        learning: LearningService,
        storage: InMemoryStorage,
        sample_topic_dto: StudyTopicDTO,
    ) -> None:
        await storage.save_topic(sample_topic_dto)

        updated = await learning.update_topic_details(
            "topic123", topic="Binary search trees", priority=TopicPriority.HIGH
        )

        assert updated.topic == "Binary search trees"
        assert updated.priority == TopicPriority.HIGH
        assert updated.level == sample_topic_dto.level
        assert updated.updated_at == NOW

    @pytest.mark.asyncio
    async def test_delete_topic_cascades(
        self,
        learning: LearningService,
        storage: InMemoryStorage,
    ) -> None:
        topic = await learning.add_topic("Binary search")

        await learning.delete_topic(topic.topic_id)

        assert await storage.get_topic(topic.topic_id) is None
        assert await learning.get_revisions(topic.topic_id) == []

    @pytest.mark.asyncio
    async def test_delete_unknown_topic(self, learning: LearningService) -> None:
        with pytest.raises(TopicNotFoundError):
            await learning.delete_topic("missing")
