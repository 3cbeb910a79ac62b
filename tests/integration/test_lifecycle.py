"""Integration tests running both engines over the Mongo repository."""

from typing import Self

import pytest

from clearhead.config import ClearHeadConfig
from clearhead.infra.mongo.repositories import MongoStorageRepository
from clearhead.models.task import TaskStatus
from clearhead.models.timeline import TimelineEntryType
from clearhead.models.topic import DecayState, ReviewFeedback
from clearhead.orchestrator import ClearHead
from clearhead.utils.dates import DAY_MS
from tests.conftest import NOW
from tests.mocks.fixed_clock import FixedClock
from tests.mocks.mock_mongo import MockMongoClient


class MockBackedRepository(MongoStorageRepository):
    """MongoStorageRepository wired to an in-process mock client."""

    config_class = None

    @classmethod
    async def from_dict(cls, config: dict) -> Self:  # type: ignore[type-arg]
        client = MockMongoClient()
        await client.connect()
        instance = cls(client)  # type: ignore[arg-type]
        instance._owns_client = True
        return instance


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


def clearhead(clock: FixedClock, **config: object) -> ClearHead:
    return ClearHead(
        storage_class=MockBackedRepository,
        clock=clock,
        storage_custom_config={},
        config=ClearHeadConfig(**config),  # type: ignore[arg-type]
    )


class TestPlannerLifecycle:
    """Skip, recovery and undo across the full stack."""

    @pytest.mark.asyncio
    async def test_skip_spawns_next_day_recovery(self, clock: FixedClock) -> None:
        async with clearhead(clock) as ch:
            task = await ch.planner.add_task("Write report", 30, scheduled_date="2024-01-10")

            _, recovery = await ch.planner.skip_task(task.task_id)

            assert recovery is not None
            assert recovery.decay_cost == 3
            assert recovery.time_estimate_minutes == 38
            assert recovery.priority == 1
            assert recovery.scheduled_date == "2024-01-11"
            assert recovery.is_recovery is True

            clock.advance(days=1)
            (today,) = await ch.planner.get_today_tasks()
            assert today.task_id == recovery.task_id

    @pytest.mark.asyncio
    async def test_decay_cost_escalates(self, clock: FixedClock) -> None:
        async with clearhead(clock) as ch:
            task = await ch.planner.add_task("Write report", 30, scheduled_date="2024-01-10")

            _, first = await ch.planner.skip_task(task.task_id)
            assert first is not None
            clock.advance(days=1)
            _, second = await ch.planner.skip_task(first.task_id)

            assert second is not None
            assert second.decay_cost == task.decay_cost + 4
            assert second.original_task_id == first.task_id
            assert second.scheduled_date == "2024-01-12"

    @pytest.mark.asyncio
    async def test_skip_undo_round_trip(self, clock: FixedClock) -> None:
        async with clearhead(clock) as ch:
            task = await ch.planner.add_task("Write report", 30, scheduled_date="2024-01-10")
            clock.advance(ms=1)

            _, recovery = await ch.planner.skip_task(task.task_id)
            assert recovery is not None
            clock.advance(ms=1)
            restored = await ch.planner.undo_task(task.task_id)

            assert restored.status == TaskStatus.PENDING
            assert restored.skipped_at is None
            assert restored.model_dump(exclude={"updated_at"}) == task.model_dump(
                exclude={"updated_at"}
            )
            assert await ch.planner.get_tasks_for_date("2024-01-11") == []
            assert await ch.timeline.get_recent() == []

    @pytest.mark.asyncio
    async def test_delete_after_skip_keeps_trace(self, clock: FixedClock) -> None:
        async with clearhead(clock) as ch:
            task = await ch.planner.add_task("Write report", 30, scheduled_date="2024-01-10")
            await ch.planner.skip_task(task.task_id)

            await ch.planner.delete_task(task.task_id)

            (entry,) = await ch.timeline.get_recent()
            assert entry.title == "Write report (deleted Jan 10)"
            assert entry.was_avoided is True
            assert len(await ch.planner.get_tasks_for_date("2024-01-11")) == 1


class TestLearningLifecycle:
    """Reviews, misses and neglect across the full stack."""

    @pytest.mark.asyncio
    async def test_levels_climb_to_mastery(self, clock: FixedClock) -> None:
        async with clearhead(clock) as ch:
            topic = await ch.learning.add_topic("Binary search", confidence=70)

            for expected_level in range(1, 6):
                clock.set(topic.next_review_at)  # type: ignore[arg-type]
                topic = await ch.learning.review_topic(topic.topic_id, ReviewFeedback.EASY)
                assert topic.level == expected_level

            assert topic.is_mastered is True
            assert topic.next_review_at == clock.now() + 50 * DAY_MS
            assert await ch.learning.get_review_queue() == []

            history = await ch.learning.get_revisions(topic.topic_id)
            assert len(history) == 6
            assert sum(1 for r in history if r.is_open) == 1

    @pytest.mark.asyncio
    async def test_missed_then_neglected_then_reviewed(self, clock: FixedClock) -> None:
        async with clearhead(clock) as ch:
            topic = await ch.learning.add_topic("Graphs")
            clock.advance(days=1)

            (revision,) = await ch.learning.get_due_revisions()
            missed = await ch.learning.mark_revision_missed(revision.revision_id)
            assert missed.integrity_percent == 85
            assert missed.decay_state == DecayState.DUE

            clock.advance(days=5)
            assert await ch.learning.update_decay_states() == 1
            neglected = await ch.learning.get_topic(topic.topic_id)
            # six days since the last review: 100 - 5 * 2 = 90, capped by 85
            assert neglected.integrity_percent == 85
            assert neglected.decay_state == DecayState.CRITICAL

            reviewed = await ch.learning.review_topic(topic.topic_id, ReviewFeedback.HARD)
            assert reviewed.integrity_percent == 100
            assert reviewed.decay_state == DecayState.FRESH

            kinds = [e.entry_type for e in await ch.timeline.get_recent()]
            assert kinds == [TimelineEntryType.MISSED_REVISION, TimelineEntryType.STUDY_SESSION]

    @pytest.mark.asyncio
    async def test_confidence_model_end_to_end(self, clock: FixedClock) -> None:
        async with clearhead(clock, scheduling_model="confidence") as ch:
            topic = await ch.learning.add_topic("Tries", confidence=30)
            assert topic.next_review_at == NOW + DAY_MS

            clock.advance(days=1)
            (revision,) = await ch.learning.get_due_revisions()
            updated = await ch.learning.complete_revision(revision.revision_id, 40)

            # review 1 -> 3 day base, x0.9 -> 3 days
            assert updated.next_review_at == clock.now() + 3 * DAY_MS
            assert await ch.learning.get_due_revisions() == []
