"""Shared test fixtures for clearhead.

This module provides pytest fixtures used across all tests.
"""

from unittest.mock import AsyncMock

import pytest

from clearhead.config import ClearHeadConfig
from clearhead.models.task import TaskDTO, TaskStatus
from clearhead.models.topic import RevisionDTO, StudyTopicDTO
from clearhead.services.learning_service import LearningService
from clearhead.services.planner_service import PlannerService
from clearhead.services.timeline_service import TimelineService
from clearhead.utils.dates import DAY_MS
from tests.mocks.fixed_clock import FixedClock
from tests.mocks.memory_storage import InMemoryStorage

# 2024-01-10T09:00:00Z
NOW = 1704877200000


# Mock fixtures
@pytest.fixture
def mock_storage() -> AsyncMock:
    """Create mock storage interface."""
    storage = AsyncMock()
    storage.get_topic.return_value = None
    storage.get_task.return_value = None
    storage.get_revision.return_value = None
    storage.get_open_revision.return_value = None
    storage.get_all_topics.return_value = []
    storage.get_tasks_for_date.return_value = []
    storage.get_tasks_before_date.return_value = []
    storage.get_timeline_entries.return_value = []
    storage.delete_timeline_entries.return_value = 0
    storage.delete_task.return_value = True
    storage.delete_topic.return_value = True
    return storage


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def config() -> ClearHeadConfig:
    return ClearHeadConfig()


@pytest.fixture
def timeline(storage: InMemoryStorage, clock: FixedClock) -> TimelineService:
    return TimelineService(storage, clock)


@pytest.fixture
def learning(
    storage: InMemoryStorage,
    clock: FixedClock,
    timeline: TimelineService,
    config: ClearHeadConfig,
) -> LearningService:
    return LearningService(storage, clock, timeline, config)


@pytest.fixture
def planner(
    storage: InMemoryStorage,
    clock: FixedClock,
    timeline: TimelineService,
    config: ClearHeadConfig,
) -> PlannerService:
    return PlannerService(storage, clock, timeline, config)


# Sample data fixtures
@pytest.fixture
def sample_topic_dto() -> StudyTopicDTO:
    """Create sample StudyTopicDTO due right now."""
    return StudyTopicDTO(
        topic_id="topic123",
        topic="Binary search",
        tags="algorithms",
        time_spent_minutes=45,
        confidence_level=60,
        level=2,
        review_count=2,
        last_reviewed_at=NOW - 5 * DAY_MS,
        next_review_at=NOW,
        created_at=NOW - 10 * DAY_MS,
        updated_at=NOW - 5 * DAY_MS,
    )


@pytest.fixture
def sample_revision_dto() -> RevisionDTO:
    """Create sample open RevisionDTO."""
    return RevisionDTO(
        revision_id="rev123",
        topic_id="topic123",
        scheduled_at=NOW,
        created_at=NOW - 5 * DAY_MS,
    )


@pytest.fixture
def sample_task_dto() -> TaskDTO:
    """Create sample pending TaskDTO for 2024-01-10."""
    return TaskDTO(
        task_id="task123",
        name="Write report",
        time_estimate_minutes=30,
        status=TaskStatus.PENDING,
        scheduled_date="2024-01-10",
        priority=2,
        created_at=NOW - DAY_MS,
        updated_at=NOW - DAY_MS,
    )
