"""clearhead - Self-discipline tracking core.

This package provides:
- A level-based spaced-repetition scheduler with decay tracking
- A planner task lifecycle where skipping a task costs more the next day
- An append-only activity timeline written by both engines

Example usage:
    from clearhead import ClearHead, MongoStorageRepository, ReviewFeedback

    # Config loaded from .env automatically
    async with ClearHead(storage_class=MongoStorageRepository) as ch:
        topic = await ch.learning.add_topic("Binary search", confidence=60)
        await ch.learning.review_topic(topic.topic_id, ReviewFeedback.GOOD)

        task = await ch.planner.add_task("Write report", 30, "2024-01-10")
        task, recovery = await ch.planner.skip_task(task.task_id)
"""

__version__ = "0.1.0"

from clearhead.config import ClearHeadConfig, LogSettings, MongoSettings
from clearhead.exceptions import (
    ClearHeadError,
    InvalidTransitionError,
    NotFoundError,
    RevisionNotFoundError,
    SchedulingModelError,
    TaskNotFoundError,
    TopicNotFoundError,
)
from clearhead.infra.clock import SystemClock
from clearhead.infra.mongo.repositories import MongoStorageRepository
from clearhead.interfaces.clock import ClockInterface
from clearhead.interfaces.storage import StorageInterface
from clearhead.models import (
    DecayState,
    ReviewFeedback,
    RevisionDTO,
    StudyTopicDTO,
    TaskDTO,
    TaskStatus,
    TimelineEntryDTO,
    TimelineEntryType,
    TopicPriority,
)
from clearhead.orchestrator import ClearHead

__all__ = [  # noqa: RUF022
    # Orchestrator
    "ClearHead",
    # Configuration
    "ClearHeadConfig",
    "LogSettings",
    "MongoSettings",
    # Implementations
    "MongoStorageRepository",
    "SystemClock",
    # Interfaces
    "ClockInterface",
    "StorageInterface",
    # Models
    "DecayState",
    "ReviewFeedback",
    "RevisionDTO",
    "StudyTopicDTO",
    "TaskDTO",
    "TaskStatus",
    "TimelineEntryDTO",
    "TimelineEntryType",
    "TopicPriority",
    # Errors
    "ClearHeadError",
    "InvalidTransitionError",
    "NotFoundError",
    "RevisionNotFoundError",
    "SchedulingModelError",
    "TaskNotFoundError",
    "TopicNotFoundError",
]
