"""Public DTO models for clearhead.

This module exports all public data transfer objects.
"""

from clearhead.models.task import TaskDTO, TaskStatus
from clearhead.models.timeline import TimelineEntryDTO, TimelineEntryType
from clearhead.models.topic import (
    DecayState,
    ReviewFeedback,
    RevisionDTO,
    StudyTopicDTO,
    TopicPriority,
)

__all__ = [
    "DecayState",
    "ReviewFeedback",
    "RevisionDTO",
    "StudyTopicDTO",
    "TaskDTO",
    "TaskStatus",
    "TimelineEntryDTO",
    "TimelineEntryType",
    "TopicPriority",
]
