"""Storage interface for clearhead.

This module defines the Protocol for persistent storage operations.
The engines call these as opaque effects; the storage technology is
up to the implementation.
"""

from collections.abc import Iterable
from typing import ClassVar, Protocol, runtime_checkable

from clearhead.models.task import TaskDTO, TaskStatus
from clearhead.models.timeline import TimelineEntryDTO
from clearhead.models.topic import RevisionDTO, StudyTopicDTO

__all__ = [
    "StorageInterface",
]


@runtime_checkable
class StorageInterface(Protocol):
    """Contract for persistent storage operations.

    Implementations should provide CRUD operations for study topics,
    revisions, planner tasks and timeline entries. Saves are upserts
    keyed on the entity id.
    """

    config_class: ClassVar[type | None] = None

    # Topic operations
    async def save_topic(self, topic: StudyTopicDTO) -> str:
        """Save or update a topic.

        Args:
            topic: Topic data to save

        Returns:
            Topic ID
        """
        ...

    async def get_topic(self, topic_id: str) -> StudyTopicDTO | None:
        """Get a topic by ID.

        Args:
            topic_id: Topic ID to retrieve

        Returns:
            StudyTopicDTO if found, None otherwise
        """
        ...

    async def get_all_topics(self) -> list[StudyTopicDTO]:
        """Get all topics, ordered by next review time (unscheduled last)."""
        ...

    async def delete_topic(self, topic_id: str) -> bool:
        """Delete a topic and every revision that belongs to it.

        Args:
            topic_id: Topic ID to delete

        Returns:
            True if the topic existed
        """
        ...

    # Revision operations
    async def append_revision(self, revision: RevisionDTO) -> str:
        """Append a newly scheduled revision.

        Args:
            revision: Revision to append

        Returns:
            Revision ID
        """
        ...

    async def save_revision(self, revision: RevisionDTO) -> None:
        """Persist the completion or missed flag of an existing revision.

        Args:
            revision: Updated revision
        """
        ...

    async def get_revision(self, revision_id: str) -> RevisionDTO | None:
        """Get a revision by ID."""
        ...

    async def get_open_revision(self, topic_id: str) -> RevisionDTO | None:
        """Get the earliest uncompleted revision of a topic.

        Args:
            topic_id: Topic ID to query

        Returns:
            RevisionDTO if the topic has an open revision, None otherwise
        """
        ...

    async def get_revisions_for_topic(self, topic_id: str) -> list[RevisionDTO]:
        """Get a topic's revision history, most recently scheduled first."""
        ...

    async def get_due_revisions(self, before: int) -> list[RevisionDTO]:
        """Get uncompleted revisions scheduled at or before ``before``.

        Args:
            before: Cut-off timestamp (epoch ms), inclusive

        Returns:
            Revisions ordered by scheduled time
        """
        ...

    # Task operations
    async def save_task(self, task: TaskDTO) -> str:
        """Save or update a task.

        Args:
            task: Task data to save

        Returns:
            Task ID
        """
        ...

    async def get_task(self, task_id: str) -> TaskDTO | None:
        """Get a task by ID."""
        ...

    async def delete_task(self, task_id: str) -> bool:
        """Delete a single task. Never cascades to recovery tasks.

        Returns:
            True if the task existed
        """
        ...

    async def get_tasks_for_date(self, date: str) -> list[TaskDTO]:
        """Get every task scheduled on a calendar date (YYYY-MM-DD)."""
        ...

    async def get_tasks_before_date(
        self,
        date: str,
        statuses: Iterable[TaskStatus],
    ) -> list[TaskDTO]:
        """Get tasks scheduled strictly before ``date`` with one of ``statuses``."""
        ...

    # Timeline operations
    async def append_timeline_entry(self, entry: TimelineEntryDTO) -> str:
        """Append a timeline entry.

        Returns:
            Entry ID
        """
        ...

    async def get_timeline_entries(self, reference_id: str) -> list[TimelineEntryDTO]:
        """Get all timeline entries that reference an entity."""
        ...

    async def update_timeline_entry(self, entry: TimelineEntryDTO) -> None:
        """Rewrite an existing timeline entry in place."""
        ...

    async def delete_timeline_entries(self, reference_id: str) -> int:
        """Delete all timeline entries that reference an entity.

        Returns:
            Number of entries deleted
        """
        ...

    async def get_recent_timeline(self, limit: int = 50) -> list[TimelineEntryDTO]:
        """Get the newest timeline entries first."""
        ...
