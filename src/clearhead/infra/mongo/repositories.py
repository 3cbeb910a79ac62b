"""MongoDB repositories for clearhead.

This module provides the MongoDB implementation of StorageInterface.
"""

from collections.abc import Iterable
from typing import Any, Self

from clearhead.config import MongoSettings
from clearhead.infra.mongo.client import MongoClient
from clearhead.interfaces.storage import StorageInterface
from clearhead.logging import get_logger
from clearhead.models.task import TaskDTO, TaskStatus
from clearhead.models.timeline import TimelineEntryDTO, TimelineEntryType
from clearhead.models.topic import (
    DecayState,
    RevisionDTO,
    StudyTopicDTO,
    TopicPriority,
)

__all__ = [
    "MongoStorageRepository",
]

logger = get_logger(__name__)


class MongoStorageRepository(StorageInterface):
    """MongoDB implementation of StorageInterface.

    Every write is an upsert keyed on the entity id, so replaying a
    write after a partial failure leaves a single document.
    """

    config_class = MongoSettings

    def __init__(self, client: MongoClient) -> None:
        """Initialize repository with MongoDB client.

        Args:
            client: Connected MongoClient instance
        """
        self._client = client
        self._owns_client = False

    @classmethod
    async def from_config(cls, config: MongoSettings) -> Self:
        """Factory method for ClearHead instantiation.

        Creates a MongoClient, connects, creates indexes, and returns repository.

        Args:
            config: MongoDB settings

        Returns:
            Connected MongoStorageRepository instance
        """
        client = MongoClient(config)
        await client.connect()
        await client.create_indexes()

        instance = cls(client)
        instance._owns_client = True
        return instance

    @classmethod
    async def from_dict(cls, config: dict[str, Any]) -> Self:
        """Factory method for custom config dict.

        Args:
            config: Dictionary with MongoDB settings

        Returns:
            Connected MongoStorageRepository instance
        """
        return await cls.from_config(MongoSettings(**config))

    async def close(self) -> None:
        """Close owned resources."""
        if self._owns_client and self._client:
            await self._client.disconnect()

    # Topic operations
    async def save_topic(self, topic: StudyTopicDTO) -> str:
        await self._client.topics.replace_one(
            {"topic_id": topic.topic_id},
            self._topic_to_doc(topic),
            upsert=True,
        )
        return topic.topic_id

    async def get_topic(self, topic_id: str) -> StudyTopicDTO | None:
        doc = await self._client.topics.find_one({"topic_id": topic_id})
        return self._doc_to_topic(doc) if doc else None

    async def get_all_topics(self) -> list[StudyTopicDTO]:
        """Get all topics, unscheduled ones last."""
        cursor = self._client.topics.find()
        topics = [self._doc_to_topic(doc) async for doc in cursor]
        # Mongo sorts nulls first
        topics.sort(key=lambda t: (t.next_review_at is None, t.next_review_at or 0))
        return topics

    async def delete_topic(self, topic_id: str) -> bool:
        result = await self._client.topics.delete_one({"topic_id": topic_id})
        if result.deleted_count == 0:
            return False

        removed = await self._client.revisions.delete_many({"topic_id": topic_id})
        logger.debug(
            "topic_revisions_deleted",
            topic_id=topic_id,
            count=removed.deleted_count,
        )
        return True

    # Revision operations
    async def append_revision(self, revision: RevisionDTO) -> str:
        """Append a scheduled revision.

        Revision ids are derived from (topic, due time), so appending the
        same revision twice keeps one document.
        """
        await self._client.revisions.replace_one(
            {"revision_id": revision.revision_id},
            self._revision_to_doc(revision),
            upsert=True,
        )
        return revision.revision_id

    async def save_revision(self, revision: RevisionDTO) -> None:
        await self._client.revisions.replace_one(
            {"revision_id": revision.revision_id},
            self._revision_to_doc(revision),
            upsert=True,
        )

    async def get_revision(self, revision_id: str) -> RevisionDTO | None:
        doc = await self._client.revisions.find_one({"revision_id": revision_id})
        return self._doc_to_revision(doc) if doc else None

    async def get_open_revision(self, topic_id: str) -> RevisionDTO | None:
        cursor = (
            self._client.revisions.find({"topic_id": topic_id, "completed_at": None})
            .sort("scheduled_at", 1)
            .limit(1)
        )
        async for doc in cursor:
            return self._doc_to_revision(doc)
        return None

    async def get_revisions_for_topic(self, topic_id: str) -> list[RevisionDTO]:
        cursor = self._client.revisions.find({"topic_id": topic_id}).sort("scheduled_at", -1)
        return [self._doc_to_revision(doc) async for doc in cursor]

    async def get_due_revisions(self, before: int) -> list[RevisionDTO]:
        cursor = self._client.revisions.find(
            {"completed_at": None, "scheduled_at": {"$lte": before}}
        ).sort("scheduled_at", 1)
        return [self._doc_to_revision(doc) async for doc in cursor]

    # Task operations
    async def save_task(self, task: TaskDTO) -> str:
        await self._client.tasks.replace_one(
            {"task_id": task.task_id},
            self._task_to_doc(task),
            upsert=True,
        )
        return task.task_id

    async def get_task(self, task_id: str) -> TaskDTO | None:
        doc = await self._client.tasks.find_one({"task_id": task_id})
        return self._doc_to_task(doc) if doc else None

    async def delete_task(self, task_id: str) -> bool:
        result = await self._client.tasks.delete_one({"task_id": task_id})
        return result.deleted_count > 0

    async def get_tasks_for_date(self, date: str) -> list[TaskDTO]:
        cursor = self._client.tasks.find({"scheduled_date": date})
        return [self._doc_to_task(doc) async for doc in cursor]

    async def get_tasks_before_date(
        self,
        date: str,
        statuses: Iterable[TaskStatus],
    ) -> list[TaskDTO]:
        cursor = self._client.tasks.find(
            {
                "scheduled_date": {"$lt": date},
                "status": {"$in": [TaskStatus(s).value for s in statuses]},
            }
        ).sort("scheduled_date", 1)
        return [self._doc_to_task(doc) async for doc in cursor]

    # Timeline operations
    async def append_timeline_entry(self, entry: TimelineEntryDTO) -> str:
        await self._client.timeline.replace_one(
            {"entry_id": entry.entry_id},
            self._entry_to_doc(entry),
            upsert=True,
        )
        return entry.entry_id

    async def get_timeline_entries(self, reference_id: str) -> list[TimelineEntryDTO]:
        cursor = self._client.timeline.find({"reference_id": reference_id}).sort(
            "created_at", 1
        )
        return [self._doc_to_entry(doc) async for doc in cursor]

    async def update_timeline_entry(self, entry: TimelineEntryDTO) -> None:
        await self._client.timeline.replace_one(
            {"entry_id": entry.entry_id},
            self._entry_to_doc(entry),
        )

    async def delete_timeline_entries(self, reference_id: str) -> int:
        result = await self._client.timeline.delete_many({"reference_id": reference_id})
        return result.deleted_count

    async def get_recent_timeline(self, limit: int = 50) -> list[TimelineEntryDTO]:
        cursor = self._client.timeline.find().sort("created_at", -1).limit(limit)
        return [self._doc_to_entry(doc) async for doc in cursor]

    # Document conversion helpers
    @staticmethod
    def _topic_to_doc(topic: StudyTopicDTO) -> dict[str, Any]:
        return {
            "topic_id": topic.topic_id,
            "topic": topic.topic,
            "tags": topic.tags,
            "time_spent_minutes": topic.time_spent_minutes,
            "confidence_level": topic.confidence_level,
            "integrity_percent": topic.integrity_percent,
            "level": topic.level,
            "review_count": topic.review_count,
            "decay_state": topic.decay_state.value,
            "is_mastered": topic.is_mastered,
            "priority": topic.priority.value,
            "last_reviewed_at": topic.last_reviewed_at,
            "next_review_at": topic.next_review_at,
            "created_at": topic.created_at,
            "updated_at": topic.updated_at,
            "schema_version": topic.schema_version,
        }

    @staticmethod
    def _doc_to_topic(doc: dict[str, Any]) -> StudyTopicDTO:
        return StudyTopicDTO(
            topic_id=doc["topic_id"],
            topic=doc["topic"],
            tags=doc.get("tags", ""),
            time_spent_minutes=doc.get("time_spent_minutes", 0),
            confidence_level=doc.get("confidence_level", 50),
            integrity_percent=doc.get("integrity_percent", 100),
            level=doc.get("level", 0),
            review_count=doc.get("review_count", 0),
            decay_state=DecayState(doc.get("decay_state", DecayState.FRESH)),
            is_mastered=doc.get("is_mastered", False),
            priority=TopicPriority(doc.get("priority", TopicPriority.MEDIUM)),
            last_reviewed_at=doc.get("last_reviewed_at"),
            next_review_at=doc.get("next_review_at"),
            created_at=doc["created_at"],
            updated_at=doc.get("updated_at", doc["created_at"]),
            schema_version=doc.get("schema_version", 1),
        )

    @staticmethod
    def _revision_to_doc(revision: RevisionDTO) -> dict[str, Any]:
        return {
            "revision_id": revision.revision_id,
            "topic_id": revision.topic_id,
            "scheduled_at": revision.scheduled_at,
            "completed_at": revision.completed_at,
            "was_missed": revision.was_missed,
            "confidence_before": revision.confidence_before,
            "confidence_after": revision.confidence_after,
            "created_at": revision.created_at,
            "schema_version": revision.schema_version,
        }

    @staticmethod
    def _doc_to_revision(doc: dict[str, Any]) -> RevisionDTO:
        return RevisionDTO(
            revision_id=doc["revision_id"],
            topic_id=doc["topic_id"],
            scheduled_at=doc["scheduled_at"],
            completed_at=doc.get("completed_at"),
            was_missed=doc.get("was_missed", False),
            confidence_before=doc.get("confidence_before"),
            confidence_after=doc.get("confidence_after"),
            created_at=doc["created_at"],
            schema_version=doc.get("schema_version", 1),
        )

    @staticmethod
    def _task_to_doc(task: TaskDTO) -> dict[str, Any]:
        return {
            "task_id": task.task_id,
            "name": task.name,
            "time_estimate_minutes": task.time_estimate_minutes,
            "decay_cost": task.decay_cost,
            "is_recovery": task.is_recovery,
            "original_task_id": task.original_task_id,
            "status": task.status.value,
            "scheduled_date": task.scheduled_date,
            "scheduled_time": task.scheduled_time,
            "priority": task.priority,
            "completed_at": task.completed_at,
            "skipped_at": task.skipped_at,
            "created_at": task.created_at,
            "updated_at": task.updated_at,
            "schema_version": task.schema_version,
        }

    @staticmethod
    def _doc_to_task(doc: dict[str, Any]) -> TaskDTO:
        return TaskDTO(
            task_id=doc["task_id"],
            name=doc["name"],
            time_estimate_minutes=doc["time_estimate_minutes"],
            decay_cost=doc.get("decay_cost", 1),
            is_recovery=doc.get("is_recovery", False),
            original_task_id=doc.get("original_task_id"),
            status=TaskStatus(doc.get("status", TaskStatus.PENDING)),
            scheduled_date=doc.get("scheduled_date"),
            scheduled_time=doc.get("scheduled_time"),
            priority=doc.get("priority"),
            completed_at=doc.get("completed_at"),
            skipped_at=doc.get("skipped_at"),
            created_at=doc["created_at"],
            updated_at=doc.get("updated_at", doc["created_at"]),
            schema_version=doc.get("schema_version", 1),
        )

    @staticmethod
    def _entry_to_doc(entry: TimelineEntryDTO) -> dict[str, Any]:
        return {
            "entry_id": entry.entry_id,
            "entry_type": entry.entry_type.value,
            "reference_id": entry.reference_id,
            "title": entry.title,
            "description": entry.description,
            "was_avoided": entry.was_avoided,
            "created_at": entry.created_at,
            "schema_version": entry.schema_version,
        }

    @staticmethod
    def _doc_to_entry(doc: dict[str, Any]) -> TimelineEntryDTO:
        return TimelineEntryDTO(
            entry_id=doc["entry_id"],
            entry_type=TimelineEntryType(doc["entry_type"]),
            reference_id=doc.get("reference_id"),
            title=doc["title"],
            description=doc.get("description", ""),
            was_avoided=doc.get("was_avoided", False),
            created_at=doc["created_at"],
            schema_version=doc.get("schema_version", 1),
        )
