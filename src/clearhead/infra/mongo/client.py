"""MongoDB client for clearhead.

This module provides an async MongoDB client wrapper using Motor.
"""

from typing import TYPE_CHECKING, Any

from clearhead.config import MongoSettings
from clearhead.logging import get_logger
from clearhead.utils.lazy_import import lazy_import

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase

__all__ = [
    "MongoClient",
]

logger = get_logger(__name__)

get_async_motor = lazy_import("motor.motor_asyncio", "AsyncIOMotorClient")


class MongoClient:
    """Async MongoDB client wrapper.

    Owns the Motor connection and hands out the four clearhead
    collections, honoring the configured collection prefix.

    Example:
        async with MongoClient(settings) as client:
            await client.create_indexes()
            await client.tasks.find_one({"task_id": task_id})
    """

    def __init__(self, settings: MongoSettings) -> None:
        """Initialize client with settings.

        Args:
            settings: MongoDB connection settings
        """
        self._settings = settings
        self._client = None
        self._db = None

    async def connect(self) -> None:
        """Open the connection and verify it with a ping."""
        if self._client is not None:
            return
        AsyncIOMotorClient = get_async_motor()  # noqa: N806

        self._client = AsyncIOMotorClient(self._settings.uri.get_secret_value())
        self._db = self._client[self._settings.database]

        await self._client.admin.command("ping")
        logger.info("connected_to_mongodb", database=self._settings.database)

    async def disconnect(self) -> None:
        """Close the connection."""
        if self._client:
            self._client.close()
            self._client = None
            self._db = None
            logger.info("disconnected_from_mongodb")

    @property
    def db(self) -> "AsyncIOMotorDatabase[dict[str, Any]]":
        """Get database instance.

        Raises:
            RuntimeError: If not connected
        """
        if self._db is None:
            raise RuntimeError("MongoClient not connected. Call connect() first.")
        return self._db

    def _collection(self, name: str) -> "AsyncIOMotorCollection[dict[str, Any]]":
        return self.db[f"{self._settings.collection_prefix}{name}"]

    @property
    def topics(self) -> "AsyncIOMotorCollection[dict[str, Any]]":
        return self._collection("study_topics")

    @property
    def revisions(self) -> "AsyncIOMotorCollection[dict[str, Any]]":
        return self._collection("revisions")

    @property
    def tasks(self) -> "AsyncIOMotorCollection[dict[str, Any]]":
        return self._collection("tasks")

    @property
    def timeline(self) -> "AsyncIOMotorCollection[dict[str, Any]]":
        return self._collection("timeline_entries")

    async def create_indexes(self) -> None:
        """Create the lookup indexes every query relies on."""
        await self.topics.create_index("topic_id", unique=True)
        await self.topics.create_index("next_review_at")

        await self.revisions.create_index("revision_id", unique=True)
        await self.revisions.create_index([("topic_id", 1), ("scheduled_at", 1)])
        await self.revisions.create_index("completed_at")

        await self.tasks.create_index("task_id", unique=True)
        await self.tasks.create_index([("scheduled_date", 1), ("status", 1)])
        await self.tasks.create_index("original_task_id")

        await self.timeline.create_index("entry_id", unique=True)
        await self.timeline.create_index("reference_id")
        await self.timeline.create_index("created_at")

        logger.info("created_mongodb_indexes")

    async def __aenter__(self) -> "MongoClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.disconnect()
