"""ClearHead orchestrator.

This module provides the main entry point for the clearhead package,
wiring storage, clock and the engines behind one async context manager.
"""

from typing import Any

from clearhead.config import ClearHeadConfig
from clearhead.infra.clock import SystemClock
from clearhead.interfaces.clock import ClockInterface
from clearhead.interfaces.storage import StorageInterface
from clearhead.logging import get_logger
from clearhead.services.learning_service import LearningService
from clearhead.services.planner_service import PlannerService
from clearhead.services.timeline_service import TimelineService

__all__ = ["ClearHead"]

logger = get_logger(__name__)


class ClearHead:
    """Main orchestrator for the clearhead engines.

    Accepts a storage implementation class. Its settings are loaded from
    .env automatically; for custom implementations, set config_class = None
    and pass storage_custom_config.

    Example:
        async with ClearHead(storage_class=MongoStorageRepository) as ch:
            task = await ch.planner.add_task("Write report", 30, "2024-01-10")
            await ch.planner.skip_task(task.task_id)
            queue = await ch.learning.get_review_queue()
    """

    def __init__(
        self,
        storage_class: type[StorageInterface],
        clock: ClockInterface | None = None,
        *,
        storage_custom_config: dict[str, Any] | None = None,
        config: ClearHeadConfig | None = None,
    ) -> None:
        """Initialize ClearHead with implementation classes.

        Args:
            storage_class: Storage implementation class
            clock: Time source, default: SystemClock()
            storage_custom_config: Custom config dict if storage_class.config_class is None
            config: Engine policy, default: loaded from .env
        """
        self._config = config or ClearHeadConfig()
        self._clock = clock or SystemClock()

        self._storage_class = storage_class
        self._storage_custom_config = storage_custom_config

        self._storage: StorageInterface | None = None
        self._timeline: TimelineService | None = None
        self._learning: LearningService | None = None
        self._planner: PlannerService | None = None

        self._connected = False

    async def _instantiate_class(
        self,
        cls: type,
        custom_config: dict[str, Any] | None,
    ) -> Any:
        """Instantiate an implementation class.

        If cls.config_class is set, instantiate config (loads from .env).
        If cls.config_class is None, use custom_config dict.
        """
        config_class = getattr(cls, "config_class", None)

        if config_class is None:
            if custom_config is None:
                raise ValueError(
                    f"{cls.__name__} has config_class=None but no custom_config provided"
                )
            return await cls.from_dict(custom_config)
        return await cls.from_config(config_class())

    async def _connect(self) -> None:
        if self._connected:
            return

        self._storage = await self._instantiate_class(
            self._storage_class, self._storage_custom_config
        )

        self._timeline = TimelineService(self._storage, self._clock)
        self._learning = LearningService(
            self._storage, self._clock, self._timeline, self._config
        )
        self._planner = PlannerService(
            self._storage, self._clock, self._timeline, self._config
        )

        self._connected = True
        logger.info(
            "clearhead_connected",
            storage=self._storage_class.__name__,
            scheduling_model=self._config.scheduling_model,
        )

    async def _disconnect(self) -> None:
        if self._storage and hasattr(self._storage, "close"):
            await self._storage.close()

        self._connected = False
        logger.info("clearhead_disconnected")

    async def __aenter__(self) -> "ClearHead":
        """Async context manager entry - connects automatically."""
        await self._connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Async context manager exit - disconnects automatically."""
        await self._disconnect()

    def _ensure_connected(self) -> None:
        if not self._connected:
            raise RuntimeError("ClearHead not connected. Use 'async with ClearHead(...) as ch:'")

    @property
    def config(self) -> ClearHeadConfig:
        return self._config

    @property
    def learning(self) -> LearningService:
        """Spaced-repetition engine."""
        self._ensure_connected()
        assert self._learning is not None
        return self._learning

    @property
    def planner(self) -> PlannerService:
        """Task lifecycle engine."""
        self._ensure_connected()
        assert self._planner is not None
        return self._planner

    @property
    def timeline(self) -> TimelineService:
        """Activity log."""
        self._ensure_connected()
        assert self._timeline is not None
        return self._timeline
