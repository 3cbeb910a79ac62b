"""Planner service for clearhead.

This module drives planner tasks through their lifecycle and applies
the cost of avoidance: skipping a task spawns a costlier recovery task
for the next day, and undo reverses exactly that mutation.
"""

from clearhead.config import ClearHeadConfig
from clearhead.domain import task as transitions
from clearhead.domain.task import Task, task_sort_key
from clearhead.exceptions import TaskNotFoundError
from clearhead.interfaces.clock import ClockInterface
from clearhead.interfaces.storage import StorageInterface
from clearhead.logging import get_logger
from clearhead.models.task import TaskDTO, TaskStatus
from clearhead.models.timeline import TimelineEntryType
from clearhead.services.timeline_service import TimelineService
from clearhead.utils.dates import format_date, previous_calendar_day
from clearhead.utils.ids import new_id

__all__ = [
    "OPEN_STATUSES",
    "PlannerService",
]

logger = get_logger(__name__)

OPEN_STATUSES = (TaskStatus.PENDING, TaskStatus.IN_PROGRESS)


class PlannerService:
    """Task lifecycle service.

    Writes follow a fixed order: the task being transitioned, then any
    derived task, then the timeline entry.

    Example:
        planner = PlannerService(storage, clock, timeline)

        task = await planner.add_task("Write report", 30, scheduled_date="2024-01-10")
        task, recovery = await planner.skip_task(task.task_id)
        # recovery.decay_cost == 3, recovery.scheduled_date == "2024-01-11"

        await planner.undo_task(task.task_id)  # recovery task is gone again
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
            storage: Storage interface for tasks
            clock: Source of the current time
            timeline: Timeline recorder for audit entries
            config: Recovery policy, default: ClearHeadConfig()
        """
        self._storage = storage
        self._clock = clock
        self._timeline = timeline
        self._config = config or ClearHeadConfig()

    async def add_task(
        self,
        name: str,
        time_estimate_minutes: int,
        scheduled_date: str | None = None,
        priority: int | None = None,
        scheduled_time: str | None = None,
    ) -> TaskDTO:
        """Create a pending task.

        Raises:
            pydantic.ValidationError: On a negative estimate, a priority
                outside 1-3 or a malformed date/time
        """
        now = self._clock.now()
        task = TaskDTO(
            task_id=new_id(),
            name=name,
            time_estimate_minutes=time_estimate_minutes,
            scheduled_date=scheduled_date,
            scheduled_time=scheduled_time,
            priority=priority,  # type: ignore[arg-type]
            created_at=now,
            updated_at=now,
        )
        await self._storage.save_task(task)
        logger.info("task_added", task_id=task.task_id, scheduled_date=scheduled_date)
        return task

    async def get_task(self, task_id: str) -> TaskDTO:
        """Get a task.

        Raises:
            TaskNotFoundError: If the task does not exist
        """
        task = await self._storage.get_task(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def start_task(self, task_id: str) -> TaskDTO:
        """Move a pending task to in_progress."""
        current = Task.from_dto(await self.get_task(task_id))
        started = transitions.start_task(current, self._clock.now())
        if started is current:
            return current.to_dto()

        dto = started.to_dto()
        await self._storage.save_task(dto)
        logger.info("task_started", task_id=task_id)
        return dto

    async def complete_task(self, task_id: str) -> TaskDTO:
        """Complete a task and log it as a study session.

        Raises:
            TaskNotFoundError: If the task does not exist
            InvalidTransitionError: If the task was skipped
        """
        current = Task.from_dto(await self.get_task(task_id))
        now = self._clock.now()
        completed = transitions.complete_task(current, now)
        if completed is current:
            return current.to_dto()

        dto = completed.to_dto()
        await self._storage.save_task(dto)
        await self._timeline.record(
            TimelineEntryType.STUDY_SESSION,
            reference_id=task_id,
            title=dto.name,
            description="Task completed",
            was_avoided=False,
            created_at=now,
        )

        logger.info("task_completed", task_id=task_id)
        return dto

    async def skip_task(self, task_id: str) -> tuple[TaskDTO, TaskDTO | None]:
        """Skip a task.

        Unless ``recovery_on_skip`` is disabled, a recovery task is
        created with a higher decay cost, a longer estimate and top
        priority, scheduled for the next calendar day.

        Returns:
            Tuple of (skipped task, recovery task or None)

        Raises:
            TaskNotFoundError: If the task does not exist
            InvalidTransitionError: If the task was completed
        """
        current = Task.from_dto(await self.get_task(task_id))
        now = self._clock.now()
        outcome = transitions.skip_task(
            current,
            now,
            spawn_recovery=self._config.recovery_on_skip,
            decay_step=self._config.recovery_decay_step,
            time_factor=self._config.recovery_time_factor,
        )
        if not outcome.changed:
            logger.warning("task_already_skipped", task_id=task_id)
            return current.to_dto(), None

        skipped = outcome.task.to_dto()
        await self._storage.save_task(skipped)

        recovery = None
        if outcome.recovery_task is not None:
            recovery = outcome.recovery_task.to_dto()
            await self._storage.save_task(recovery)

        await self._timeline.record(
            TimelineEntryType.PLANNER_FAILURE,
            reference_id=task_id,
            title=skipped.name,
            description="Task skipped",
            was_avoided=True,
            created_at=now,
        )

        logger.info(
            "task_skipped",
            task_id=task_id,
            recovery_task_id=recovery.task_id if recovery else None,
            decay_cost=recovery.decay_cost if recovery else skipped.decay_cost,
        )
        return skipped, recovery

    async def undo_task(self, task_id: str) -> TaskDTO:
        """Return a completed or skipped task to pending.

        Undo erases the action entirely: the recovery task spawned by the
        skip is deleted and the timeline entries of both tasks are removed.
        Recovery tasks spawned by skipping that recovery task are kept.
        Undo on a task that is already pending changes nothing.

        Raises:
            TaskNotFoundError: If the task does not exist
        """
        current = Task.from_dto(await self.get_task(task_id))
        outcome = transitions.undo_task(current, self._clock.now())
        if not outcome.changed:
            return current.to_dto()

        dto = outcome.task.to_dto()
        await self._storage.save_task(dto)

        if outcome.recovery_task_id is not None:
            await self._storage.delete_task(outcome.recovery_task_id)
            await self._timeline.erase(outcome.recovery_task_id)

        await self._timeline.erase(task_id)

        logger.info(
            "task_undone",
            task_id=task_id,
            previous_status=outcome.previous_status.value,
            removed_recovery_task_id=outcome.recovery_task_id,
        )
        return dto

    async def delete_task(self, task_id: str) -> None:
        """Delete a task, leaving a trace on the timeline.

        Recovery tasks spawned from this task are kept.

        Raises:
            TaskNotFoundError: If the task does not exist
        """
        task = await self.get_task(task_id)
        await self._storage.delete_task(task_id)
        await self._timeline.mark_task_deleted(task)
        logger.info("task_deleted", task_id=task_id)

    async def get_tasks_for_date(self, date: str) -> list[TaskDTO]:
        """Get all tasks of a day in rendering order."""
        tasks = await self._storage.get_tasks_for_date(date)
        return sorted(tasks, key=task_sort_key)

    async def get_today_tasks(self) -> list[TaskDTO]:
        """Get today's open tasks, most urgent priority first."""
        today = format_date(self._clock.now())
        tasks = await self._storage.get_tasks_for_date(today)
        open_tasks = [t for t in tasks if t.status in OPEN_STATUSES]
        open_tasks.sort(key=lambda t: (t.priority is None, t.priority or 0))
        return open_tasks

    async def get_pending_tasks_for_date(self, date: str) -> list[TaskDTO]:
        """Get open, non-recovery tasks of a day."""
        tasks = await self._storage.get_tasks_for_date(date)
        pending = [t for t in tasks if t.status in OPEN_STATUSES and not t.is_recovery]
        pending.sort(key=lambda t: (t.priority is None, t.priority or 0))
        return pending

    async def count_overdue_tasks(self) -> int:
        """Count open, non-recovery tasks scheduled before today."""
        today = format_date(self._clock.now())
        tasks = await self._storage.get_tasks_before_date(today, OPEN_STATUSES)
        return sum(1 for t in tasks if not t.is_recovery)

    async def copy_pending_tasks(
        self,
        from_date: str | None = None,
        to_date: str | None = None,
    ) -> int:
        """Carry open tasks of one day over to another as fresh tasks.

        Recovery tasks are not carried over.

        Args:
            from_date: Day to copy from, default: the day before ``to_date``
            to_date: Day to copy to, default: today

        Returns:
            Number of tasks created
        """
        to_date = to_date or format_date(self._clock.now())
        from_date = from_date or previous_calendar_day(to_date)

        copied = 0
        for task in await self.get_pending_tasks_for_date(from_date):
            await self.add_task(
                task.name,
                task.time_estimate_minutes,
                scheduled_date=to_date,
                priority=task.priority,
            )
            copied += 1

        logger.info("tasks_carried_over", from_date=from_date, to_date=to_date, count=copied)
        return copied
