"""Internal Task entity and lifecycle transitions for clearhead.

Transitions are plain functions over a mutable Task. They only compute
the next state; persisting it and writing the audit trail is up to the
caller (see PlannerService).

    pending -> in_progress -> completed
    pending -> skipped            (spawns a recovery task)
    completed | skipped -> pending  (undo)
"""

import math
from dataclasses import dataclass, replace

from clearhead.exceptions import InvalidTransitionError
from clearhead.models.task import TaskDTO, TaskStatus
from clearhead.utils.dates import format_date, next_calendar_day
from clearhead.utils.ids import generate_recovery_task_id

__all__ = [
    "SkipOutcome",
    "Task",
    "UndoOutcome",
    "build_recovery_task",
    "complete_task",
    "skip_task",
    "start_task",
    "task_sort_key",
    "undo_task",
]

RECOVERY_PRIORITY = 1


@dataclass
class Task:
    """Internal Task entity.

    Mutable working copy of a TaskDTO used while applying a transition.
    """

    task_id: str
    name: str
    time_estimate_minutes: int
    created_at: int
    updated_at: int
    decay_cost: int = 1
    is_recovery: bool = False
    original_task_id: str | None = None
    status: TaskStatus = TaskStatus.PENDING
    scheduled_date: str | None = None
    scheduled_time: str | None = None
    priority: int | None = None
    completed_at: int | None = None
    skipped_at: int | None = None

    def to_dto(self) -> TaskDTO:
        """Convert to immutable DTO for persistence."""
        return TaskDTO(
            task_id=self.task_id,
            name=self.name,
            time_estimate_minutes=self.time_estimate_minutes,
            decay_cost=self.decay_cost,
            is_recovery=self.is_recovery,
            original_task_id=self.original_task_id,
            status=self.status,
            scheduled_date=self.scheduled_date,
            scheduled_time=self.scheduled_time,
            priority=self.priority,  # type: ignore[arg-type]
            completed_at=self.completed_at,
            skipped_at=self.skipped_at,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_dto(cls, dto: TaskDTO) -> "Task":
        """Create from DTO."""
        return cls(
            task_id=dto.task_id,
            name=dto.name,
            time_estimate_minutes=dto.time_estimate_minutes,
            decay_cost=dto.decay_cost,
            is_recovery=dto.is_recovery,
            original_task_id=dto.original_task_id,
            status=dto.status,
            scheduled_date=dto.scheduled_date,
            scheduled_time=dto.scheduled_time,
            priority=dto.priority,
            completed_at=dto.completed_at,
            skipped_at=dto.skipped_at,
            created_at=dto.created_at,
            updated_at=dto.updated_at,
        )


@dataclass(frozen=True)
class SkipOutcome:
    """Skipped task plus the recovery task it spawned, if any."""

    task: Task
    recovery_task: Task | None = None
    changed: bool = True


@dataclass(frozen=True)
class UndoOutcome:
    """Task back in pending plus the recovery task id to remove, if any."""

    task: Task
    previous_status: TaskStatus
    recovery_task_id: str | None = None

    @property
    def changed(self) -> bool:
        return self.previous_status != self.task.status


def start_task(task: Task, now: int) -> Task:
    """pending -> in_progress."""
    if task.status == TaskStatus.IN_PROGRESS:
        return task
    if task.status != TaskStatus.PENDING:
        raise InvalidTransitionError(task.task_id, task.status, "start")
    return replace(task, status=TaskStatus.IN_PROGRESS, updated_at=now)


def complete_task(task: Task, now: int) -> Task:
    """pending | in_progress -> completed."""
    if task.status == TaskStatus.COMPLETED:
        return task
    if task.status == TaskStatus.SKIPPED:
        raise InvalidTransitionError(task.task_id, task.status, "complete")
    return replace(task, status=TaskStatus.COMPLETED, completed_at=now, updated_at=now)


def build_recovery_task(
    task: Task,
    now: int,
    decay_step: int = 2,
    time_factor: float = 1.25,
) -> Task:
    """Build the recovery task that replaces a skipped one.

    The recovery task costs more (``decay_cost + decay_step``), takes
    longer (estimate scaled by ``time_factor``, rounded up), jumps to
    the highest priority and moves to the next calendar day.

    Args:
        task: The task being skipped (with ``skipped_at`` set)
        now: Skip time (epoch ms)
        decay_step: Cost added per skip
        time_factor: Estimate multiplier per skip

    Returns:
        New pending recovery Task
    """
    skipped_at = task.skipped_at if task.skipped_at is not None else now
    base_date = task.scheduled_date or format_date(now)
    return Task(
        task_id=generate_recovery_task_id(task.task_id, skipped_at),
        name=task.name,
        time_estimate_minutes=math.ceil(task.time_estimate_minutes * time_factor),
        decay_cost=task.decay_cost + decay_step,
        is_recovery=True,
        original_task_id=task.task_id,
        status=TaskStatus.PENDING,
        scheduled_date=next_calendar_day(base_date),
        scheduled_time=None,
        priority=RECOVERY_PRIORITY,
        created_at=now,
        updated_at=now,
    )


def skip_task(
    task: Task,
    now: int,
    spawn_recovery: bool = True,
    decay_step: int = 2,
    time_factor: float = 1.25,
) -> SkipOutcome:
    """pending | in_progress -> skipped, spawning a recovery task.

    With ``spawn_recovery=False`` the task just stays in place, flagged
    as skipped.
    """
    if task.status == TaskStatus.SKIPPED:
        return SkipOutcome(task=task, changed=False)
    if task.status == TaskStatus.COMPLETED:
        raise InvalidTransitionError(task.task_id, task.status, "skip")

    skipped = replace(task, status=TaskStatus.SKIPPED, skipped_at=now, updated_at=now)
    recovery = None
    if spawn_recovery:
        recovery = build_recovery_task(skipped, now, decay_step, time_factor)
    return SkipOutcome(task=skipped, recovery_task=recovery)


def undo_task(task: Task, now: int) -> UndoOutcome:
    """completed | skipped -> pending.

    Undoing a skip also names the recovery task that skip spawned so the
    caller can delete it. Tasks that are pending or in progress come
    back unchanged.
    """
    if task.status not in (TaskStatus.COMPLETED, TaskStatus.SKIPPED):
        return UndoOutcome(task=task, previous_status=task.status)

    recovery_id = None
    if task.status == TaskStatus.SKIPPED and task.skipped_at is not None:
        recovery_id = generate_recovery_task_id(task.task_id, task.skipped_at)

    reverted = replace(
        task,
        status=TaskStatus.PENDING,
        completed_at=None,
        skipped_at=None,
        updated_at=now,
    )
    return UndoOutcome(task=reverted, previous_status=task.status, recovery_task_id=recovery_id)


def task_sort_key(task: TaskDTO) -> tuple:
    """Rendering order within one date.

    Timed tasks come first by start time, then priority (1 first, unset
    last), then newest first.
    """
    return (
        task.scheduled_time is None,
        task.scheduled_time or "",
        task.priority is None,
        task.priority or 0,
        -task.created_at,
    )
