"""Planner task models for clearhead."""

from enum import StrEnum
from typing import Literal, Self

from pydantic import BaseModel, Field, model_validator

__all__ = [
    "TaskDTO",
    "TaskStatus",
]


class TaskStatus(StrEnum):
    """Lifecycle states of a planner task."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    SKIPPED = "skipped"


class TaskDTO(BaseModel, frozen=True):
    """Public planner task data transfer object.

    A recovery task is spawned when a task is skipped. It points back
    at the skipped task through ``original_task_id``, a plain lookup
    field with no ownership.

    Attributes:
        task_id: Opaque task ID
        name: Task name
        time_estimate_minutes: Estimated effort in minutes
        decay_cost: Accumulated cost of avoidance (starts at 1)
        is_recovery: True for tasks spawned by a skip
        original_task_id: ID of the skipped task a recovery task replaces
        status: Lifecycle state
        scheduled_date: Planned day (YYYY-MM-DD)
        scheduled_time: Planned start time (HH:MM)
        priority: 1 (most urgent) to 3, or None
        completed_at: Completion timestamp (epoch ms)
        skipped_at: Skip timestamp (epoch ms)
        created_at: Creation timestamp (epoch ms)
        updated_at: Last mutation timestamp (epoch ms)
        schema_version: Schema version for forward compatibility
    """

    task_id: str
    name: str = Field(min_length=1)
    time_estimate_minutes: int = Field(ge=0)
    decay_cost: int = Field(default=1, ge=1)
    is_recovery: bool = False
    original_task_id: str | None = None
    status: TaskStatus = TaskStatus.PENDING
    scheduled_date: str | None = Field(
        default=None, pattern=r"^\d{4}-\d{2}-\d{2}$", description="YYYY-MM-DD"
    )
    scheduled_time: str | None = Field(
        default=None, pattern=r"^\d{2}:\d{2}$", description="HH:MM"
    )
    priority: Literal[1, 2, 3] | None = None
    completed_at: int | None = Field(default=None, description="Epoch ms")
    skipped_at: int | None = Field(default=None, description="Epoch ms")
    created_at: int = Field(description="Epoch ms")
    updated_at: int = Field(description="Epoch ms")
    schema_version: int = Field(default=1)

    @model_validator(mode="after")
    def _recovery_has_origin(self) -> Self:
        if self.is_recovery and self.original_task_id is None:
            raise ValueError("recovery task requires original_task_id")
        return self
