"""Error types raised by the clearhead engines.

Only lookups of unknown ids, illegal task transitions and calls against
the wrong scheduling model are signalled. Everything else the engines
resolve by clamping.
"""

__all__ = [
    "ClearHeadError",
    "InvalidTransitionError",
    "NotFoundError",
    "RevisionNotFoundError",
    "SchedulingModelError",
    "TaskNotFoundError",
    "TopicNotFoundError",
]


class ClearHeadError(Exception):
    """Base class for clearhead errors."""


class NotFoundError(ClearHeadError, LookupError):
    """An operation referenced an entity id that does not exist."""

    entity = "entity"

    def __init__(self, entity_id: str) -> None:
        self.entity_id = entity_id
        super().__init__(f"{self.entity} not found: {entity_id}")


class TopicNotFoundError(NotFoundError):
    entity = "topic"


class RevisionNotFoundError(NotFoundError):
    entity = "revision"


class TaskNotFoundError(NotFoundError):
    entity = "task"


class InvalidTransitionError(ClearHeadError, ValueError):
    """A task was asked to move between two states that are not linked."""

    def __init__(self, task_id: str, from_status: str, action: str) -> None:
        self.task_id = task_id
        self.from_status = from_status
        self.action = action
        super().__init__(f"cannot {action} task {task_id} while it is {from_status}")


class SchedulingModelError(ClearHeadError, RuntimeError):
    """A review call does not match the configured scheduling model."""

    def __init__(self, configured: str, required: str) -> None:
        self.configured = configured
        self.required = required
        super().__init__(
            f"operation requires the '{required}' scheduling model, "
            f"but '{configured}' is configured"
        )
