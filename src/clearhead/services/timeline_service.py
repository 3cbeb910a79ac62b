"""Timeline recording service for clearhead.

The timeline is the audit trail of the engines. Entries are appended on
transitions, erased when a transition is undone, and rewritten when the
entity they describe is deleted.
"""

from clearhead.interfaces.clock import ClockInterface
from clearhead.interfaces.storage import StorageInterface
from clearhead.logging import get_logger
from clearhead.models.task import TaskDTO
from clearhead.models.timeline import TimelineEntryDTO, TimelineEntryType
from clearhead.utils.dates import short_date_label
from clearhead.utils.ids import generate_timeline_entry_id

__all__ = [
    "TimelineService",
]

logger = get_logger(__name__)


class TimelineService:
    """Append-only activity log writer.

    Example:
        timeline = TimelineService(storage, clock)
        await timeline.record(
            TimelineEntryType.PLANNER_FAILURE,
            reference_id=task.task_id,
            title=task.name,
            description="Task skipped",
            was_avoided=True,
        )
    """

    def __init__(self, storage: StorageInterface, clock: ClockInterface) -> None:
        """Initialize service with dependencies.

        Args:
            storage: Storage interface for timeline entries
            clock: Source of the current time
        """
        self._storage = storage
        self._clock = clock

    async def record(
        self,
        entry_type: TimelineEntryType,
        reference_id: str | None,
        title: str,
        description: str = "",
        was_avoided: bool = False,
        created_at: int | None = None,
    ) -> TimelineEntryDTO:
        """Append one entry to the timeline.

        Args:
            entry_type: Kind of activity
            reference_id: Entity the entry is about
            title: Short title
            description: Detail text
            was_avoided: Whether the entry records an avoidance
            created_at: Entry time (epoch ms), default: now

        Returns:
            The appended entry
        """
        timestamp = created_at if created_at is not None else self._clock.now()
        entry = TimelineEntryDTO(
            entry_id=generate_timeline_entry_id(entry_type, reference_id, timestamp),
            entry_type=entry_type,
            reference_id=reference_id,
            title=title,
            description=description,
            was_avoided=was_avoided,
            created_at=timestamp,
        )
        await self._storage.append_timeline_entry(entry)
        logger.debug(
            "timeline_entry_recorded",
            entry_type=entry_type.value,
            reference_id=reference_id,
            was_avoided=was_avoided,
        )
        return entry

    async def erase(self, reference_id: str) -> int:
        """Remove every entry about an entity, as if it never happened."""
        removed = await self._storage.delete_timeline_entries(reference_id)
        logger.debug("timeline_entries_erased", reference_id=reference_id, removed=removed)
        return removed

    async def mark_task_deleted(self, task: TaskDTO) -> list[TimelineEntryDTO]:
        """Leave an audit trace for a deleted task.

        Existing entries for the task are rewritten in place with a
        "(deleted <date>)" title. If the task never produced an entry,
        a planner_failure entry is created instead.

        Args:
            task: The task that was deleted

        Returns:
            The rewritten or created entries
        """
        now = self._clock.now()
        title = f"{task.name} (deleted {short_date_label(now)})"

        existing = await self._storage.get_timeline_entries(task.task_id)
        if not existing:
            entry = await self.record(
                TimelineEntryType.PLANNER_FAILURE,
                reference_id=task.task_id,
                title=title,
                description="Task deleted",
                was_avoided=True,
                created_at=now,
            )
            return [entry]

        rewritten = []
        for entry in existing:
            updated = entry.model_copy(
                update={
                    "title": title,
                    "description": "Task was deleted",
                    "was_avoided": True,
                }
            )
            await self._storage.update_timeline_entry(updated)
            rewritten.append(updated)
        return rewritten

    async def get_recent(self, limit: int = 50) -> list[TimelineEntryDTO]:
        """Get the newest entries first."""
        return await self._storage.get_recent_timeline(limit)
