"""Timeline models for clearhead.

The timeline is an append-only activity log. The engines write to it
as a side effect of transitions and never read it back for decisions.
"""

from enum import StrEnum

from pydantic import BaseModel, Field

__all__ = [
    "TimelineEntryDTO",
    "TimelineEntryType",
]


class TimelineEntryType(StrEnum):
    """Kinds of activity recorded on the timeline."""

    PROBLEM = "problem"
    STUDY_SESSION = "study_session"
    MISSED_REVISION = "missed_revision"
    PLANNER_FAILURE = "planner_failure"
    THOUGHT = "thought"


class TimelineEntryDTO(BaseModel, frozen=True):
    """Single audit entry on the activity timeline.

    Attributes:
        entry_id: Deterministic entry ID
        entry_type: Kind of activity
        reference_id: ID of the task, topic or revision the entry is about
        title: Short title
        description: Human readable detail
        was_avoided: True when the entry records an avoidance
        created_at: Creation timestamp (epoch ms)
        schema_version: Schema version for forward compatibility
    """

    entry_id: str
    entry_type: TimelineEntryType
    reference_id: str | None = None
    title: str
    description: str = ""
    was_avoided: bool = False
    created_at: int = Field(description="Epoch ms")
    schema_version: int = Field(default=1)
