"""Identifier helpers for clearhead.

User-created records get random ids. Records derived from a state
transition get deterministic SHA256 ids, so replaying the same
transition writes the same record again instead of a duplicate.
"""

import hashlib
import uuid
from typing import Any

__all__ = [
    "generate_recovery_task_id",
    "generate_revision_id",
    "generate_timeline_entry_id",
    "hash_text",
    "new_id",
    "stable_hash",
]


def new_id() -> str:
    """Generate a random identifier for a user-created record."""
    return uuid.uuid4().hex


def hash_text(text: str) -> str:
    """Generate SHA256 hash of text.

    Args:
        text: Input text to hash

    Returns:
        Hexadecimal SHA256 hash string
    """
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def stable_hash(*args: Any) -> str:
    """Hash arguments joined with a pipe separator."""
    return hash_text("|".join(str(arg) for arg in args))


def generate_recovery_task_id(original_task_id: str, skipped_at: int) -> str:
    """Generate the id of the recovery task spawned by one skip.

    The same skip (same task, same ``skipped_at``) always yields the
    same id, which lets undo find exactly the recovery task it reverses.

    Args:
        original_task_id: ID of the skipped task
        skipped_at: Skip timestamp (epoch ms)

    Returns:
        Hexadecimal SHA256 hash string
    """
    return stable_hash("recovery", original_task_id, skipped_at)


def generate_revision_id(topic_id: str, scheduled_at: int, created_at: int) -> str:
    """Generate the id of the revision one review transition schedules.

    Two reviews can schedule the same due time, so the id also carries
    the time of the transition that created the revision.

    Args:
        topic_id: Parent topic ID
        scheduled_at: When the review is due (epoch ms)
        created_at: When the scheduling transition ran (epoch ms)

    Returns:
        Hexadecimal SHA256 hash string
    """
    return stable_hash("revision", topic_id, scheduled_at, created_at)


def generate_timeline_entry_id(
    entry_type: str,
    reference_id: str | None,
    created_at: int,
) -> str:
    """Generate a timeline entry id from its type, reference and time."""
    return stable_hash("timeline", entry_type, reference_id or "", created_at)
