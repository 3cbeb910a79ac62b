"""Utility functions for clearhead.

This module contains shared date and identifier helpers.
"""

from clearhead.utils.dates import (
    DAY_MS,
    add_days,
    format_date,
    next_calendar_day,
    previous_calendar_day,
    short_date_label,
)
from clearhead.utils.ids import (
    generate_recovery_task_id,
    generate_revision_id,
    generate_timeline_entry_id,
    hash_text,
    new_id,
    stable_hash,
)

__all__ = [
    "DAY_MS",
    "add_days",
    "format_date",
    "generate_recovery_task_id",
    "generate_revision_id",
    "generate_timeline_entry_id",
    "hash_text",
    "new_id",
    "next_calendar_day",
    "previous_calendar_day",
    "short_date_label",
    "stable_hash",
]
