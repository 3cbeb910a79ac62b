"""Service layer for clearhead.

This module exports the main service entry points.
"""

from clearhead.services.learning_service import LearningService
from clearhead.services.planner_service import OPEN_STATUSES, PlannerService
from clearhead.services.timeline_service import TimelineService

__all__ = [
    "OPEN_STATUSES",
    "LearningService",
    "PlannerService",
    "TimelineService",
]
