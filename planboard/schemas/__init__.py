"""Public schema exports shared across services."""

from planboard.schemas.holidays import HolidayRecord
from planboard.schemas.resources import OwnerRecord, TeamRecord
from planboard.schemas.statuses import DropZone, StatusRecord
from planboard.schemas.tasks import TaskPatch, TaskRecord, TaskWrite

__all__ = [
    "DropZone",
    "HolidayRecord",
    "OwnerRecord",
    "StatusRecord",
    "TaskPatch",
    "TaskRecord",
    "TaskWrite",
    "TeamRecord",
]
