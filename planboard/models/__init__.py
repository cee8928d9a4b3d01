"""Model exports for the canonical in-memory records."""

from planboard.models.resources import (
    OwnerResource,
    Resource,
    ResourceDirectory,
    TeamResource,
    team_resource_id,
)
from planboard.models.tasks import Task, task_key

__all__ = [
    "OwnerResource",
    "Resource",
    "ResourceDirectory",
    "Task",
    "TeamResource",
    "task_key",
    "team_resource_id",
]
