"""Status-column board: drop zones, per-column task lists and column moves."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from planboard.core.task_status import TaskStatus, normalize_status_id
from planboard.models.tasks import Task
from planboard.schemas.statuses import DropZone, StatusRecord
from planboard.schemas.tasks import TaskPatch
from planboard.services.mutations import MutationCoordinator, MutationOutcome, Revert
from planboard.services.status_machine import Direction, StatusSequence


def build_drop_zones(statuses: StatusSequence | Iterable[StatusRecord]) -> list[DropZone]:
    """One zone per status in order; the WIP zone is present but disabled."""
    sequence = statuses if isinstance(statuses, StatusSequence) else StatusSequence(statuses)
    return [
        DropZone(
            status_id=record.status_id,
            title=record.status_type,
            disabled=record.status_id == TaskStatus.WIP.value,
        )
        for record in sequence.records
    ]


def tasks_for_column(tasks: Iterable[Task], status_id: object) -> list[Task]:
    """Tasks shown in one column; leave tasks never appear on the board."""
    wanted = normalize_status_id(status_id)
    return [task for task in tasks if not task.is_leave and task.status_id == wanted]


def column_patch(task: Task, status_id: object) -> TaskPatch:
    """Patch moving ``task`` to a column; leaving the schedule behind outside WIP."""
    target = normalize_status_id(status_id)
    if target != TaskStatus.WIP.value and task.has_schedule:
        return TaskPatch.unschedule(status_id=target)
    return TaskPatch(status_id=target)


@dataclass(frozen=True)
class MoveOptions:
    can_move_left: bool
    can_move_right: bool


class TaskBoard:
    """Board view over the shared task store."""

    def __init__(self, coordinator: MutationCoordinator, sequence: StatusSequence) -> None:
        self.coordinator = coordinator
        self.sequence = sequence
        self.zones = build_drop_zones(sequence)

    def set_statuses(self, sequence: StatusSequence) -> None:
        self.sequence = sequence
        self.zones = build_drop_zones(sequence)

    def zone_for(self, status_id: object) -> DropZone | None:
        wanted = normalize_status_id(status_id)
        return next((zone for zone in self.zones if zone.status_id == wanted), None)

    def tasks_by_zone(self) -> list[tuple[DropZone, list[Task]]]:
        tasks = self.coordinator.store.tasks
        return [(zone, tasks_for_column(tasks, zone.status_id)) for zone in self.zones]

    def move_options(self, task: Task) -> MoveOptions:
        """Left/right affordances; none for leave tasks or unknown statuses."""
        return MoveOptions(
            can_move_left=self.sequence.neighbour(task, "left") is not None,
            can_move_right=self.sequence.neighbour(task, "right") is not None,
        )

    def move_target(self, task: Task, direction: Direction) -> str | None:
        return self.sequence.neighbour(task, direction)

    async def move_to_column(
        self,
        task_id: object,
        status_id: object,
        *,
        revert: Revert | None = None,
    ) -> MutationOutcome:
        """Persist a column change through the coordinator."""
        task = self.coordinator.store.get(task_id)
        patch = column_patch(task, status_id) if task is not None else TaskPatch(status_id=status_id)
        zone = self.zone_for(status_id)
        title = zone.title if zone is not None else "the new status"
        return await self.coordinator.apply_mutation(
            task_id,
            patch,
            revert=revert,
            success_message=f"Task moved to {title}",
        )
