"""Task status state machine.

Statuses form an ordered sequence (Entrant -> WIP -> En-Attente -> Done) and
the leave flag cuts across it. The next state depends on both the requested
target and the task's context (resource and dates present), so every status
change is resolved here before it reaches the mutation coordinator.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import Literal

from planboard.core.logging import get_logger
from planboard.core.task_status import (
    DEFAULT_STATUS_TITLES,
    LEAVE_TITLE,
    TaskStatus,
    normalize_status_id,
)
from planboard.models.tasks import Task
from planboard.schemas.statuses import StatusRecord
from planboard.schemas.tasks import TaskPatch
from planboard.services.dates import HolidaySet, has_valid_boundaries, to_inclusive_end

logger = get_logger(__name__)

Direction = Literal["left", "right"]

WIP_REQUIREMENTS_MESSAGE = (
    "A task in progress needs an owner and start/end dates on working days; "
    "it was kept out of WIP."
)
_SCHEDULE_FIELDS = frozenset({"resource_id", "start_date", "end_date", "end"})


@dataclass(frozen=True)
class Transition:
    """Outcome of resolving a requested change against the status rules."""

    patch: TaskPatch
    rejected: bool = False
    reason: str | None = None


@dataclass(frozen=True)
class _Effective:
    resource_id: str | None
    start_date: date | None
    end_date: date | None
    is_leave: bool
    target: str


def _effective_state(task: Task, patch: TaskPatch) -> _Effective:
    supplied = patch.supplied()
    resource_id = supplied["resource_id"] if "resource_id" in supplied else task.resource_id
    start_date = supplied["start_date"] if "start_date" in supplied else task.start_date
    if "end_date" in supplied:
        end_date = supplied["end_date"]
    elif "end" in supplied:
        end_date = to_inclusive_end(supplied["end"])
    else:
        end_date = task.end_date
    is_conge = supplied["is_conge"] if supplied.get("is_conge") is not None else task.is_conge
    title = supplied.get("title") or task.title
    target = normalize_status_id(supplied.get("status_id")) or task.status_id
    return _Effective(
        resource_id=resource_id,
        start_date=start_date,
        end_date=end_date,
        is_leave=bool(is_conge) or title == LEAVE_TITLE,
        target=target,
    )


def _fallback_status(task: Task) -> str:
    # Falling back to WIP would loop on the same missing data.
    if task.status_id == TaskStatus.WIP.value:
        return TaskStatus.ENTRANT.value
    return task.status_id


def resolve_transition(
    task: Task,
    patch: TaskPatch,
    holidays: HolidaySet | None = None,
) -> Transition:
    """Apply the status rules to ``patch`` for ``task``.

    - Leave tasks are always WIP.
    - Entering WIP (or rescheduling while in WIP) requires a resource and both
      dates on working days; otherwise the change is redirected to the prior
      status with resource and dates cleared.
    - Any non-WIP target drops a remaining resource/date schedule.
    """
    state = _effective_state(task, patch)
    wip = TaskStatus.WIP.value

    if state.is_leave:
        if state.target != wip:
            return Transition(patch.merged(status_id=wip))
        return Transition(patch)

    if state.target == wip:
        touches_wip = "status_id" in patch.model_fields_set or bool(
            patch.model_fields_set & _SCHEDULE_FIELDS,
        )
        if not touches_wip:
            return Transition(patch)
        if state.resource_id is not None and has_valid_boundaries(
            state.start_date,
            state.end_date,
            holidays,
        ):
            return Transition(patch)
        fallback = _fallback_status(task)
        logger.info(
            "task.status.wip_rejected",
            extra={
                "task_id": task.key,
                "fallback_status_id": fallback,
                "has_resource": state.resource_id is not None,
            },
        )
        return Transition(
            TaskPatch.unschedule(**{**_non_schedule(patch), "status_id": fallback}),
            rejected=True,
            reason=WIP_REQUIREMENTS_MESSAGE,
        )

    if state.resource_id is not None or state.start_date or state.end_date:
        return Transition(TaskPatch.unschedule(**_non_schedule(patch)))
    return Transition(patch)


def _non_schedule(patch: TaskPatch) -> dict[str, object]:
    return {
        name: value for name, value in patch.supplied().items() if name not in _SCHEDULE_FIELDS
    }


class StatusSequence:
    """Ordered statuses; adjacency drives the left/right column moves."""

    def __init__(self, statuses: Iterable[StatusRecord] | None = None) -> None:
        records = list(statuses or ())
        if not records:
            records = [
                StatusRecord(status_id=status_id, status_type=title)
                for status_id, title in DEFAULT_STATUS_TITLES.items()
            ]
        self._records = sorted(records, key=_status_sort_key)
        self._ids = [record.status_id for record in self._records]

    @property
    def records(self) -> list[StatusRecord]:
        return list(self._records)

    @property
    def ids(self) -> list[str]:
        return list(self._ids)

    def index_of(self, status_id: object) -> int | None:
        normalized = normalize_status_id(status_id)
        if normalized is None or normalized not in self._ids:
            return None
        return self._ids.index(normalized)

    def title_of(self, status_id: object) -> str:
        index = self.index_of(status_id)
        if index is None:
            return str(status_id)
        return self._records[index].status_type

    def previous(self, status_id: object) -> str | None:
        index = self.index_of(status_id)
        if index is None or index == 0:
            return None
        return self._ids[index - 1]

    def next(self, status_id: object) -> str | None:
        index = self.index_of(status_id)
        if index is None or index == len(self._ids) - 1:
            return None
        return self._ids[index + 1]

    def neighbour(self, task: Task, direction: Direction) -> str | None:
        """Target of a one-column move, or None when the move is not offered."""
        if task.is_leave:
            return None
        if direction == "left":
            return self.previous(task.status_id)
        return self.next(task.status_id)


def _status_sort_key(record: StatusRecord) -> tuple[int, int | str]:
    if record.status_id.isdigit():
        return (0, int(record.status_id))
    return (1, record.status_id)
