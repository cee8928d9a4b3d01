"""Handlers for the resource timeline surface.

Dates arriving from the timeline use the exclusive end convention; every
handler converts to the inclusive end before validating boundaries, and an
invalid gesture is reverted on the surface before any mutation is attempted.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from planboard.core.errors import TaskNotFoundError, ValidationRejected
from planboard.core.logging import get_logger
from planboard.core.task_status import TaskStatus
from planboard.models.resources import ResourceDirectory
from planboard.models.tasks import Task
from planboard.schemas.tasks import TaskPatch
from planboard.services.dates import (
    ONE_DAY,
    DateInput,
    has_valid_boundaries,
    is_non_working_day,
    to_date,
)
from planboard.services.mutations import (
    NON_WORKING_BOUNDARIES,
    MutationCoordinator,
    MutationOutcome,
    Revert,
    run_revert,
)
from planboard.services.task_form import TaskForm

logger = get_logger(__name__)

NON_WORKING_DAY = "Cannot schedule on a non-working day"
TEAM_TARGET = "Cannot schedule directly on a team"


@dataclass
class CalendarState:
    """Form state shared by the two surfaces."""

    is_form_open: bool = False
    form: TaskForm | None = None
    selected_task_id: str | None = None

    def open(self, form: TaskForm, *, task_id: str | None = None) -> None:
        self.form = form
        self.selected_task_id = task_id
        self.is_form_open = True

    def close(self) -> None:
        self.form = None
        self.selected_task_id = None
        self.is_form_open = False


@dataclass(frozen=True)
class CalendarChange:
    """A drop or resize reported by the timeline (exclusive ``end``)."""

    task_id: object
    start: DateInput
    end: DateInput = None
    resource_id: object = None
    title: str | None = None
    revert: Revert | None = field(default=None, compare=False)

    @property
    def start_date(self) -> date | None:
        return to_date(self.start)

    @property
    def exclusive_end(self) -> date | None:
        """Exclusive end; a missing end means a one-day task."""
        end = to_date(self.end)
        if end is not None:
            return end
        start = self.start_date
        return start + ONE_DAY if start is not None else None

    @property
    def inclusive_end(self) -> date | None:
        end = self.exclusive_end
        return end - ONE_DAY if end is not None else None


class TimelineHandlers:
    """Selection, reorder, resize and external drop on the timeline."""

    def __init__(
        self,
        coordinator: MutationCoordinator,
        resources: Callable[[], ResourceDirectory],
        state: CalendarState | None = None,
    ) -> None:
        self.coordinator = coordinator
        self._resources = resources
        self.state = state or CalendarState()

    @property
    def resources(self) -> ResourceDirectory:
        return self._resources()

    def _reject(self, message: str, revert: Revert | None) -> MutationOutcome:
        run_revert(revert, task_id=None)
        self.coordinator.notifier.warning(message)
        return MutationOutcome(ok=False, error=ValidationRejected(message))

    def _not_found(self, task_id: object, revert: Revert | None) -> MutationOutcome:
        logger.warning("timeline.task.not_found", extra={"task_id": str(task_id)})
        run_revert(revert, task_id=task_id)
        return MutationOutcome(ok=False, error=TaskNotFoundError(task_id))

    def on_task_select(self, task_id: object) -> TaskForm | None:
        """Open the form on an existing task."""
        task = self.coordinator.store.get(task_id)
        if task is None:
            logger.warning("timeline.select.not_found", extra={"task_id": str(task_id)})
            return None
        form = TaskForm.from_task(task)
        self.state.open(form, task_id=task.key)
        return form

    def on_date_select(self, start: DateInput, resource_id: object = None) -> TaskForm:
        """Open a new-task form prefilled from a timeline selection.

        Team rows are containers, so a selection on one leaves the owner empty.
        """
        if resource_id is not None and self.resources.is_team(resource_id):
            resource_id = None
        form = TaskForm.from_selection(start, resource_id)
        self.state.open(form)
        return form

    def _validate_change(self, change: CalendarChange) -> Task | MutationOutcome:
        """The task to reschedule, or the outcome of rejecting the change."""
        holidays = self.coordinator.holidays
        if not has_valid_boundaries(change.start_date, change.inclusive_end, holidays):
            return self._reject(NON_WORKING_BOUNDARIES, change.revert)
        task = self.coordinator.store.get(change.task_id)
        if task is None:
            return self._not_found(change.task_id, change.revert)
        if change.resource_id is not None and self.resources.is_team(change.resource_id):
            return self._reject(TEAM_TARGET, change.revert)
        return task

    def _schedule_patch(self, task: Task, change: CalendarChange) -> TaskPatch:
        resource_id = change.resource_id if change.resource_id is not None else task.resource_id
        return TaskPatch(
            resource_id=resource_id,
            start_date=change.start_date,
            end_date=change.inclusive_end,
            status_id=task.status_id,
        )

    async def _reschedule(self, change: CalendarChange, verb: str) -> MutationOutcome:
        checked = self._validate_change(change)
        if isinstance(checked, MutationOutcome):
            return checked
        title = change.title or checked.title
        return await self.coordinator.apply_mutation(
            change.task_id,
            self._schedule_patch(checked, change),
            revert=change.revert,
            success_message=f'Task "{title}" {verb}',
        )

    async def on_calendar_drop(self, change: CalendarChange) -> MutationOutcome:
        """Native reorder of a task already on the timeline."""
        return await self._reschedule(change, "moved")

    async def on_calendar_resize(self, change: CalendarChange) -> MutationOutcome:
        """End-boundary resize of a task on the timeline."""
        return await self._reschedule(change, "resized")

    async def on_external_drop(
        self,
        task_id: object,
        day: DateInput,
        resource_id: object,
        *,
        revert: Revert | None = None,
    ) -> MutationOutcome:
        """A board card dropped on a timeline cell: schedule it for that day in WIP."""
        start = to_date(day)
        if start is None or is_non_working_day(start, self.coordinator.holidays):
            return self._reject(NON_WORKING_DAY, revert)
        if resource_id is not None and self.resources.is_team(resource_id):
            return self._reject(TEAM_TARGET, revert)
        task = self.coordinator.store.get(task_id)
        if task is None:
            return self._not_found(task_id, revert)
        patch = TaskPatch(
            resource_id=resource_id,
            start_date=start,
            end=start + ONE_DAY,
            status_id=TaskStatus.WIP.value,
        )
        return await self.coordinator.apply_mutation(
            task_id,
            patch,
            revert=revert,
            success_message=f'Task "{task.title}" dropped on the calendar',
        )
