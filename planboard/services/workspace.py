"""Workspace facade: the handler surface the two rendering surfaces call."""

from __future__ import annotations

from planboard.core.errors import DataLoadError, TaskNotFoundError
from planboard.core.logging import get_logger
from planboard.core.task_status import TaskStatus, normalize_status_id
from planboard.models.resources import ResourceDirectory
from planboard.services.api import (
    ApiClient,
    HolidayApi,
    OwnerApi,
    StatusApi,
    TaskApi,
    TeamApi,
)
from planboard.services.assembly import (
    HolidaySource,
    RecordSource,
    WorkspaceData,
    load_workspace_data,
)
from planboard.services.board import TaskBoard
from planboard.services.dates import DateInput
from planboard.services.dnd import DragDropController, DropResult, GhostProxy, Point, PointerTracker
from planboard.services.dnd.controller import Surface
from planboard.services.dnd.targets import DropTarget
from planboard.services.mutations import (
    MutationCoordinator,
    MutationOutcome,
    Revert,
    TaskRepository,
)
from planboard.services.notifications import Notifier
from planboard.services.status_machine import Direction, StatusSequence
from planboard.services.task_form import TaskForm
from planboard.services.task_store import TaskStore
from planboard.services.timeline import CalendarChange, CalendarState, TimelineHandlers

logger = get_logger(__name__)


class Workspace:
    """Owns the shared state and exposes every interaction handler."""

    def __init__(
        self,
        repository: TaskRepository,
        *,
        owners: RecordSource | None = None,
        teams: RecordSource | None = None,
        statuses: RecordSource | None = None,
        holidays: HolidaySource | None = None,
        notifier: Notifier | None = None,
        tracker: PointerTracker | None = None,
    ) -> None:
        self.repository = repository
        self._owners = owners
        self._teams = teams
        self._statuses = statuses
        self._holidays = holidays
        self.notifier = notifier or Notifier()
        self.store = TaskStore()
        self.resources = ResourceDirectory()
        self.coordinator = MutationCoordinator(self.store, repository, self.notifier)
        self.board = TaskBoard(self.coordinator, StatusSequence())
        self.state = CalendarState()
        self.timeline = TimelineHandlers(self.coordinator, lambda: self.resources, self.state)
        self.dnd = DragDropController(self.board, self.timeline, tracker=tracker)
        self.loading = False
        self.error: str | None = None

    @classmethod
    def from_client(cls, client: ApiClient, **kwargs: object) -> Workspace:
        """Workspace backed by the HTTP APIs."""
        return cls(
            TaskApi(client),
            owners=OwnerApi(client),
            teams=TeamApi(client),
            statuses=StatusApi(client),
            holidays=HolidayApi(client),
            **kwargs,  # type: ignore[arg-type]
        )

    @property
    def holidays(self) -> dict[str, str]:
        return dict(self.coordinator.holidays)

    @property
    def processing(self) -> bool:
        return self.store.processing

    def apply(self, data: WorkspaceData) -> None:
        """Install freshly loaded data as the current state."""
        self.store.reset(data.tasks)
        self.resources = data.resources
        self.board.set_statuses(StatusSequence(data.statuses))
        self.coordinator.holidays = data.holidays

    async def load(self, *, year: int | None = None) -> WorkspaceData | None:
        """Fetch every source; partial failures degrade to empty collections."""
        if None in (self._owners, self._teams, self._statuses, self._holidays):
            raise RuntimeError("workspace has no remote sources configured")
        self.loading = True
        self.error = None
        try:
            data = await load_workspace_data(
                tasks=self.repository,
                owners=self._owners,  # type: ignore[arg-type]
                teams=self._teams,  # type: ignore[arg-type]
                statuses=self._statuses,  # type: ignore[arg-type]
                holidays=self._holidays,  # type: ignore[arg-type]
                year=year,
            )
        except DataLoadError as exc:
            self.error = exc.message
            self.notifier.error(exc.message)
            return None
        finally:
            self.loading = False
        self.apply(data)
        return data

    async def refresh(self, *, year: int | None = None) -> WorkspaceData | None:
        return await self.load(year=year)

    # Selection and form

    def on_task_select(self, task_id: object) -> TaskForm | None:
        return self.timeline.on_task_select(task_id)

    def on_date_select(self, start: DateInput, resource_id: object = None) -> TaskForm:
        return self.timeline.on_date_select(start, resource_id)

    def on_create_task(self, status_id: object = None) -> TaskForm:
        """Blank form from the board's "add" button, preset to a column."""
        form = TaskForm(status_id=normalize_status_id(status_id) or TaskStatus.ENTRANT.value)
        self.state.open(form)
        return form

    def on_form_change(self, name: str, value: object) -> TaskForm | None:
        form = self.state.form
        if form is None:
            return None
        form.change(name, value)
        return form

    def close_form(self) -> None:
        self.state.close()

    async def on_task_submit(self, form: TaskForm | None = None) -> MutationOutcome:
        form = form or self.state.form
        if form is None:
            raise RuntimeError("no task form is open")
        outcome = await self.coordinator.submit_task(form)
        if outcome.ok:
            self.state.close()
        return outcome

    async def on_delete(self, task_id: object) -> MutationOutcome:
        outcome = await self.coordinator.delete_task(task_id)
        if outcome.ok and outcome.task is not None:
            if self.state.selected_task_id == outcome.task.key:
                self.state.close()
        return outcome

    # Board

    async def on_move_to_column(self, task_id: object, status_id: object) -> MutationOutcome | None:
        """Column change from the board; WIP opens the form instead of mutating."""
        task = self.store.get(task_id)
        if task is None:
            logger.warning("board.move.not_found", extra={"task_id": str(task_id)})
            return MutationOutcome(ok=False, error=TaskNotFoundError(task_id))
        if normalize_status_id(status_id) == TaskStatus.WIP.value:
            form = TaskForm.from_task(task)
            form.status_id = TaskStatus.WIP.value
            self.state.open(form, task_id=task.key)
            return None
        return await self.board.move_to_column(task_id, status_id)

    async def on_move(self, task_id: object, direction: Direction) -> MutationOutcome | None:
        """One-column move; does nothing when the move is not offered."""
        task = self.store.get(task_id)
        if task is None:
            return MutationOutcome(ok=False, error=TaskNotFoundError(task_id))
        target = self.board.move_target(task, direction)
        if target is None:
            return None
        return await self.on_move_to_column(task_id, target)

    # Timeline

    async def on_calendar_drop(self, change: CalendarChange) -> MutationOutcome:
        return await self.timeline.on_calendar_drop(change)

    async def on_calendar_resize(self, change: CalendarChange) -> MutationOutcome:
        return await self.timeline.on_calendar_resize(change)

    async def on_external_drop(
        self,
        task_id: object,
        day: DateInput,
        resource_id: object,
        *,
        revert: Revert | None = None,
    ) -> MutationOutcome:
        return await self.timeline.on_external_drop(task_id, day, resource_id, revert=revert)

    # Cross-surface drag

    def on_drag_start(
        self,
        task_id: object,
        pointer: Point,
        *,
        surface: Surface = "timeline",
        revert: Revert | None = None,
    ) -> GhostProxy:
        return self.dnd.drag_start(task_id, pointer, surface=surface, revert=revert)

    def on_drag_move(self, pointer: Point) -> DropTarget | None:
        return self.dnd.drag_move(pointer)

    async def on_external_drag_stop(self, pointer: Point) -> DropResult:
        return await self.dnd.drag_stop(pointer)

    def on_drag_cancel(self, reason: str = "escape") -> DropResult:
        return self.dnd.cancel(reason)

    def teardown(self) -> None:
        self.dnd.teardown()
