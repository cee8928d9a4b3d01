"""Drag-and-drop gesture controller shared by the timeline and the board.

One gesture at a time: ``Idle -> Dragging -> (Dropped | Cancelled) -> Idle``.
Every terminal path (drop, cancel, teardown) releases the ghost, its pointer
listener and all highlights before any mutation runs.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Literal

from planboard.core.errors import DragStateError, TaskNotFoundError, ValidationRejected
from planboard.core.logging import get_logger
from planboard.core.task_status import TaskStatus
from planboard.services.board import TaskBoard
from planboard.services.dnd.geometry import Point
from planboard.services.dnd.ghost import GhostProxy, GhostSlot, PointerTracker
from planboard.services.dnd.highlights import HighlightState
from planboard.services.dnd.targets import CellTarget, ColumnTarget, DropTarget, hit_test
from planboard.services.mutations import MutationOutcome, Revert, run_revert
from planboard.services.timeline import TimelineHandlers

logger = get_logger(__name__)

Surface = Literal["timeline", "board"]

WIP_COLUMN_REJECTED = "Use the task form to put a task in progress"
LEAVE_MOVE_REJECTED = "Leave entries stay on the timeline"


class DragPhase(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    DROPPED = "dropped"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class DropResult:
    """How a gesture ended; ``outcome`` is set only when a mutation ran."""

    phase: DragPhase
    target: DropTarget | None = None
    outcome: MutationOutcome | None = None
    reason: str | None = None

    @property
    def mutated(self) -> bool:
        return self.outcome is not None


@dataclass(frozen=True)
class _Gesture:
    task_id: str
    surface: Surface
    revert: Revert | None


class DragDropController:
    """Tracks one drag gesture, hit-tests targets and routes the drop."""

    def __init__(
        self,
        board: TaskBoard,
        timeline: TimelineHandlers,
        *,
        tracker: PointerTracker | None = None,
    ) -> None:
        self.board = board
        self.timeline = timeline
        self.tracker = tracker or PointerTracker()
        self.slot = GhostSlot(self.tracker)
        self.highlights = HighlightState()
        self.phase = DragPhase.IDLE
        self.columns: list[ColumnTarget] = []
        self.cells: list[CellTarget] = []
        self._gesture: _Gesture | None = None

    @property
    def draggable(self) -> bool:
        """False while a gesture is active; surfaces disable new drags on it."""
        return self.phase is DragPhase.IDLE and not self.slot.held

    @property
    def hidden_task_id(self) -> str | None:
        """Task whose original element is hidden while its ghost is shown."""
        return self._gesture.task_id if self._gesture is not None else None

    def set_targets(
        self,
        *,
        columns: Iterable[ColumnTarget] | None = None,
        cells: Iterable[CellTarget] | None = None,
    ) -> None:
        """Replace the measured target rectangles (after layout changes)."""
        if columns is not None:
            self.columns = list(columns)
        if cells is not None:
            self.cells = [
                cell for cell in cells if not self.timeline.resources.is_team(cell.resource_id)
            ]

    def _targets(self) -> list[DropTarget]:
        return [*self.columns, *self.cells]

    def drag_start(
        self,
        task_id: object,
        pointer: Point,
        *,
        surface: Surface = "timeline",
        revert: Revert | None = None,
    ) -> GhostProxy:
        """Begin a gesture; raises :class:`DragStateError` if one is active."""
        if not self.draggable:
            raise DragStateError("a drag gesture is already in progress")
        task = self.board.coordinator.store.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        ghost = self.slot.acquire(
            task_id=task.key,
            title=task.title,
            pointer=pointer,
            on_move=self._on_pointer_move,
        )
        self._gesture = _Gesture(task_id=task.key, surface=surface, revert=revert)
        self.phase = DragPhase.DRAGGING
        self.highlights.begin(
            potential=[target.key for target in self._targets()],
            disabled=[column.key for column in self.columns if column.disabled],
        )
        logger.debug("dnd.drag.started", extra={"task_id": task.key, "surface": surface})
        return ghost

    def drag_move(self, pointer: Point) -> DropTarget | None:
        """Feed a pointer position; returns the target now under the pointer."""
        if self.phase is not DragPhase.DRAGGING:
            return None
        self.tracker.dispatch(pointer)
        return hit_test(self._targets(), pointer)

    def _on_pointer_move(self, pointer: Point) -> None:
        target = hit_test(self._targets(), pointer)
        self.highlights.activate(target.key if target is not None else None)

    def _cleanup(self) -> None:
        self.slot.release()
        self.highlights.clear()

    def _finish(self, result: DropResult) -> DropResult:
        self._gesture = None
        self.phase = DragPhase.IDLE
        logger.debug(
            "dnd.drag.finished",
            extra={"drag_phase": result.phase.value, "reason": result.reason},
        )
        return result

    def cancel(self, reason: str = "cancelled") -> DropResult:
        """Escape key or pointer-up outside any target; no mutation."""
        if self._gesture is None:
            self._cleanup()
            return DropResult(phase=DragPhase.IDLE, reason=reason)
        gesture = self._gesture
        self.phase = DragPhase.CANCELLED
        self._cleanup()
        run_revert(gesture.revert, task_id=gesture.task_id)
        return self._finish(DropResult(phase=DragPhase.CANCELLED, reason=reason))

    def teardown(self) -> None:
        """Release everything; safe to call repeatedly."""
        self._cleanup()
        self._gesture = None
        self.phase = DragPhase.IDLE

    async def drag_stop(self, pointer: Point) -> DropResult:
        """End the gesture at ``pointer`` and run the drop it resolves to.

        The controller is back to idle afterwards, whatever the drop did.
        """
        if self._gesture is None or self.phase is not DragPhase.DRAGGING:
            return DropResult(phase=DragPhase.IDLE, reason="no active gesture")
        gesture = self._gesture
        try:
            target = hit_test(self._targets(), pointer)
            self._cleanup()
            if target is None:
                self.phase = DragPhase.CANCELLED
                run_revert(gesture.revert, task_id=gesture.task_id)
                result = DropResult(phase=DragPhase.CANCELLED, reason="no target")
            elif isinstance(target, ColumnTarget):
                self.phase = DragPhase.DROPPED
                result = await self._drop_on_column(gesture, target)
            else:
                self.phase = DragPhase.DROPPED
                result = await self._drop_on_cell(gesture, target)
        finally:
            self._cleanup()
            self._gesture = None
            self.phase = DragPhase.IDLE
        return self._finish(result)

    def _rejected(self, gesture: _Gesture, target: DropTarget, message: str) -> DropResult:
        run_revert(gesture.revert, task_id=gesture.task_id)
        self.board.coordinator.notifier.warning(message)
        return DropResult(
            phase=DragPhase.CANCELLED,
            target=target,
            outcome=None,
            reason=message,
        )

    async def _drop_on_column(self, gesture: _Gesture, target: ColumnTarget) -> DropResult:
        task = self.board.coordinator.store.get(gesture.task_id)
        if task is None:
            logger.warning("dnd.drop.not_found", extra={"task_id": gesture.task_id})
            run_revert(gesture.revert, task_id=gesture.task_id)
            return DropResult(phase=DragPhase.CANCELLED, target=target, reason="task not found")
        if target.disabled or target.zone.status_id == TaskStatus.WIP.value:
            return self._rejected(gesture, target, WIP_COLUMN_REJECTED)
        if task.is_leave:
            return self._rejected(gesture, target, LEAVE_MOVE_REJECTED)
        outcome = await self.board.move_to_column(
            gesture.task_id,
            target.zone.status_id,
            revert=gesture.revert,
        )
        return DropResult(phase=DragPhase.DROPPED, target=target, outcome=outcome)

    async def _drop_on_cell(self, gesture: _Gesture, target: CellTarget) -> DropResult:
        outcome = await self.timeline.on_external_drop(
            gesture.task_id,
            target.day,
            target.resource_id,
            revert=gesture.revert,
        )
        if isinstance(outcome.error, ValidationRejected):
            return DropResult(
                phase=DragPhase.CANCELLED,
                target=target,
                reason=outcome.error.message,
            )
        return DropResult(phase=DragPhase.DROPPED, target=target, outcome=outcome)
