"""Pointer tracking and the single drag proxy ("ghost").

The ghost and its pointer-move subscription are one owned resource held by
a :class:`GhostSlot`: ``acquire`` creates both, ``release`` removes both, and
releasing an empty slot does nothing.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from planboard.core.errors import DragStateError
from planboard.core.logging import get_logger
from planboard.services.dnd.geometry import Point

logger = get_logger(__name__)

GHOST_OFFSET = 15

PointerListener = Callable[[Point], None]


class PointerTracker:
    """Fan-out of pointer-move events to subscribed listeners."""

    def __init__(self) -> None:
        self._listeners: list[PointerListener] = []

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: PointerListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: PointerListener) -> bool:
        try:
            self._listeners.remove(listener)
        except ValueError:
            return False
        return True

    def dispatch(self, point: Point) -> None:
        for listener in list(self._listeners):
            listener(point)


@dataclass
class GhostProxy:
    """Visual stand-in for the dragged task, drawn offset from the pointer."""

    task_id: str
    title: str
    anchor: Point

    @property
    def position(self) -> Point:
        return self.anchor.offset(GHOST_OFFSET, GHOST_OFFSET)

    def follow(self, point: Point) -> None:
        self.anchor = point


class GhostSlot:
    """Arena of one: owns at most one ghost and its pointer listener."""

    def __init__(self, tracker: PointerTracker) -> None:
        self._tracker = tracker
        self._ghost: GhostProxy | None = None
        self._listener: PointerListener | None = None

    @property
    def ghost(self) -> GhostProxy | None:
        return self._ghost

    @property
    def held(self) -> bool:
        return self._ghost is not None

    def acquire(
        self,
        *,
        task_id: str,
        title: str,
        pointer: Point,
        on_move: PointerListener | None = None,
    ) -> GhostProxy:
        if self._ghost is not None:
            raise DragStateError("a drag gesture is already in progress")
        ghost = GhostProxy(task_id=task_id, title=title, anchor=pointer)

        def _listener(point: Point) -> None:
            ghost.follow(point)
            if on_move is not None:
                on_move(point)

        self._ghost = ghost
        self._listener = _listener
        self._tracker.subscribe(_listener)
        logger.debug("dnd.ghost.acquired", extra={"task_id": task_id})
        return ghost

    def release(self) -> bool:
        """Remove the ghost and its listener; False when nothing was held."""
        if self._ghost is None:
            return False
        if self._listener is not None:
            self._tracker.unsubscribe(self._listener)
        logger.debug("dnd.ghost.released", extra={"task_id": self._ghost.task_id})
        self._ghost = None
        self._listener = None
        return True
