"""Drag-and-drop interaction between the timeline and the status board."""

from planboard.services.dnd.controller import DragDropController, DragPhase, DropResult
from planboard.services.dnd.geometry import Point, Rect
from planboard.services.dnd.ghost import GHOST_OFFSET, GhostProxy, GhostSlot, PointerTracker
from planboard.services.dnd.highlights import HighlightState
from planboard.services.dnd.targets import CellTarget, ColumnTarget, DropTarget, hit_test

__all__ = [
    "GHOST_OFFSET",
    "CellTarget",
    "ColumnTarget",
    "DragDropController",
    "DragPhase",
    "DropResult",
    "DropTarget",
    "GhostProxy",
    "GhostSlot",
    "HighlightState",
    "Point",
    "PointerTracker",
    "Rect",
    "hit_test",
]
