"""Drop targets on the two surfaces and the hit-test over them."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import TypeAlias

from planboard.schemas.statuses import DropZone
from planboard.services.dates import format_date
from planboard.services.dnd.geometry import Point, Rect


@dataclass(frozen=True)
class ColumnTarget:
    """A status column on the board."""

    zone: DropZone
    rect: Rect

    @property
    def key(self) -> str:
        return f"column:{self.zone.status_id}"

    @property
    def disabled(self) -> bool:
        return self.zone.disabled


@dataclass(frozen=True)
class CellTarget:
    """One day of one resource row on the timeline."""

    resource_id: str
    day: date
    rect: Rect

    @property
    def key(self) -> str:
        return f"cell:{self.resource_id}:{format_date(self.day)}"

    @property
    def disabled(self) -> bool:
        return False


DropTarget: TypeAlias = ColumnTarget | CellTarget


def hit_test(targets: Iterable[DropTarget], point: Point) -> DropTarget | None:
    """First target containing ``point``; at most one target can win.

    Disabled targets are still hit so a drop on them can be refused with a
    reason; they never become the active highlight.
    """
    for target in targets:
        if target.rect.contains(point):
            return target
    return None
