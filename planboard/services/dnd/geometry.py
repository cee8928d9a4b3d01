"""Screen-space geometry for drop-target hit-testing."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def offset(self, dx: float, dy: float) -> Point:
        return Point(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned bounding box; edges belong to the box."""

    left: float
    top: float
    right: float
    bottom: float

    @classmethod
    def from_size(cls, left: float, top: float, width: float, height: float) -> Rect:
        return cls(left=left, top=top, right=left + width, bottom=top + height)

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    def contains(self, point: Point) -> bool:
        return self.left <= point.x <= self.right and self.top <= point.y <= self.bottom
