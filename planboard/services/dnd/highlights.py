"""Highlight state of drop targets during a gesture."""

from __future__ import annotations

from collections.abc import Iterable

POTENTIAL_CLASS = "potential-drop-target"
ACTIVE_CLASS = "dropzone-active"
ACTIVE_TARGET_CLASS = "active-drop-target"
DISABLED_CLASS = "dropzone-disabled"
CONTAINER_CLASS = "taskboard-highlight"
CONTAINER_INTENSE_CLASS = "taskboard-highlight-intense"


class HighlightState:
    """Potential, disabled and (at most one) active target, plus the board container."""

    def __init__(self) -> None:
        self.potential: set[str] = set()
        self.disabled: set[str] = set()
        self.active: str | None = None
        self.container_highlighted = False
        self.container_intense = False

    def begin(self, potential: Iterable[str], disabled: Iterable[str] = ()) -> None:
        self.disabled = set(disabled)
        self.potential = set(potential) - self.disabled
        self.active = None
        self.container_highlighted = True
        self.container_intense = False

    def activate(self, key: str | None) -> None:
        """Make ``key`` the only active target (``None`` clears it)."""
        if key is not None and key not in self.potential:
            key = None
        self.active = key
        self.container_intense = key is not None

    def clear(self) -> None:
        self.potential.clear()
        self.disabled.clear()
        self.active = None
        self.container_highlighted = False
        self.container_intense = False

    @property
    def is_clear(self) -> bool:
        return (
            not self.potential
            and not self.disabled
            and self.active is None
            and not self.container_highlighted
            and not self.container_intense
        )

    def classes_for(self, key: str) -> set[str]:
        """CSS classes a surface should put on the element of target ``key``."""
        classes: set[str] = set()
        if key in self.disabled:
            classes.add(DISABLED_CLASS)
        if key in self.potential:
            classes.add(POTENTIAL_CLASS)
        if key == self.active:
            classes.update({ACTIVE_CLASS, ACTIVE_TARGET_CLASS})
        return classes

    def container_classes(self) -> set[str]:
        classes: set[str] = set()
        if self.container_highlighted:
            classes.add(CONTAINER_CLASS)
        if self.container_intense:
            classes.add(CONTAINER_INTENSE_CLASS)
        return classes
