"""Shared task status enum values."""

from __future__ import annotations

from enum import Enum


class TaskStatus(str, Enum):
    """Ordered task statuses; the numeric order defines column adjacency."""

    ENTRANT = "1"
    WIP = "2"
    EN_ATTENTE = "3"
    DONE = "4"


LEAVE_TITLE = "CONGE"
DEFAULT_STATUS_TITLES: dict[str, str] = {
    TaskStatus.ENTRANT.value: "Entrant",
    TaskStatus.WIP.value: "WIP",
    TaskStatus.EN_ATTENTE.value: "En-Attente",
    TaskStatus.DONE.value: "Done",
}


def normalize_status_id(value: object) -> str | None:
    """Return the string form of a status id (`TaskStatus`, int or str)."""
    if value is None:
        return None
    if isinstance(value, TaskStatus):
        return value.value
    text = str(value).strip()
    return text or None
