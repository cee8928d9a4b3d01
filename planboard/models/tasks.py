"""Canonical in-memory task record shared by every engine component."""

from __future__ import annotations

from datetime import date
from typing import Any, Self

from pydantic import field_validator
from sqlmodel import SQLModel

from planboard.core.task_status import LEAVE_TITLE, TaskStatus, normalize_status_id
from planboard.services.dates import to_date, to_exclusive_end

RUNTIME_ANNOTATION_TYPES = (date,)


def task_key(task_id: object) -> str:
    """Comparable form of a task id; ids arrive as int or str depending on the path."""
    return str(task_id)


class Task(SQLModel):
    """Task with one inclusive date span; the exclusive end is always derived.

    ``end_date`` is the inclusive last day (storage convention). ``end`` and
    ``exclusive_end_date`` expose the display convention and are computed from
    it, so the two conventions cannot drift apart.
    """

    id: int | str | None = None
    title: str = ""
    description: str = ""
    status_id: str = TaskStatus.ENTRANT.value
    is_conge: bool = False
    resource_id: str | None = None
    start_date: date | None = None
    end_date: date | None = None

    @field_validator("status_id", mode="before")
    @classmethod
    def _normalize_status(cls, value: object) -> str:
        return normalize_status_id(value) or TaskStatus.ENTRANT.value

    @field_validator("resource_id", mode="before")
    @classmethod
    def _normalize_resource(cls, value: object) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _normalize_dates(cls, value: object) -> date | None:
        return to_date(value)

    @property
    def key(self) -> str:
        return task_key(self.id)

    @property
    def is_leave(self) -> bool:
        return self.is_conge or self.title == LEAVE_TITLE

    @property
    def start(self) -> date | None:
        return self.start_date

    @property
    def end(self) -> date | None:
        return to_exclusive_end(self.end_date)

    @property
    def exclusive_end_date(self) -> date | None:
        return self.end

    @property
    def has_schedule(self) -> bool:
        """True when any of resource, start or end is still attached."""
        return (
            self.resource_id is not None
            or self.start_date is not None
            or self.end_date is not None
        )

    @property
    def is_scheduled(self) -> bool:
        """True when resource and both dates are present."""
        return (
            self.resource_id is not None
            and self.start_date is not None
            and self.end_date is not None
        )

    def with_changes(self, **changes: Any) -> Self:
        """Return a validated copy with ``changes`` applied."""
        data = self.model_dump()
        data.update(changes)
        return type(self).model_validate(data)
