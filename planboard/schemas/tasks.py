"""Schemas for task records crossing the remote API and for partial updates."""

from __future__ import annotations

from datetime import date
from typing import Any, Self

from pydantic import field_validator, model_validator
from sqlmodel import Field, SQLModel

from planboard.core.task_status import LEAVE_TITLE, TaskStatus, normalize_status_id
from planboard.models.tasks import Task
from planboard.services.dates import format_date, to_date

RUNTIME_ANNOTATION_TYPES = (date,)
_ERR_TITLE_REQUIRED = "title is required"

# Load paths have used both snake_case and camelCase keys for the same field.
_TASK_RECORD_ALIASES = {
    "ownerId": "owner_id",
    "statusId": "status_id",
    "userId": "user_id",
    "startDate": "start_date",
    "endDate": "end_date",
    "isConge": "is_conge",
    "ownerName": "owner_name",
    "statusType": "status_type",
    "teamName": "team_name",
}


class TaskRecord(SQLModel):
    """Task as returned by the remote API (inclusive date convention)."""

    id: int | str
    title: str = "Untitled task"
    description: str = ""
    start_date: date | None = None
    end_date: date | None = None
    owner_id: int | str | None = None
    status_id: str | None = None
    user_id: int | str | None = None
    is_conge: bool = False
    owner_name: str | None = None
    status_type: str | None = None
    team_name: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _accept_camel_case(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        normalized = dict(data)
        extended = normalized.pop("extendedProps", None)
        if isinstance(extended, dict):
            for key, value in extended.items():
                normalized.setdefault(key, value)
        for camel, snake in _TASK_RECORD_ALIASES.items():
            if camel in normalized and normalized.get(snake) is None:
                normalized[snake] = normalized.pop(camel)
        return normalized

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, value: object) -> str:
        text = str(value).strip() if value is not None else ""
        return text or "Untitled task"

    @field_validator("description", mode="before")
    @classmethod
    def _strip_description(cls, value: object) -> str:
        return str(value).strip() if value is not None else ""

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _parse_date(cls, value: object) -> date | None:
        return to_date(value)

    @field_validator("status_id", mode="before")
    @classmethod
    def _normalize_status(cls, value: object) -> str | None:
        return normalize_status_id(value)

    def to_task(self) -> Task:
        """Canonical task; the owner id becomes the timeline resource id."""
        return Task(
            id=self.id,
            title=self.title,
            description=self.description,
            status_id=self.status_id or TaskStatus.ENTRANT.value,
            is_conge=self.is_conge or self.title == LEAVE_TITLE,
            resource_id=self.owner_id,
            start_date=self.start_date,
            end_date=self.end_date,
        )


class TaskWrite(SQLModel):
    """Create/update payload sent to the remote API.

    Dates are inclusive and serialized as ``YYYY-MM-DD``; the owner id is sent
    as an integer when it is numeric.
    """

    title: str
    description: str = ""
    start_date: date | None = None
    end_date: date | None = None
    owner_id: int | str | None = None
    status_id: str | None = None
    is_conge: bool = False

    @model_validator(mode="after")
    def _validate(self) -> Self:
        title = self.title.strip()
        if not title:
            raise ValueError(_ERR_TITLE_REQUIRED)
        self.title = title
        self.description = self.description.strip()
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

    @classmethod
    def from_task(cls, task: Task) -> TaskWrite:
        return cls(
            title=task.title,
            description=task.description,
            start_date=task.start_date,
            end_date=task.end_date,
            owner_id=task.resource_id,
            status_id=task.status_id,
            is_conge=task.is_leave,
        )

    def to_wire(self) -> dict[str, object]:
        owner_id: object = self.owner_id
        if isinstance(owner_id, str) and owner_id.isdigit():
            owner_id = int(owner_id)
        return {
            "title": self.title,
            "description": self.description,
            "startDate": format_date(self.start_date),
            "endDate": format_date(self.end_date),
            "ownerId": owner_id,
            "statusId": self.status_id,
            "isConge": self.is_conge,
        }


class TaskPatch(SQLModel):
    """Partial task update.

    An explicit ``None`` clears a field; omitted fields are left untouched
    (``model_fields_set`` tells them apart). ``end`` carries an *exclusive*
    end date from the timeline and is folded into the inclusive ``end_date``
    by the mutation coordinator.
    """

    title: str | None = None
    description: str | None = None
    status_id: str | None = None
    is_conge: bool | None = None
    resource_id: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    end: date | None = Field(default=None, description="Exclusive end date (display convention).")

    @field_validator("status_id", mode="before")
    @classmethod
    def _normalize_status(cls, value: object) -> str | None:
        return normalize_status_id(value)

    @field_validator("resource_id", mode="before")
    @classmethod
    def _normalize_resource(cls, value: object) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("start_date", "end_date", "end", mode="before")
    @classmethod
    def _parse_date(cls, value: object) -> date | None:
        return to_date(value)

    def supplied(self) -> dict[str, Any]:
        """Fields explicitly set on this patch, including explicit ``None``."""
        return {name: getattr(self, name) for name in self.model_fields_set}

    def merged(self, **changes: Any) -> TaskPatch:
        """Return a patch carrying these fields plus ``changes`` (later wins)."""
        data = self.supplied()
        data.update(changes)
        return TaskPatch(**data)

    def clears_schedule(self) -> bool:
        """True when the patch explicitly nulls both ends of the date span."""
        fields = self.model_fields_set
        start_cleared = "start_date" in fields and self.start_date is None
        end_cleared = ("end_date" in fields and self.end_date is None) or (
            "end" in fields and self.end is None
        )
        return start_cleared and end_cleared

    @classmethod
    def unschedule(cls, **changes: Any) -> TaskPatch:
        """Patch removing resource and every date, plus ``changes``."""
        return cls(resource_id=None, start_date=None, end_date=None, end=None, **changes)
