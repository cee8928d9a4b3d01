"""Task edit form state and its field-coupling rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from planboard.core.task_status import LEAVE_TITLE, TaskStatus
from planboard.models.tasks import Task
from planboard.services.dates import format_date, to_date

TITLE_REQUIRED = "Title is required"
START_DATE_REQUIRED = "Start date is required"
END_DATE_REQUIRED = "End date is required"
END_BEFORE_START = "End date must be on or after the start date"
RESOURCE_REQUIRED_FOR_WIP = "An owner is required for a task in progress"
RESOURCE_REQUIRED_FOR_LEAVE = "An owner is required for a leave"

_WIP = TaskStatus.WIP.value
_ENTRANT = TaskStatus.ENTRANT.value


@dataclass
class TaskForm:
    """Editable copy of a task; dates are inclusive ``YYYY-MM-DD`` strings or ``""``."""

    id: int | str | None = None
    title: str = ""
    description: str = ""
    start_date: str = ""
    end_date: str = ""
    resource_id: str = ""
    status_id: str = ""
    is_conge: bool = False
    errors: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_task(cls, task: Task) -> TaskForm:
        scheduled = task.start_date is not None and task.end_date is not None
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            start_date=format_date(task.start_date) or "" if scheduled else "",
            end_date=format_date(task.end_date) or "" if scheduled else "",
            resource_id=task.resource_id or "",
            status_id=task.status_id,
            is_conge=task.is_leave,
        )

    @classmethod
    def from_selection(cls, start: object, resource_id: object = None) -> TaskForm:
        """New task prefilled from a timeline selection (same start and end day)."""
        day = format_date(start) or ""
        resource = str(resource_id) if resource_id not in (None, "") else ""
        return cls(
            start_date=day,
            end_date=day,
            resource_id=resource,
            status_id=_WIP if resource else "",
        )

    @property
    def is_new(self) -> bool:
        return self.id is None

    @property
    def start(self) -> date | None:
        return to_date(self.start_date)

    @property
    def end(self) -> date | None:
        return to_date(self.end_date)

    def change(self, name: str, value: object) -> None:
        """Set one field and apply the rules coupling status, owner and leave."""
        if name == "is_conge":
            self._toggle_leave(bool(value))
        elif name == "resource_id":
            self._select_resource("" if value is None else str(value))
        elif name == "status_id":
            self.status_id = "" if value is None else str(value)
            if self.status_id == _WIP and not self.resource_id and not self.is_conge:
                self.errors["resource_id"] = RESOURCE_REQUIRED_FOR_WIP
        elif name in {"title", "description", "start_date", "end_date"}:
            setattr(self, name, "" if value is None else str(value))
        else:
            raise KeyError(name)
        self.errors.pop(name, None)

    def _toggle_leave(self, checked: bool) -> None:
        self.is_conge = checked
        if checked:
            self.status_id = _WIP
            self.title = LEAVE_TITLE
            return
        self.title = ""
        if not self.resource_id:
            self.status_id = _ENTRANT

    def _select_resource(self, resource_id: str) -> None:
        self.resource_id = resource_id
        if resource_id:
            self.status_id = _WIP
        elif self.status_id == _WIP and not self.is_conge:
            self.status_id = _ENTRANT

    def validate(self) -> dict[str, str]:
        """Recompute field errors; an empty result means the form can be submitted."""
        errors: dict[str, str] = {}
        if not self.title.strip():
            errors["title"] = TITLE_REQUIRED
        if self.resource_id:
            if not self.start_date:
                errors["start_date"] = START_DATE_REQUIRED
            if not self.end_date:
                errors["end_date"] = END_DATE_REQUIRED
            start, end = self.start, self.end
            if start is not None and end is not None and start > end:
                errors["end_date"] = END_BEFORE_START
        if self.status_id == _WIP and not self.resource_id:
            errors["resource_id"] = RESOURCE_REQUIRED_FOR_WIP
        if self.is_conge and not self.resource_id:
            errors["resource_id"] = RESOURCE_REQUIRED_FOR_LEAVE
        self.errors = errors
        return errors
