"""Status records and the drop zones derived from them."""

from __future__ import annotations

from typing import Any

from pydantic import field_validator, model_validator
from sqlmodel import SQLModel

from planboard.core.task_status import normalize_status_id


class StatusRecord(SQLModel):
    """One status column; ``status_id`` is the ordered key."""

    id: int | str | None = None
    status_id: str
    status_type: str

    @model_validator(mode="before")
    @classmethod
    def _accept_camel_case(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        normalized = dict(data)
        if normalized.get("status_id") is None and "statusId" in normalized:
            normalized["status_id"] = normalized.pop("statusId")
        if normalized.get("status_type") is None and "statusType" in normalized:
            normalized["status_type"] = normalized.pop("statusType")
        return normalized

    @field_validator("status_id", mode="before")
    @classmethod
    def _normalize_status(cls, value: object) -> str:
        normalized = normalize_status_id(value)
        if normalized is None:
            raise ValueError("status_id is required")
        return normalized


class DropZone(SQLModel):
    """A status column on the board as a drag-and-drop target."""

    status_id: str
    title: str
    disabled: bool = False
