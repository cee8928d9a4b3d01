"""Owner and team records as returned by the remote API."""

from __future__ import annotations

from typing import Any

from pydantic import field_validator, model_validator
from sqlmodel import SQLModel


def _camel_to_snake(data: Any, aliases: dict[str, str]) -> Any:
    if not isinstance(data, dict):
        return data
    normalized = dict(data)
    for camel, snake in aliases.items():
        if camel in normalized and normalized.get(snake) is None:
            normalized[snake] = normalized.pop(camel)
    return normalized


class OwnerRecord(SQLModel):
    """Person record; ``owner_id`` is the id used for task assignment."""

    id: int | str | None = None
    owner_id: int | str
    name: str
    team_id: int | str | None = None
    user_id: int | str | None = None

    @model_validator(mode="before")
    @classmethod
    def _accept_camel_case(cls, data: Any) -> Any:
        return _camel_to_snake(
            data,
            {"ownerId": "owner_id", "teamId": "team_id", "userId": "user_id"},
        )


class TeamRecord(SQLModel):
    """Team record grouping owners."""

    team_id: int | str
    name: str = "Unnamed team"
    color: str | None = None
    description: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _accept_camel_case(cls, data: Any) -> Any:
        return _camel_to_snake(data, {"teamId": "team_id"})

    @field_validator("name", mode="before")
    @classmethod
    def _default_name(cls, value: object) -> str:
        text = str(value).strip() if value is not None else ""
        return text or "Unnamed team"
