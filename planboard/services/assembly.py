"""Load-time assembly of remote record sets into the workspace graph.

Five independent sources (tasks, owners, teams, statuses, holidays) are
fetched concurrently. A failing source degrades to an empty collection; only
when every source fails is the load reported as an error. Malformed records
are dropped one by one at this boundary so the rest of the engine only ever
sees canonical :class:`~planboard.models.tasks.Task` values.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, TypeVar

from pydantic import ValidationError
from sqlmodel import SQLModel

from planboard.core.errors import DataLoadError
from planboard.core.logging import get_logger
from planboard.core.time import today
from planboard.models.resources import (
    OwnerResource,
    Resource,
    ResourceDirectory,
    TeamResource,
    team_resource_id,
)
from planboard.models.tasks import Task
from planboard.schemas.resources import OwnerRecord, TeamRecord
from planboard.schemas.statuses import StatusRecord
from planboard.schemas.tasks import TaskRecord

logger = get_logger(__name__)

DEFAULT_TEAM_COLOR = "#797d7d"
LOAD_FAILED_MESSAGE = "Unable to load data. Please try again later."

RecordT = TypeVar("RecordT", bound=SQLModel)


class RecordSource(Protocol):
    async def list(self) -> list[Any]: ...


class TaskSource(Protocol):
    async def list(self) -> list[Task]: ...


class HolidaySource(Protocol):
    async def for_year(self, year: int) -> Mapping[str, str]: ...


@dataclass
class WorkspaceData:
    """Everything the surfaces need after a load."""

    tasks: list[Task] = field(default_factory=list)
    resources: ResourceDirectory = field(default_factory=ResourceDirectory)
    statuses: list[StatusRecord] = field(default_factory=list)
    holidays: dict[str, str] = field(default_factory=dict)
    failed_sources: tuple[str, ...] = ()


def _as_items(payload: object) -> list[object]:
    if payload is None:
        return []
    if isinstance(payload, list | tuple):
        return list(payload)
    # A single record sometimes comes back unwrapped.
    return [payload]


def validate_records(
    payload: object,
    model: type[RecordT],
    *,
    source: str,
) -> list[RecordT]:
    """Validate each item independently, dropping (and logging) malformed ones."""
    records: list[RecordT] = []
    for position, item in enumerate(_as_items(payload)):
        if item is None:
            continue
        if isinstance(item, model):
            records.append(item)
            continue
        try:
            records.append(model.model_validate(item))
        except ValidationError as exc:
            logger.warning(
                "workspace.load.record_dropped",
                extra={
                    "source": source,
                    "position": position,
                    "error_count": exc.error_count(),
                },
            )
    return records


def assemble_tasks(payload: object) -> list[Task]:
    """Canonical tasks from raw task records; malformed records are skipped."""
    items = _as_items(payload)
    ready = [item for item in items if isinstance(item, Task)]
    raw = [item for item in items if not isinstance(item, Task)]
    return ready + [
        record.to_task() for record in validate_records(raw, TaskRecord, source="tasks")
    ]


def assemble_resources(
    owners: Iterable[OwnerRecord],
    teams: Iterable[TeamRecord],
) -> ResourceDirectory:
    """Owners first, then one container row per team.

    Owners whose team is unknown keep their ``team_id`` but get no parent.
    """
    team_rows: dict[str, TeamResource] = {}
    for team in teams:
        key = str(team.team_id)
        team_rows[key] = TeamResource(
            id=team_resource_id(key),
            title=team.name,
            team_id=key,
            color=team.color or DEFAULT_TEAM_COLOR,
        )

    resources: list[Resource] = []
    for owner in owners:
        team_id = str(owner.team_id) if owner.team_id is not None else None
        team = team_rows.get(team_id) if team_id is not None else None
        resources.append(
            OwnerResource(
                id=str(owner.owner_id),
                title=owner.name,
                team_id=team_id,
                parent_id=team.id if team is not None else None,
                team_name=team.title if team is not None else None,
                team_color=team.color if team is not None else None,
            ),
        )
    resources.extend(team_rows.values())
    return ResourceDirectory(resources)


async def load_workspace_data(
    *,
    tasks: TaskSource,
    owners: RecordSource,
    teams: RecordSource,
    statuses: RecordSource,
    holidays: HolidaySource,
    year: int | None = None,
) -> WorkspaceData:
    """Fetch all sources concurrently and assemble them.

    Raises :class:`DataLoadError` only when every source failed.
    """
    year = year or today().year
    names = ("holidays", "owners", "tasks", "statuses", "teams")
    results = await asyncio.gather(
        holidays.for_year(year),
        owners.list(),
        tasks.list(),
        statuses.list(),
        teams.list(),
        return_exceptions=True,
    )

    values: dict[str, Any] = {}
    failed: list[str] = []
    for name, result in zip(names, results, strict=True):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            failed.append(name)
            logger.error(
                "workspace.load.source_failed",
                extra={"source": name, "error": str(result) or type(result).__name__},
            )
            values[name] = None
        else:
            values[name] = result

    if len(failed) == len(names):
        raise DataLoadError(LOAD_FAILED_MESSAGE)

    owner_records = validate_records(values["owners"], OwnerRecord, source="owners")
    team_records = validate_records(values["teams"], TeamRecord, source="teams")
    data = WorkspaceData(
        tasks=assemble_tasks(values["tasks"]),
        resources=assemble_resources(owner_records, team_records),
        statuses=validate_records(values["statuses"], StatusRecord, source="statuses"),
        holidays=dict(values["holidays"] or {}),
        failed_sources=tuple(failed),
    )
    logger.info(
        "workspace.load.completed",
        extra={
            "task_count": len(data.tasks),
            "resource_count": len(data.resources),
            "status_count": len(data.statuses),
            "holiday_count": len(data.holidays),
            "failed_sources": ",".join(failed),
        },
    )
    return data
