# ruff: noqa: INP001
"""Workspace load and assembly tests."""

from __future__ import annotations

import pytest

from planboard.core.errors import DataLoadError
from planboard.models.resources import OwnerResource, TeamResource
from planboard.schemas.resources import OwnerRecord, TeamRecord
from planboard.services.api.errors import NetworkError
from planboard.services.assembly import (
    DEFAULT_TEAM_COLOR,
    LOAD_FAILED_MESSAGE,
    assemble_resources,
    assemble_tasks,
    load_workspace_data,
    validate_records,
)


class _Source:
    def __init__(self, payload: object = None, *, fail: bool = False) -> None:
        self.payload = payload
        self.fail = fail

    async def list(self) -> object:
        if self.fail:
            raise NetworkError()
        return self.payload


class _Holidays:
    def __init__(self, payload: dict[str, str] | None = None, *, fail: bool = False) -> None:
        self.payload = payload or {}
        self.fail = fail
        self.years: list[int] = []

    async def for_year(self, year: int) -> dict[str, str]:
        self.years.append(year)
        if self.fail:
            raise NetworkError()
        return self.payload


def test_resources_list_owners_before_teams() -> None:
    owners = [
        OwnerRecord(owner_id=7, name="Ada", team_id=1),
        OwnerRecord(owner_id=8, name="Linus", team_id=99),
    ]
    teams = [TeamRecord(team_id=1, name="Core")]

    directory = assemble_resources(owners, teams)

    resources = list(directory)
    assert [type(resource) for resource in resources] == [
        OwnerResource,
        OwnerResource,
        TeamResource,
    ]
    ada, linus, core = resources
    assert ada.parent_id == "team_1"
    assert ada.team_color == DEFAULT_TEAM_COLOR
    assert linus.team_id == "99"
    assert linus.parent_id is None
    assert directory.is_team(core.id)
    assert directory.members_of(core) == [ada]
    assert directory.display_name(None) == "Unassigned"
    assert directory.display_name("404") == "ID: 404"


def test_validate_records_drops_malformed_items() -> None:
    records = validate_records(
        [{"teamId": 1, "name": "Core"}, {"name": "no id"}, None],
        TeamRecord,
        source="teams",
    )

    assert [record.team_id for record in records] == [1]


def test_single_unwrapped_record_is_accepted() -> None:
    tasks = assemble_tasks({"id": 4, "title": "Audit"})

    assert [task.id for task in tasks] == [4]


@pytest.mark.asyncio
async def test_partial_failure_degrades_to_empty_collections() -> None:
    holidays = _Holidays({"2024-05-01": "1er mai"})

    data = await load_workspace_data(
        tasks=_Source([{"id": 1, "title": "Audit", "ownerId": 7}]),
        owners=_Source(fail=True),
        teams=_Source([{"teamId": 1, "name": "Core"}]),
        statuses=_Source([{"statusId": 1, "statusType": "Entrant"}]),
        holidays=holidays,
        year=2024,
    )

    assert data.failed_sources == ("owners",)
    assert [task.resource_id for task in data.tasks] == ["7"]
    assert [resource.id for resource in data.resources] == ["team_1"]
    assert [status.status_id for status in data.statuses] == ["1"]
    assert data.holidays == {"2024-05-01": "1er mai"}
    assert holidays.years == [2024]


@pytest.mark.asyncio
async def test_every_source_failing_raises_load_error() -> None:
    with pytest.raises(DataLoadError) as exc_info:
        await load_workspace_data(
            tasks=_Source(fail=True),
            owners=_Source(fail=True),
            teams=_Source(fail=True),
            statuses=_Source(fail=True),
            holidays=_Holidays(fail=True),
            year=2024,
        )

    assert exc_info.value.message == LOAD_FAILED_MESSAGE
