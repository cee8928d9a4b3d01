# ruff: noqa: INP001
"""Workspace facade tests: loading and cross-surface handlers."""

from __future__ import annotations

from datetime import date

import httpx
import pytest

from planboard.models.tasks import Task
from planboard.services.api import ApiClient, NetworkError
from planboard.services.assembly import LOAD_FAILED_MESSAGE
from planboard.services.dnd import CellTarget, DragPhase, Point, Rect
from planboard.services.workspace import Workspace


class _Repository:
    def __init__(self, tasks: list[Task] | None = None, *, fail: bool = False) -> None:
        self.tasks = tasks or []
        self.fail = fail
        self.updates: list[Task] = []

    async def list(self) -> list[Task]:
        if self.fail:
            raise NetworkError()
        return list(self.tasks)

    async def create(self, task: Task) -> Task:
        return task.with_changes(id=50)

    async def update(self, task_id: object, task: Task) -> Task:
        self.updates.append(task)
        return task

    async def delete(self, task_id: object) -> None:
        return None


class _Source:
    def __init__(self, payload: object = None, *, fail: bool = False) -> None:
        self.payload = payload or []
        self.fail = fail

    async def list(self) -> object:
        if self.fail:
            raise NetworkError()
        return self.payload


class _Holidays:
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail

    async def for_year(self, year: int) -> dict[str, str]:
        if self.fail:
            raise NetworkError()
        return {f"{year}-05-01": "Fête du Travail"}


def _workspace(*, fail: bool = False) -> Workspace:
    return Workspace(
        _Repository([Task(id=1, title="Audit"), Task(id=2, title="Ship", status_id="3")], fail=fail),
        owners=_Source([{"ownerId": 7, "name": "Ada", "teamId": 1}], fail=fail),
        teams=_Source([{"teamId": 1, "name": "Core"}], fail=fail),
        statuses=_Source(fail=fail),
        holidays=_Holidays(fail=fail),
    )


@pytest.mark.asyncio
async def test_load_installs_tasks_resources_and_holidays() -> None:
    workspace = _workspace()

    data = await workspace.load(year=2024)

    assert data is not None
    assert workspace.loading is False
    assert workspace.error is None
    assert [task.id for task in workspace.store] == [1, 2]
    assert [resource.id for resource in workspace.resources] == ["7", "team_1"]
    assert workspace.holidays == {"2024-05-01": "Fête du Travail"}
    assert [zone.status_id for zone in workspace.board.zones] == ["1", "2", "3", "4"]


@pytest.mark.asyncio
async def test_load_failure_sets_error_and_notifies() -> None:
    workspace = _workspace(fail=True)

    data = await workspace.load(year=2024)

    assert data is None
    assert workspace.error == LOAD_FAILED_MESSAGE
    assert [n.message for n in workspace.notifier.of_level("error")] == [LOAD_FAILED_MESSAGE]
    assert workspace.loading is False


@pytest.mark.asyncio
async def test_load_without_sources_is_a_programming_error() -> None:
    with pytest.raises(RuntimeError):
        await Workspace(_Repository()).load()


@pytest.mark.asyncio
async def test_moving_to_wip_on_board_opens_form_instead_of_mutating() -> None:
    workspace = _workspace()
    await workspace.load(year=2024)

    outcome = await workspace.on_move(1, "right")

    assert outcome is None
    assert workspace.state.is_form_open
    assert workspace.state.form is not None
    assert workspace.state.form.status_id == "2"
    assert workspace.state.selected_task_id == "1"
    assert workspace.repository.updates == []

    workspace.on_form_change("resource_id", "7")
    workspace.on_form_change("start_date", "2024-06-03")
    workspace.on_form_change("end_date", "2024-06-04")
    submitted = await workspace.on_task_submit()

    assert submitted.ok
    assert workspace.state.is_form_open is False
    task = workspace.store.get(1)
    assert (task.status_id, task.resource_id, task.end_date) == ("2", "7", date(2024, 6, 4))


@pytest.mark.asyncio
async def test_move_left_from_first_column_is_a_no_op() -> None:
    workspace = _workspace()
    await workspace.load(year=2024)

    assert await workspace.on_move(1, "left") is None
    outcome = await workspace.on_move(2, "right")

    assert outcome is not None and outcome.ok
    assert workspace.store.get(2).status_id == "4"


@pytest.mark.asyncio
async def test_create_from_board_button_and_delete_closes_form() -> None:
    workspace = _workspace()
    await workspace.load(year=2024)

    form = workspace.on_create_task(3)
    assert form.status_id == "3"
    workspace.on_form_change("title", "Write docs")
    created = await workspace.on_task_submit()
    assert created.ok and created.task is not None
    assert workspace.store.get(50).status_id == "3"

    workspace.on_task_select(50)
    deleted = await workspace.on_delete(50)

    assert deleted.ok
    assert 50 not in workspace.store
    assert workspace.state.is_form_open is False


@pytest.mark.asyncio
async def test_board_card_dragged_onto_timeline_cell() -> None:
    workspace = _workspace()
    await workspace.load(year=2024)
    workspace.dnd.set_targets(
        cells=[CellTarget(resource_id="7", day=date(2024, 6, 4), rect=Rect(0, 0, 10, 10))],
    )

    workspace.on_drag_start(1, Point(50, 50), surface="board")
    assert workspace.on_drag_move(Point(5, 5)) is not None
    result = await workspace.on_external_drag_stop(Point(5, 5))

    assert result.phase is DragPhase.DROPPED
    task = workspace.store.get(1)
    assert (task.status_id, task.start_date) == ("2", date(2024, 6, 4))
    workspace.teardown()
    assert workspace.dnd.tracker.listener_count == 0


@pytest.mark.asyncio
async def test_from_client_loads_over_http() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "calendrier.api.gouv.fr":
            return httpx.Response(200, json={"2024-12-25": "Noël"})
        routes = {
            "/api/tasks": [{"id": 1, "title": "Audit", "statusId": 1}],
            "/api/owners": [{"ownerId": 7, "name": "Ada"}],
            "/api/teams": [],
        }
        if request.url.path in routes:
            return httpx.Response(200, json=routes[request.url.path])
        return httpx.Response(500, json={"error": "boom"})

    async with ApiClient(
        base_url="http://planboard.test",
        transport=httpx.MockTransport(handler),
    ) as client:
        workspace = Workspace.from_client(client)
        data = await workspace.load(year=2024)

    assert data is not None
    assert data.failed_sources == ("statuses",)
    assert workspace.holidays == {"2024-12-25": "Noël"}
    assert [task.title for task in workspace.store] == ["Audit"]
    assert [status.status_id for status in workspace.board.sequence.records] == ["1", "2", "3", "4"]
