# ruff: noqa: INP001
"""Timeline handler tests: reorder, resize, selection and external drop."""

from __future__ import annotations

from datetime import date

import pytest

from planboard.core.errors import TaskNotFoundError, ValidationRejected
from planboard.models.resources import OwnerResource, ResourceDirectory, TeamResource
from planboard.models.tasks import Task
from planboard.services.mutations import NON_WORKING_BOUNDARIES, MutationCoordinator
from planboard.services.notifications import Notifier
from planboard.services.task_store import TaskStore
from planboard.services.timeline import (
    TEAM_TARGET,
    CalendarChange,
    TimelineHandlers,
)


class _Repository:
    def __init__(self) -> None:
        self.updates: list[Task] = []

    async def list(self) -> list[Task]:
        return []

    async def create(self, task: Task) -> Task:
        return task

    async def update(self, task_id: object, task: Task) -> Task:
        self.updates.append(task)
        return task

    async def delete(self, task_id: object) -> None:
        return None


def _handlers(*tasks: Task) -> tuple[TimelineHandlers, _Repository]:
    repository = _Repository()
    coordinator = MutationCoordinator(
        TaskStore(tasks),
        repository,
        Notifier(ttl_seconds=0),
        holidays={"2024-05-01": "Fête du Travail"},
    )
    resources = ResourceDirectory(
        [
            TeamResource(id="team_1", title="Core", team_id="1"),
            OwnerResource(id="7", title="Ada", parent_id="team_1"),
            OwnerResource(id="8", title="Grace", parent_id="team_1"),
        ],
    )
    return TimelineHandlers(coordinator, lambda: resources), repository


def _wip_task() -> Task:
    return Task(
        id=1,
        title="Migration",
        status_id="2",
        resource_id="7",
        start_date=date(2024, 6, 3),
        end_date=date(2024, 6, 4),
    )


def test_calendar_change_defaults_to_one_day() -> None:
    change = CalendarChange(task_id=1, start="2024-06-03T00:00:00")

    assert change.exclusive_end == date(2024, 6, 4)
    assert change.inclusive_end == date(2024, 6, 3)


@pytest.mark.asyncio
async def test_resize_onto_saturday_is_rejected_before_any_mutation() -> None:
    handlers, repository = _handlers(_wip_task())
    reverts: list[str] = []
    change = CalendarChange(
        task_id=1,
        start=date(2024, 6, 3),
        end=date(2024, 6, 9),
        resource_id="7",
        revert=lambda: reverts.append("reverted"),
    )

    outcome = await handlers.on_calendar_resize(change)

    assert isinstance(outcome.error, ValidationRejected)
    assert reverts == ["reverted"]
    assert repository.updates == []
    assert handlers.coordinator.store.get(1).end_date == date(2024, 6, 4)
    notifier = handlers.coordinator.notifier
    assert [n.message for n in notifier.of_level("warning")] == [NON_WORKING_BOUNDARIES]


@pytest.mark.asyncio
async def test_resize_converts_exclusive_end_to_inclusive() -> None:
    handlers, repository = _handlers(_wip_task())

    outcome = await handlers.on_calendar_resize(
        CalendarChange(task_id=1, start=date(2024, 6, 3), end=date(2024, 6, 8)),
    )

    task = handlers.coordinator.store.get(1)
    assert outcome.ok
    assert task.end_date == date(2024, 6, 7)
    assert task.end == date(2024, 6, 8)
    assert task.status_id == "2"
    assert repository.updates[0].end_date == date(2024, 6, 7)
    notifier = handlers.coordinator.notifier
    assert [n.message for n in notifier.of_level("success")] == ['Task "Migration" resized']


@pytest.mark.asyncio
async def test_drop_moves_task_to_another_owner() -> None:
    handlers, _ = _handlers(_wip_task())

    outcome = await handlers.on_calendar_drop(
        CalendarChange(task_id="1", start="2024-06-10", end="2024-06-12", resource_id="8"),
    )

    task = handlers.coordinator.store.get(1)
    assert outcome.ok
    assert task.resource_id == "8"
    assert (task.start_date, task.end_date) == (date(2024, 6, 10), date(2024, 6, 11))


@pytest.mark.asyncio
async def test_drop_on_holiday_is_rejected() -> None:
    handlers, repository = _handlers(_wip_task())

    outcome = await handlers.on_calendar_drop(
        CalendarChange(task_id=1, start="2024-05-01", end="2024-05-03", resource_id="7"),
    )

    assert isinstance(outcome.error, ValidationRejected)
    assert repository.updates == []


@pytest.mark.asyncio
async def test_drop_on_team_row_is_rejected() -> None:
    handlers, repository = _handlers(_wip_task())
    reverts: list[str] = []

    outcome = await handlers.on_calendar_drop(
        CalendarChange(
            task_id=1,
            start="2024-06-10",
            end="2024-06-11",
            resource_id="team_1",
            revert=lambda: reverts.append("reverted"),
        ),
    )

    assert outcome.error is not None and outcome.error.message == TEAM_TARGET
    assert reverts == ["reverted"]
    assert repository.updates == []


@pytest.mark.asyncio
async def test_change_for_unknown_task_is_reverted() -> None:
    handlers, repository = _handlers()
    reverts: list[str] = []

    outcome = await handlers.on_calendar_drop(
        CalendarChange(
            task_id=42,
            start="2024-06-10",
            revert=lambda: reverts.append("reverted"),
        ),
    )

    assert isinstance(outcome.error, TaskNotFoundError)
    assert reverts == ["reverted"]
    assert repository.updates == []


@pytest.mark.asyncio
async def test_external_drop_without_resource_is_kept_out_of_wip() -> None:
    handlers, _ = _handlers(Task(id=1, title="Audit"))

    outcome = await handlers.on_external_drop(1, "2024-06-04", None)

    task = handlers.coordinator.store.get(1)
    assert outcome.ok
    assert task.status_id == "1"
    assert task.start_date is None
    assert len(handlers.coordinator.notifier.of_level("warning")) == 1


def test_date_select_on_team_row_leaves_owner_empty() -> None:
    handlers, _ = _handlers()

    form = handlers.on_date_select("2024-06-04", "team_1")

    assert form.resource_id == ""
    assert form.status_id == ""
    assert (form.start_date, form.end_date) == ("2024-06-04", "2024-06-04")
    assert handlers.state.is_form_open


def test_date_select_on_owner_row_prefills_wip() -> None:
    handlers, _ = _handlers()

    form = handlers.on_date_select(date(2024, 6, 4), 7)

    assert (form.resource_id, form.status_id) == ("7", "2")


def test_task_select_opens_form_on_that_task() -> None:
    handlers, _ = _handlers(_wip_task())

    form = handlers.on_task_select(1)

    assert form is not None
    assert form.id == 1
    assert (form.start_date, form.end_date) == ("2024-06-03", "2024-06-04")
    assert handlers.state.selected_task_id == "1"
    assert handlers.on_task_select(99) is None
