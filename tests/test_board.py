# ruff: noqa: INP001
"""Status board tests."""

from __future__ import annotations

from datetime import date

import pytest

from planboard.models.tasks import Task
from planboard.schemas.statuses import StatusRecord
from planboard.services.board import TaskBoard, build_drop_zones, column_patch, tasks_for_column
from planboard.services.mutations import MutationCoordinator
from planboard.services.notifications import Notifier
from planboard.services.status_machine import StatusSequence
from planboard.services.task_store import TaskStore


class _Repository:
    async def list(self) -> list[Task]:
        return []

    async def create(self, task: Task) -> Task:
        return task

    async def update(self, task_id: object, task: Task) -> Task:
        return task

    async def delete(self, task_id: object) -> None:
        return None


def _scheduled_wip() -> Task:
    return Task(
        id=3,
        title="Migration",
        status_id="2",
        resource_id="7",
        start_date=date(2024, 6, 3),
        end_date=date(2024, 6, 5),
    )


def test_drop_zones_follow_status_order_with_wip_disabled() -> None:
    statuses = [
        StatusRecord(status_id="4", status_type="Done"),
        StatusRecord(status_id="1", status_type="Entrant"),
        StatusRecord(status_id="2", status_type="WIP"),
    ]

    zones = build_drop_zones(statuses)

    assert [(zone.status_id, zone.disabled) for zone in zones] == [
        ("1", False),
        ("2", True),
        ("4", False),
    ]


def test_leave_tasks_never_appear_in_columns() -> None:
    tasks = [
        Task(id=1, title="Audit", status_id="2"),
        Task(id=2, title="CONGE", status_id="2", is_conge=True),
        Task(id=3, title="Review", status_id="3"),
    ]

    assert [task.id for task in tasks_for_column(tasks, "2")] == [1]
    assert [task.id for task in tasks_for_column(tasks, 3)] == [3]


def test_leaving_wip_drops_the_schedule() -> None:
    patch = column_patch(_scheduled_wip(), "3")

    assert patch.supplied() == {
        "status_id": "3",
        "resource_id": None,
        "start_date": None,
        "end_date": None,
        "end": None,
    }
    assert column_patch(Task(id=1, title="Audit"), "4").supplied() == {"status_id": "4"}


@pytest.mark.asyncio
async def test_move_to_column_persists_and_reports_column_title() -> None:
    notifier = Notifier(ttl_seconds=0)
    coordinator = MutationCoordinator(TaskStore([_scheduled_wip()]), _Repository(), notifier)
    board = TaskBoard(coordinator, StatusSequence())

    outcome = await board.move_to_column(3, "3")

    task = coordinator.store.get(3)
    assert outcome.ok
    assert task.status_id == "3"
    assert (task.resource_id, task.start_date, task.end_date) == (None, None, None)
    assert [n.message for n in notifier.of_level("success")] == ["Task moved to En-Attente"]


def test_tasks_by_zone_and_move_options() -> None:
    coordinator = MutationCoordinator(
        TaskStore(
            [
                Task(id=1, title="Audit", status_id="1"),
                Task(id=2, title="Ship", status_id="4"),
                Task(id=5, title="CONGE", status_id="2", is_conge=True),
            ],
        ),
        _Repository(),
        Notifier(ttl_seconds=0),
    )
    board = TaskBoard(coordinator, StatusSequence())

    grouped = {zone.status_id: [task.id for task in tasks] for zone, tasks in board.tasks_by_zone()}

    assert grouped == {"1": [1], "2": [], "3": [], "4": [2]}
    entrant = coordinator.store.get(1)
    assert board.move_options(entrant).can_move_left is False
    assert board.move_target(entrant, "right") == "2"
    leave = coordinator.store.get(5)
    assert board.move_options(leave).can_move_left is False
    assert board.move_options(leave).can_move_right is False
