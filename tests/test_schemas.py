# ruff: noqa: INP001
"""Task schema tests: record normalization, write payload and patches."""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from planboard.schemas.tasks import TaskPatch, TaskRecord, TaskWrite


def test_record_reads_extended_props_and_camel_case() -> None:
    record = TaskRecord.model_validate(
        {
            "id": "9",
            "title": "  ",
            "extendedProps": {"statusId": 4, "ownerId": 7},
            "startDate": "2024-06-03T00:00:00Z",
            "endDate": "2024-06-04",
        },
    )

    task = record.to_task()
    assert task.title == "Untitled task"
    assert (task.status_id, task.resource_id) == ("4", "7")
    assert (task.start_date, task.end_date) == (date(2024, 6, 3), date(2024, 6, 4))


def test_record_without_status_defaults_to_entrant() -> None:
    assert TaskRecord(id=1, title="Audit").to_task().status_id == "1"


def test_write_rejects_blank_title_and_reversed_dates() -> None:
    with pytest.raises(ValidationError):
        TaskWrite(title="   ")
    with pytest.raises(ValidationError):
        TaskWrite(title="Audit", start_date=date(2024, 6, 5), end_date=date(2024, 6, 3))


def test_write_payload_keeps_non_numeric_owner_ids() -> None:
    payload = TaskWrite(title="Audit", owner_id="ext-7").to_wire()

    assert payload["ownerId"] == "ext-7"
    assert payload["startDate"] is None


def test_patch_tracks_explicit_nulls() -> None:
    patch = TaskPatch(resource_id=None, status_id=3)

    assert patch.supplied() == {"resource_id": None, "status_id": "3"}
    assert not patch.clears_schedule()
    assert TaskPatch.unschedule().clears_schedule()
    assert patch.merged(status_id="1").supplied() == {"resource_id": None, "status_id": "1"}
