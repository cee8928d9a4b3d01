# ruff: noqa: INP001
"""Logging formatter tests."""

from __future__ import annotations

import json
import logging

from planboard.core.logging import JsonFormatter, KeyValueFormatter, get_logger


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        "planboard.services.mutations",
        logging.WARNING,
        __file__,
        10,
        "task.mutation.remote_failed",
        None,
        None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_get_logger_is_namespaced_under_package() -> None:
    assert get_logger("planboard.services.board").name == "planboard.services.board"
    assert get_logger("scripts.seed").name == "planboard.scripts.seed"


def test_key_value_formatter_appends_extra_fields() -> None:
    formatter = KeyValueFormatter("%(levelname)s %(message)s")

    line = formatter.format(_record(task_id="7", status=500))

    assert line == "WARNING task.mutation.remote_failed status=500 task_id='7'"


def test_json_formatter_emits_event_and_extra() -> None:
    payload = json.loads(JsonFormatter(use_utc=True).format(_record(task_id="7")))

    assert payload["event"] == "task.mutation.remote_failed"
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "planboard.services.mutations"
    assert payload["task_id"] == "7"
    assert payload["timestamp"].endswith("+00:00")
