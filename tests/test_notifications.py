# ruff: noqa: INP001
"""Notification queue tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from planboard.services.notifications import Notifier


class _Clock:
    def __init__(self) -> None:
        self.now = datetime(2024, 6, 3, 9, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now


def test_notifications_expire_after_ttl() -> None:
    clock = _Clock()
    notifier = Notifier(ttl_seconds=3, clock=clock)
    notifier.success("Task created")
    clock.now += timedelta(seconds=2)
    notifier.warning("Start and end dates must be working days")

    clock.now += timedelta(seconds=2)
    active = notifier.active()

    assert [item.level for item in active] == ["warning"]


def test_zero_ttl_keeps_everything() -> None:
    clock = _Clock()
    notifier = Notifier(ttl_seconds=0, clock=clock)
    notifier.error("Failed to update the task")
    clock.now += timedelta(days=1)

    assert len(notifier.active()) == 1


def test_default_ttl_comes_from_settings() -> None:
    assert Notifier().ttl_seconds == 3


def test_dismiss_and_clear() -> None:
    notifier = Notifier(ttl_seconds=0)
    first = notifier.info("Loading")
    notifier.error("Failed")

    assert notifier.dismiss(first.id) is True
    assert notifier.dismiss(first.id) is False
    assert [item.message for item in notifier.history] == ["Failed"]
    notifier.clear()
    assert notifier.history == []
