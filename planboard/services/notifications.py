"""Transient user notifications emitted by the interaction pipeline."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Literal
from uuid import UUID, uuid4

from planboard.core.config import settings
from planboard.core.logging import get_logger
from planboard.core.time import utcnow

logger = get_logger(__name__)

NotificationLevel = Literal["success", "info", "warning", "error"]

_LOG_LEVELS = {
    "success": logging.INFO,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass(frozen=True)
class Notification:
    """One dismissible message shown to the user."""

    level: NotificationLevel
    message: str
    created_at: datetime = field(default_factory=utcnow)
    id: UUID = field(default_factory=uuid4)

    def expires_at(self, ttl_seconds: float) -> datetime:
        return self.created_at + timedelta(seconds=ttl_seconds)


class Notifier:
    """Collects notifications; expired ones drop out of :meth:`active`."""

    def __init__(
        self,
        *,
        ttl_seconds: float | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.ttl_seconds = settings.notification_ttl_seconds if ttl_seconds is None else ttl_seconds
        self._clock = clock
        self._items: list[Notification] = []

    def notify(self, level: NotificationLevel, message: str) -> Notification:
        notification = Notification(level=level, message=message, created_at=self._clock())
        self._items.append(notification)
        logger.log(
            _LOG_LEVELS[level],
            "notification.emitted",
            extra={"level": level, "notification_message": message},
        )
        return notification

    def success(self, message: str) -> Notification:
        return self.notify("success", message)

    def info(self, message: str) -> Notification:
        return self.notify("info", message)

    def warning(self, message: str) -> Notification:
        return self.notify("warning", message)

    def error(self, message: str) -> Notification:
        return self.notify("error", message)

    def dismiss(self, notification_id: UUID) -> bool:
        for index, item in enumerate(self._items):
            if item.id == notification_id:
                del self._items[index]
                return True
        return False

    def clear(self) -> None:
        self._items.clear()

    def active(self) -> list[Notification]:
        """Notifications still within their display window."""
        now = self._clock()
        if self.ttl_seconds > 0:
            self._items = [
                item for item in self._items if item.expires_at(self.ttl_seconds) > now
            ]
        return list(self._items)

    @property
    def history(self) -> list[Notification]:
        """Everything not yet dismissed or pruned, expired or not."""
        return list(self._items)

    def of_level(self, level: NotificationLevel) -> list[Notification]:
        return [item for item in self._items if item.level == level]
