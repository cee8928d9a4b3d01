"""Logging configuration and logger factory.

Event names are dotted identifiers (``task.mutation.remote_failed``) and
structured context travels through ``extra=``; both formatters render those
extra fields alongside the message.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from datetime import UTC, datetime

from planboard.core.config import settings

_ROOT_LOGGER_NAME = "planboard"
_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
# Attributes present on every LogRecord; anything else came from `extra=`.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None)).keys() | {"message", "asctime"},
)


def _extra_fields(record: logging.LogRecord) -> dict[str, object]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


class KeyValueFormatter(logging.Formatter):
    """Human-readable formatter that appends `extra` fields as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extra = _extra_fields(record)
        if not extra:
            return base
        pairs = " ".join(f"{key}={value!r}" for key, value in sorted(extra.items()))
        return f"{base} {pairs}"


class JsonFormatter(logging.Formatter):
    """One JSON object per line, suitable for log shippers."""

    def __init__(self, *, use_utc: bool = False) -> None:
        super().__init__()
        self._use_utc = use_utc

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=UTC)
        if not self._use_utc:
            created = created.astimezone()
        payload: dict[str, object] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        payload.update(_extra_fields(record))
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, ensure_ascii=True)


def _build_formatter() -> logging.Formatter:
    if settings.log_format == "json":
        return JsonFormatter(use_utc=settings.log_use_utc)
    formatter = KeyValueFormatter(_TEXT_FORMAT)
    if settings.log_use_utc:
        formatter.converter = time.gmtime
    return formatter


def configure_logging() -> None:
    """Install a single stream handler on the package logger."""
    logger = logging.getLogger(_ROOT_LOGGER_NAME)
    logger.setLevel(settings.log_level.upper())
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_build_formatter())
    logger.addHandler(handler)
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Return a logger namespaced under the package root."""
    if name == _ROOT_LOGGER_NAME or name.startswith(f"{_ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT_LOGGER_NAME}.{name}")
