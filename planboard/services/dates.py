"""Date semantics shared by every scheduling path.

Two end-date conventions coexist:

- storage/API: the end date is *inclusive* (the last day belongs to the task);
- timeline display: the end date is *exclusive* (the first day after the task).

Every conversion between them goes through this module. All helpers accept a
``date``, a ``datetime`` or an ISO string, and treat unparsable input as
missing (``None`` / ``False``) instead of raising, so a bad value cannot crash
a mutation pipeline.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, timedelta
from typing import TypeAlias

DateInput: TypeAlias = date | datetime | str | None
HolidaySet: TypeAlias = Mapping[str, str]

ONE_DAY = timedelta(days=1)
_SATURDAY = 5


def to_date(value: object) -> date | None:
    """Coerce a date-like value to a calendar ``date``; ``None`` when unusable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    raw = value.strip()
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(raw[:10])
    except ValueError:
        return None


def format_date(value: object) -> str | None:
    """Render a date-like value as ``YYYY-MM-DD``."""
    parsed = to_date(value)
    return parsed.isoformat() if parsed is not None else None


def to_exclusive_end(inclusive_end: object) -> date | None:
    """Convert an inclusive end date (storage) to an exclusive one (display)."""
    parsed = to_date(inclusive_end)
    return parsed + ONE_DAY if parsed is not None else None


def to_inclusive_end(exclusive_end: object) -> date | None:
    """Convert an exclusive end date (display) to an inclusive one (storage)."""
    parsed = to_date(exclusive_end)
    return parsed - ONE_DAY if parsed is not None else None


def resolve_inclusive_end(*, inclusive: object = None, exclusive: object = None) -> date | None:
    """Pick the inclusive end, deriving it from the exclusive one when needed."""
    parsed = to_date(inclusive)
    if parsed is not None:
        return parsed
    return to_inclusive_end(exclusive)


def inclusive_end_of(item: object) -> date | None:
    """Inclusive end of a task-like object or mapping.

    Prefers an explicit inclusive ``end_date``/``endDate`` and falls back to
    the exclusive ``end`` shown by the timeline.
    """
    if isinstance(item, Mapping):
        inclusive = item.get("end_date", item.get("endDate"))
        exclusive = item.get("end")
    else:
        inclusive = getattr(item, "end_date", None)
        exclusive = getattr(item, "end", None) if inclusive is None else None
    return resolve_inclusive_end(inclusive=inclusive, exclusive=exclusive)


def is_weekend(value: object) -> bool:
    parsed = to_date(value)
    return parsed is not None and parsed.weekday() >= _SATURDAY


def is_holiday(value: object, holidays: HolidaySet | None) -> bool:
    if not holidays:
        return False
    key = format_date(value)
    return key is not None and bool(holidays.get(key))


def is_non_working_day(value: object, holidays: HolidaySet | None = None) -> bool:
    return is_weekend(value) or is_holiday(value, holidays)


def has_valid_boundaries(start: object, end: object, holidays: HolidaySet | None = None) -> bool:
    """Return True when both boundaries parse and fall on working days.

    This is the single gate in front of every persisted scheduling mutation.
    ``end`` is the *inclusive* last day.
    """
    start_date = to_date(start)
    end_date = to_date(end)
    if start_date is None or end_date is None:
        return False
    return not is_non_working_day(start_date, holidays) and not is_non_working_day(
        end_date,
        holidays,
    )


def working_days_between(start: object, end: object, holidays: HolidaySet | None = None) -> int:
    """Count working days in the inclusive range ``[start, end]``."""
    start_date = to_date(start)
    end_date = to_date(end)
    if start_date is None or end_date is None or end_date < start_date:
        return 0
    count = 0
    current = start_date
    while current <= end_date:
        if not is_non_working_day(current, holidays):
            count += 1
        current += ONE_DAY
    return count


def week_number(value: object) -> int | None:
    parsed = to_date(value)
    return parsed.isocalendar().week if parsed is not None else None


def holidays_from_pairs(pairs: Mapping[str, str] | list[tuple[object, str]]) -> dict[str, str]:
    """Build a holiday set keyed by ``YYYY-MM-DD``, skipping unparsable dates."""
    items = pairs.items() if isinstance(pairs, Mapping) else pairs
    holidays: dict[str, str] = {}
    for raw_date, label in items:
        key = format_date(raw_date)
        if key is not None:
            holidays[key] = label
    return holidays
