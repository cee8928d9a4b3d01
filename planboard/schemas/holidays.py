"""Public holiday records."""

from __future__ import annotations

from datetime import date

from sqlmodel import SQLModel

RUNTIME_ANNOTATION_TYPES = (date,)


class HolidayRecord(SQLModel):
    """A non-working public holiday."""

    day: date
    label: str
