"""Period calculator — pure date math.

Maps a recurrence type and a reference moment to the boundaries of the
period that contains it. Boundaries are inclusive local datetimes:
start at 00:00:00.000, end at 23:59:59.999.

No I/O: this module only transforms data.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from src.data.models import WEEKDAYS

_END_OF_DAY = time(23, 59, 59, 999000)


@dataclass(frozen=True)
class Period:
    """Inclusive [start, end] window."""

    start: datetime
    end: datetime

    def contains(self, moment: date | datetime) -> bool:
        if not isinstance(moment, datetime):
            moment = start_of_day(moment)
        return self.start <= moment <= self.end


def start_of_day(day: date | datetime) -> datetime:
    if isinstance(day, datetime):
        day = day.date()
    return datetime.combine(day, time.min)


def end_of_day(day: date | datetime) -> datetime:
    if isinstance(day, datetime):
        day = day.date()
    return datetime.combine(day, _END_OF_DAY)


def weekday_name(day: date | datetime) -> str:
    """Lowercase weekday name, e.g. "monday"."""
    return WEEKDAYS[day.weekday()]


def same_day(a: date | datetime, b: date | datetime) -> bool:
    """Compare two moments at calendar-day granularity."""
    if isinstance(a, datetime):
        a = a.date()
    if isinstance(b, datetime):
        b = b.date()
    return a == b


def compute_period(
    recurrence_type: str,
    reference: date | datetime,
    week_start: str | None = "monday",
) -> Period:
    """Return the period of ``recurrence_type`` that contains ``reference``.

    Args:
        recurrence_type: "daily", "weekly", "monthly", "yearly" or
            "specific_days". Anything else is treated as daily.
        reference: Any moment inside the wanted period.
        week_start: First day of the week for weekly/specific_days
            (lowercase weekday name). Unknown names fall back to Monday.

    Returns:
        The inclusive Period. Never raises.
    """
    day = reference.date() if isinstance(reference, datetime) else reference

    if recurrence_type in ("weekly", "specific_days"):
        start_index = _weekday_index(week_start)
        offset = (day.weekday() - start_index) % 7
        first = day - timedelta(days=offset)
        return Period(start_of_day(first), end_of_day(first + timedelta(days=6)))

    if recurrence_type == "monthly":
        last = calendar.monthrange(day.year, day.month)[1]
        return Period(
            start_of_day(day.replace(day=1)),
            end_of_day(day.replace(day=last)),
        )

    if recurrence_type == "yearly":
        return Period(
            start_of_day(date(day.year, 1, 1)),
            end_of_day(date(day.year, 12, 31)),
        )

    return Period(start_of_day(day), end_of_day(day))


def _weekday_index(name: str | None) -> int:
    if name and name.lower() in WEEKDAYS:
        return WEEKDAYS.index(name.lower())
    return 0
