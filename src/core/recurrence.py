"""Recurrence rules — targets, validation and display labels.

Validation runs only at the creation/edit boundary. The due-date evaluator
and the completion ledger never call it; they treat missing optional fields
as "never due" or "zero target" instead.
"""

from __future__ import annotations

import re

from src.data.models import RECURRENCE_TYPES, WEEKDAYS, Recurrence

_HHMM_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

_TIMES_FIELDS = {
    "daily": "times_per_day",
    "weekly": "times_per_week",
    "monthly": "times_per_month",
    "yearly": "times_per_year",
}


class InvalidRecurrence(ValueError):
    """Raised when a recurrence is missing fields its type requires."""


def compute_target(recurrence: Recurrence) -> int:
    """Number of completions expected per period.

    specific_days habits need one completion per selected weekday; the other
    types use their times-per-period setting, defaulting to 1.
    """
    if recurrence.type == "specific_days":
        return len(recurrence.days_of_week or [])

    attr = _TIMES_FIELDS.get(recurrence.type)
    if attr is None:
        return 0
    value = getattr(recurrence, attr)
    return value if value else 1


def validate_recurrence(recurrence: Recurrence) -> None:
    """Reject a recurrence that cannot be evaluated as declared.

    Raises:
        InvalidRecurrence: with a message naming the offending field.
    """
    if recurrence.type not in RECURRENCE_TYPES:
        raise InvalidRecurrence(f"Unknown recurrence type: {recurrence.type!r}")

    for attr in _TIMES_FIELDS.values():
        value = getattr(recurrence, attr)
        if value is not None and value < 1:
            raise InvalidRecurrence(f"{attr} must be a positive integer, got {value}")

    if recurrence.type == "specific_days" and not recurrence.days_of_week:
        raise InvalidRecurrence("specific_days requires at least one day of the week")

    _check_weekdays("days_of_week", recurrence.days_of_week)
    _check_weekdays("preferred_days_of_week", recurrence.preferred_days_of_week)
    _check_weekdays("week_start", [recurrence.week_start])

    for day in recurrence.days_of_month or []:
        if not 1 <= day <= 31:
            raise InvalidRecurrence(f"days_of_month out of range: {day}")

    for month in recurrence.months_of_year or []:
        if not 1 <= month <= 12:
            raise InvalidRecurrence(f"months_of_year out of range: {month}")

    if recurrence.type == "yearly" and (
        bool(recurrence.months_of_year) != bool(recurrence.days_of_month)
    ):
        raise InvalidRecurrence(
            "yearly recurrence needs both months_of_year and days_of_month, or neither"
        )

    for hhmm in recurrence.specific_times:
        if not _HHMM_RE.match(hhmm):
            raise InvalidRecurrence(f"specific_times entry is not HH:MM: {hhmm!r}")


def _check_weekdays(field_name: str, values: list[str] | None) -> None:
    for value in values or []:
        if value not in WEEKDAYS:
            raise InvalidRecurrence(f"{field_name} has a non-canonical weekday: {value!r}")


def recurrence_label(recurrence: Recurrence) -> str:
    """Short human label, e.g. "Daily", "3x weekly", "Mon, Wed"."""
    attr = _TIMES_FIELDS.get(recurrence.type)
    if attr is not None:
        times = getattr(recurrence, attr)
        if times and times > 1:
            return f"{times}x {recurrence.type}"
        return recurrence.type.capitalize()

    if recurrence.type == "specific_days":
        days = recurrence.days_of_week or []
        if not days:
            return "Specific days"
        if len(days) == 1:
            return days[0].capitalize()
        if len(days) <= 3:
            return ", ".join(d[:3].capitalize() for d in days)
        return f"{len(days)} days/week"

    return recurrence.type
