"""Due-date evaluator — pure business logic.

Decides whether a habit should be shown and actionable on a calendar date.

Rule precedence:
1. Inactive habits are never due.
2. A date inside the current period on which the habit was completed is
   due, so completed instances stay visible and toggleable even when they
   fall off-schedule.
3. Otherwise the recurrence type decides. Frequency-based weekly and
   monthly habits answer the same for every day of the period until the
   quota is met.

No I/O: this module only transforms data.
"""

from __future__ import annotations

from datetime import date, datetime

from src.core.periods import Period, same_day, weekday_name
from src.data.models import Habit, PeriodProgress


def is_due(habit: Habit, on_date: date | datetime) -> bool:
    """Return True if ``habit`` is due on ``on_date``.

    Reads the current period as stored and never rolls it over. Callers
    holding a possibly stale habit must run ``ledger.roll_over`` first
    (HabitService does this before every read).
    """
    if not habit.active:
        return False

    if completed_in_current_period(habit, on_date):
        return True

    recurrence = habit.recurrence
    current = habit.progress.current_period
    kind = recurrence.type

    if kind == "daily":
        return True

    if kind == "weekly":
        return current.completions < current.target

    if kind == "monthly":
        if recurrence.days_of_month:
            return on_date.day in recurrence.days_of_month
        return current.completions < current.target

    if kind == "yearly":
        if not recurrence.months_of_year or not recurrence.days_of_month:
            return False
        return (
            on_date.month in recurrence.months_of_year
            and on_date.day in recurrence.days_of_month
        )

    if kind == "specific_days":
        return weekday_name(on_date) in (recurrence.days_of_week or [])

    return False


def completed_in_current_period(habit: Habit, on_date: date | datetime) -> bool:
    """True if ``on_date`` lies in the current period and was completed."""
    current = habit.progress.current_period
    if not Period(current.period_start, current.period_end).contains(on_date):
        return False
    return _has_completion_on(current, on_date)


def completed_on(habit: Habit, on_date: date | datetime) -> bool:
    """True if the habit was completed on ``on_date`` in any period."""
    if _has_completion_on(habit.progress.current_period, on_date):
        return True
    return any(_has_completion_on(p, on_date) for p in habit.progress.history)


def _has_completion_on(period: PeriodProgress, on_date: date | datetime) -> bool:
    return any(same_day(done, on_date) for done in period.completion_dates)
