"""View projections — read-only derivations over a habit collection.

Everything here is recomputed on demand from the habits passed in; nothing
is cached and nothing is mutated.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime

from src.core.due_evaluator import completed_on, is_due
from src.data.models import RECURRENCE_TYPES, TIMES_OF_DAY, Habit

_TIME_PRIORITY = {name: rank for rank, name in enumerate(TIMES_OF_DAY)}


# ---------------------------------------------------------------------------
# Day-level
# ---------------------------------------------------------------------------


def habits_on_date(habits: list[Habit], on_date: date | datetime) -> list[Habit]:
    """Habits that are due on ``on_date`` or were completed on it.

    Periods must already be rolled over (``ledger.roll_over``) for the
    quota-based answers to be current.
    """
    return [h for h in habits if is_due(h, on_date) or completed_on(h, on_date)]


def completions_by_date(habits: list[Habit]) -> dict[str, list[str]]:
    """Map "YYYY-MM-DD" to the ids of habits completed that day.

    Covers the current period and all archived history.
    """
    result: dict[str, list[str]] = {}
    for habit in habits:
        periods = [habit.progress.current_period, *habit.progress.history]
        for period in periods:
            for done in period.completion_dates:
                ids = result.setdefault(done.date().isoformat(), [])
                if habit.id not in ids:
                    ids.append(habit.id)
    return result


def month_days(year: int, month: int) -> list[date]:
    """Every calendar day of the given month, in order."""
    last = calendar.monthrange(year, month)[1]
    return [date(year, month, day) for day in range(1, last + 1)]


# ---------------------------------------------------------------------------
# Progress
# ---------------------------------------------------------------------------


def progress_fraction(habit: Habit) -> float:
    """Share of the current target met, clamped to [0, 1]; 0 when target is 0."""
    current = habit.progress.current_period
    if current.target <= 0:
        return 0.0
    return max(0.0, min(current.completions / current.target, 1.0))


def progress_percentage(habit: Habit) -> int:
    return round(progress_fraction(habit) * 100)


def progress_text(habit: Habit) -> str:
    """Return "Complete!" once the target is met, else "2/3 · 1 to go"."""
    current = habit.progress.current_period
    if current.completions >= current.target:
        return "Complete!"
    remaining = current.target - current.completions
    return f"{current.completions}/{current.target} · {remaining} to go"


# ---------------------------------------------------------------------------
# Time of day ordering
# ---------------------------------------------------------------------------


def current_time_of_day(now: datetime) -> str:
    """Bucket the hour of ``now`` into morning/afternoon/evening/night."""
    hour = now.hour
    if 5 <= hour < 12:
        return "morning"
    if 12 <= hour < 17:
        return "afternoon"
    if 17 <= hour < 21:
        return "evening"
    return "night"


def sort_by_time_of_day(habits: list[Habit], current: str) -> list[Habit]:
    """Habits for the current bucket first, then by the fixed bucket order.

    Unknown buckets sort after "night". The sort is stable.
    """
    def key(habit: Habit) -> tuple[int, int]:
        bucket = habit.time_of_day or "anytime"
        return (
            0 if bucket == current else 1,
            _TIME_PRIORITY.get(bucket, len(TIMES_OF_DAY)),
        )

    return sorted(habits, key=key)


def group_by_recurrence(
    habits: list[Habit], current: str,
) -> dict[str, list[Habit]]:
    """Bucket habits by recurrence type, each bucket time-of-day sorted.

    Buckets appear in the order daily, weekly, monthly, yearly,
    specific_days; empty buckets are omitted.
    """
    groups: dict[str, list[Habit]] = {}
    for kind in RECURRENCE_TYPES:
        members = [h for h in habits if h.recurrence.type == kind]
        if members:
            groups[kind] = sort_by_time_of_day(members, current)
    return groups


def today_habits(habits: list[Habit], now: datetime) -> dict[str, list[Habit]]:
    """Grouped, sorted habits to show for the day of ``now``."""
    return group_by_recurrence(
        habits_on_date(habits, now), current_time_of_day(now),
    )


# ---------------------------------------------------------------------------
# Management tabs
# ---------------------------------------------------------------------------


def habit_counts(habits: list[Habit]) -> dict[str, int]:
    """Counts for the "all", per-type and "inactive" tabs.

    Per-type counts only include active habits.
    """
    counts = {"all": len(habits)}
    for kind in RECURRENCE_TYPES:
        counts[kind] = sum(1 for h in habits if h.active and h.recurrence.type == kind)
    counts["inactive"] = sum(1 for h in habits if not h.active)
    return counts


def filter_by_tab(habits: list[Habit], tab: str) -> list[Habit]:
    """Habits for a management tab, sorted by name.

    ``tab`` is "all", "inactive" or a recurrence type (active habits only).
    """
    if tab == "all":
        selected = list(habits)
    elif tab == "inactive":
        selected = [h for h in habits if not h.active]
    else:
        selected = [h for h in habits if h.active and h.recurrence.type == tab]
    return sorted(selected, key=lambda h: h.name.casefold())
