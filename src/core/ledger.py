"""Completion ledger — mutates a habit's period progress and streak.

Single entry point for all progress changes. Rollover is performed lazily
here, before any toggle, so a stale period is archived exactly once no
matter how many callers look at the habit.

Counting rules:
- Adding a completion never pushes ``completions`` past ``target``.
- Adding a completion for today bumps the streak even when the count was
  capped at target.
- Removing a completion floors ``completions`` at 0 and only touches the
  streak when the removed date is today.
"""

from __future__ import annotations

import logging
from dataclasses import fields
from datetime import date, datetime

from src.core.due_evaluator import completed_on
from src.core.periods import compute_period, same_day
from src.core.recurrence import compute_target
from src.data.models import ArchivedPeriod, Habit, PeriodProgress, Recurrence

logger = logging.getLogger(__name__)


def new_period(recurrence: Recurrence, now: datetime) -> PeriodProgress:
    """Build an empty period containing ``now`` for ``recurrence``."""
    period = compute_period(recurrence.type, now, recurrence.week_start)
    return PeriodProgress(
        period_start=period.start,
        period_end=period.end,
        completions=0,
        target=compute_target(recurrence),
    )


def archive(current: PeriodProgress, notes: str | None = None) -> ArchivedPeriod:
    """Freeze a copy of ``current`` as a history entry."""
    values = {f.name: getattr(current, f.name) for f in fields(PeriodProgress)}
    for key in ("completion_dates", "completion_times", "subtasks_completed"):
        values[key] = list(values[key])
    return ArchivedPeriod(
        **values,
        completed=current.completions >= current.target,
        notes=notes,
    )


def roll_over(habit: Habit, now: datetime) -> bool:
    """Archive the current period if ``now`` is past its end.

    Returns:
        True if a rollover happened, False if the period is still current.
    """
    current = habit.progress.current_period
    if now <= current.period_end:
        return False

    archived = archive(current)
    habit.progress.history.append(archived)
    habit.progress.current_period = new_period(habit.recurrence, now)
    logger.info(
        "Habit %s '%s' rolled over: %s–%s %d/%d (%s)",
        habit.id, habit.name,
        archived.period_start.date().isoformat(),
        archived.period_end.date().isoformat(),
        archived.completions, archived.target,
        "completed" if archived.completed else "missed",
    )
    return True


def toggle_completion(
    habit: Habit, on_date: date | datetime, now: datetime,
) -> Habit:
    """Flip the completion state of ``habit`` on ``on_date``.

    Mutates ``habit`` in place and returns it.

    Args:
        habit: The habit to update.
        on_date: Calendar date being toggled (time of day is ignored).
        now: Current moment from the clock provider.
    """
    roll_over(habit, now)

    progress = habit.progress
    current = progress.current_period
    is_today = same_day(on_date, now)

    if completed_on(habit, on_date):
        current.completion_dates = [
            d for d in current.completion_dates if not same_day(d, on_date)
        ]
        current.completion_times = [
            t for t in current.completion_times if not same_day(t, on_date)
        ]
        current.completions = max(0, current.completions - 1)
        if is_today and progress.streak > 0:
            progress.streak -= 1
        logger.info(
            "Habit %s '%s' unmarked for %s (%d/%d, streak %d)",
            habit.id, habit.name, _day(on_date),
            current.completions, current.target, progress.streak,
        )
        return habit

    stamp = datetime.combine(_day(on_date), now.time())
    current.completion_dates.append(stamp)
    current.completion_times.append(stamp)
    if current.completions < current.target:
        current.completions += 1
    if is_today:
        progress.streak += 1
    logger.info(
        "Habit %s '%s' marked for %s (%d/%d, streak %d)",
        habit.id, habit.name, _day(on_date),
        current.completions, current.target, progress.streak,
    )
    return habit


def _day(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value
