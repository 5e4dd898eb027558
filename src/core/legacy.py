"""Legacy habit migration.

Older collections store habits in a flat shape: a ``frequency`` string and a
list of YYYY-MM-DD completion dates, with no period object or numeric target.
They are normalized to the rich model on load so that the due-date evaluator
and the completion ledger only need one implementation.
"""

from __future__ import annotations

import logging
from datetime import datetime

from src.core.ledger import new_period
from src.core.periods import compute_period
from src.data.models import (
    WEEKDAYS,
    ArchivedPeriod,
    Habit,
    LegacyHabit,
    Progress,
    Recurrence,
)
from src.data.records import parse_timestamp

logger = logging.getLogger(__name__)


def legacy_recurrence(legacy: LegacyHabit) -> Recurrence:
    """Map a legacy ``frequency`` onto an equivalent recurrence rule."""
    frequency = legacy.frequency.strip().lower().replace("-", "_")

    if frequency == "specific_days":
        days = [d.lower() for d in legacy.specific_days if d.lower() in WEEKDAYS]
        return Recurrence(type="specific_days", days_of_week=days)
    if frequency == "weekly":
        return Recurrence(type="weekly", times_per_week=1)
    if frequency == "monthly":
        return Recurrence(type="monthly", times_per_month=1)
    if frequency != "daily":
        logger.warning(
            "Legacy habit %s has unknown frequency %r, treating as daily",
            legacy.id, legacy.frequency,
        )
    return Recurrence(type="daily", times_per_day=1)


def migrate_legacy_habit(legacy: LegacyHabit, now: datetime) -> Habit:
    """Convert a legacy record into a rich Habit anchored at ``now``.

    Completion dates inside the current period fill the current period
    (count capped at target). Older dates are grouped by the period they
    fell in and archived oldest first. Unparseable dates are skipped.
    """
    recurrence = legacy_recurrence(legacy)
    current = new_period(recurrence, now)

    archived: dict[datetime, ArchivedPeriod] = {}
    for raw in legacy.completed_dates:
        done = _parse_day(raw)
        if done is None:
            logger.warning("Legacy habit %s: skipping bad date %r", legacy.id, raw)
            continue

        if current.period_start <= done <= current.period_end:
            current.completion_dates.append(done)
            current.completion_times.append(done)
            continue

        period = compute_period(recurrence.type, done, recurrence.week_start)
        entry = archived.get(period.start)
        if entry is None:
            entry = ArchivedPeriod(
                period_start=period.start,
                period_end=period.end,
                target=current.target,
            )
            archived[period.start] = entry
        entry.completion_dates.append(done)
        entry.completion_times.append(done)

    current.completions = min(len(current.completion_dates), current.target)

    history = []
    for start in sorted(archived):
        entry = archived[start]
        entry.completions = min(len(entry.completion_dates), entry.target)
        entry.completed = entry.completions >= entry.target
        history.append(entry)

    created = _parse_day(legacy.created_at) or now
    habit = Habit(
        id=legacy.id,
        name=legacy.name,
        description=legacy.description,
        recurrence=recurrence,
        progress=Progress(
            current_period=current,
            history=history,
            streak=max(0, legacy.streak),
        ),
        creation_date=created,
        active=True,
        time_of_day=legacy.time_of_day or "anytime",
    )
    logger.info(
        "Migrated legacy habit %s '%s' (%s, %d archived periods)",
        habit.id, habit.name, recurrence.type, len(history),
    )
    return habit


def _parse_day(raw: str) -> datetime | None:
    """Parse a stored date or date-time string; None if it cannot be read."""
    if not raw:
        return None
    try:
        return parse_timestamp(raw)
    except ValueError:
        return None
