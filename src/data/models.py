"""
Habit Engine — Data Models.

Habits persist as a single ordered collection. The rich model (recurrence +
progress) is what the engine works with; LegacyHabit is the older flat
shape still found in stored collections and is migrated on load.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

WEEKDAYS = (
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
)

RECURRENCE_TYPES = ("daily", "weekly", "monthly", "yearly", "specific_days")

TIMES_OF_DAY = ("anytime", "morning", "afternoon", "evening", "night")


@dataclass
class Recurrence:
    """Declarative schedule of a habit.

    Only the fields relevant to ``type`` are meaningful; the rest stay None.
    """

    type: str                                      # one of RECURRENCE_TYPES
    times_per_day: int | None = None
    times_per_week: int | None = None
    times_per_month: int | None = None
    times_per_year: int | None = None
    days_of_week: list[str] | None = None          # specific_days
    days_of_month: list[int] | None = None         # monthly / yearly, 1-31
    months_of_year: list[int] | None = None        # yearly, 1-12
    week_start: str = "monday"
    specific_times: list[str] = field(default_factory=list)  # "HH:MM"
    preferred_days_of_week: list[str] | None = None          # advisory only


@dataclass
class PeriodProgress:
    """Completion state for the period currently being accumulated."""

    period_start: datetime
    period_end: datetime
    completions: int = 0
    target: int = 0
    completion_dates: list[datetime] = field(default_factory=list)
    completion_times: list[datetime] = field(default_factory=list)
    subtasks_completed: list[str] = field(default_factory=list)


@dataclass
class ArchivedPeriod(PeriodProgress):
    """A past period, frozen at rollover."""

    completed: bool = False
    notes: str | None = None


@dataclass
class Progress:
    current_period: PeriodProgress
    history: list[ArchivedPeriod] = field(default_factory=list)
    streak: int = 0


@dataclass
class Subtask:
    id: str
    name: str
    description: str | None = None


@dataclass
class Measure:
    """A numeric goal with a unit, e.g. 64 oz or 30 minutes."""

    target: float
    unit: str


@dataclass
class Habit:
    """A recurring habit with its schedule and progress."""

    id: str
    name: str
    recurrence: Recurrence
    progress: Progress
    creation_date: datetime
    description: str = ""
    category: str | None = None
    color: str | None = None
    active: bool = True
    subtasks: list[Subtask] | None = None
    duration: Measure | None = None
    amount: Measure | None = None
    time_of_day: str = "anytime"                   # one of TIMES_OF_DAY


@dataclass
class LegacyHabit:
    """Flat habit record from the earlier storage format.

    No period object and no numeric target; completions are plain
    YYYY-MM-DD strings.
    """

    id: str
    name: str
    frequency: str                    # "daily" | "weekly" | "monthly" | "specific-days"
    description: str = ""
    specific_days: list[str] = field(default_factory=list)
    time_of_day: str = "anytime"
    created_at: str = ""
    streak: int = 0
    completed_dates: list[str] = field(default_factory=list)
