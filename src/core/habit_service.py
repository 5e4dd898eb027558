"""
Habit Engine — Habit Service.

UI-agnostic service layer: every caller (CLI, web view, bot) goes through
here to create, edit, pause, delete and toggle habits, and to read the
per-day projections.

Each mutation follows the same cycle: load the collection through the
repository, change one habit, store the whole collection. Stale periods are
rolled over before any read or toggle, so archival happens in one place.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING, Callable

from src.core import ledger, projections
from src.core.recurrence import compute_target, validate_recurrence
from src.data.models import Habit, Progress

if TYPE_CHECKING:
    from src.data.models import Measure, Recurrence, Subtask
    from src.data.repository import HabitRepository
    from src.ports.clock_port import ClockPort

logger = logging.getLogger(__name__)

_UNSET = object()


def new_habit_id() -> str:
    return str(uuid.uuid4())


class HabitService:
    """Orchestrates habit changes over a repository and a clock."""

    def __init__(
        self,
        repository: HabitRepository,
        clock: ClockPort,
        id_factory: Callable[[], str] = new_habit_id,
    ) -> None:
        self._repo = repository
        self._clock = clock
        self._id_factory = id_factory

    # ------------------------------------------------------------------
    # Create / edit / delete
    # ------------------------------------------------------------------

    def add_habit(
        self,
        name: str,
        recurrence: Recurrence,
        description: str = "",
        category: str | None = None,
        color: str | None = None,
        time_of_day: str = "anytime",
        subtasks: list[Subtask] | None = None,
        duration: Measure | None = None,
        amount: Measure | None = None,
    ) -> Habit:
        """Create a habit with an empty current period and no history.

        Raises:
            InvalidRecurrence: if ``recurrence`` is incomplete for its type.
            ValueError: if ``name`` is blank.
        """
        if not name.strip():
            raise ValueError("Habit name must not be empty")
        validate_recurrence(recurrence)

        now = self._clock.now()
        habit = Habit(
            id=self._id_factory(),
            name=name.strip(),
            description=description,
            category=category,
            color=color,
            active=True,
            creation_date=now,
            recurrence=recurrence,
            progress=Progress(current_period=ledger.new_period(recurrence, now)),
            subtasks=subtasks,
            duration=duration,
            amount=amount,
            time_of_day=time_of_day,
        )
        return self._repo.add(habit)

    def edit_habit(
        self,
        habit_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        category: object = _UNSET,
        color: object = _UNSET,
        recurrence: Recurrence | None = None,
        time_of_day: str | None = None,
        duration: object = _UNSET,
        amount: object = _UNSET,
    ) -> Habit:
        """Update a habit's details and/or its recurrence.

        Changing the recurrence type moves the current period to the new
        type's boundaries and resets its completion count. The target is
        recomputed whenever a recurrence is given. Nullable fields left
        unset keep their value; passing None clears them.

        Raises:
            InvalidRecurrence: if ``recurrence`` is incomplete for its type.
            ValueError: if the habit does not exist or ``name`` is blank.
        """
        if name is not None and not name.strip():
            raise ValueError("Habit name must not be empty")
        if recurrence is not None:
            validate_recurrence(recurrence)
        now = self._clock.now()

        def change(habit: Habit) -> None:
            ledger.roll_over(habit, now)
            if name is not None:
                habit.name = name.strip()
            if description is not None:
                habit.description = description
            if time_of_day is not None:
                habit.time_of_day = time_of_day
            if category is not _UNSET:
                habit.category = category
            if color is not _UNSET:
                habit.color = color
            if duration is not _UNSET:
                habit.duration = duration
            if amount is not _UNSET:
                habit.amount = amount
            if recurrence is not None:
                self._apply_recurrence(habit, recurrence, now)

        habit = self._repo.mutate(habit_id, change)
        logger.info("Habit %s '%s' updated", habit.id, habit.name)
        return habit

    @staticmethod
    def _apply_recurrence(habit: Habit, recurrence: Recurrence, now: datetime) -> None:
        current = habit.progress.current_period
        if recurrence.type != habit.recurrence.type:
            fresh = ledger.new_period(recurrence, now)
            current.period_start = fresh.period_start
            current.period_end = fresh.period_end
            current.completions = 0
        habit.recurrence = recurrence
        current.target = compute_target(recurrence)

    def set_active(self, habit_id: str, active: bool) -> Habit:
        """Pause or resume a habit."""
        def change(habit: Habit) -> None:
            habit.active = active

        habit = self._repo.mutate(habit_id, change)
        logger.info("Habit %s '%s' %s", habit.id, habit.name, "resumed" if active else "paused")
        return habit

    def delete_habit(self, habit_id: str) -> bool:
        return self._repo.remove(habit_id)

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    def toggle_completion(self, habit_id: str, on_date: date | datetime) -> Habit:
        """Mark or unmark ``habit_id`` as done on ``on_date``.

        Raises:
            ValueError: if the habit does not exist.
        """
        now = self._clock.now()
        return self._repo.mutate(
            habit_id, lambda habit: ledger.toggle_completion(habit, on_date, now),
        )

    def roll_over_all(self) -> int:
        """Archive every stale current period; returns how many rolled over."""
        now = self._clock.now()
        rolled = sum(1 for h in self._repo.list_all() if ledger.roll_over(h, now))
        if rolled:
            self._repo.save()
            logger.info("Rolled over %d habit periods", rolled)
        return rolled

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_habits(self, tab: str = "all") -> list[Habit]:
        self.roll_over_all()
        return projections.filter_by_tab(self._repo.list_all(), tab)

    def habits_on(self, on_date: date | datetime) -> list[Habit]:
        """Habits due or completed on ``on_date``, after rollover."""
        self.roll_over_all()
        return projections.habits_on_date(self._repo.list_all(), on_date)

    def today(self) -> dict[str, list[Habit]]:
        """Today's habits grouped by recurrence type, time-of-day sorted."""
        self.roll_over_all()
        return projections.today_habits(self._repo.list_all(), self._clock.now())
