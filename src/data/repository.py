"""
Habit Engine — Habit Repository.

Owns the in-memory habit collection for one process: loads it once from a
HabitStorePort, hands out habits, and writes the whole collection back after
every mutation. Legacy records are migrated to the rich model on load and
are stored in the rich shape from the next save on.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from src.core.legacy import migrate_legacy_habit
from src.data.records import LegacyHabitRecord, dump_collection, parse_collection

if TYPE_CHECKING:
    from src.data.models import Habit
    from src.ports.clock_port import ClockPort
    from src.ports.habit_store_port import HabitStorePort

logger = logging.getLogger(__name__)


class HabitRepository:
    """Load/save/mutate access to the habit collection."""

    def __init__(self, store: HabitStorePort, clock: ClockPort) -> None:
        self._store = store
        self._clock = clock
        self._habits: list[Habit] | None = None

    def load(self) -> list[Habit]:
        """(Re)read the collection from the store.

        Raises:
            CorruptPersistedState: if the stored collection cannot be decoded.
        """
        records = parse_collection(self._store.load())
        now = self._clock.now()

        habits: list[Habit] = []
        migrated = 0
        for record in records:
            if isinstance(record, LegacyHabitRecord):
                habits.append(migrate_legacy_habit(record.to_legacy(), now))
                migrated += 1
            else:
                habits.append(record.to_habit())

        self._habits = habits
        if migrated:
            logger.info("Loaded %d habits (%d migrated from legacy)", len(habits), migrated)
        else:
            logger.debug("Loaded %d habits", len(habits))
        return habits

    def save(self) -> None:
        self._store.save(dump_collection(self.list_all()))

    def list_all(self) -> list[Habit]:
        """All habits in collection order, loading on first access."""
        if self._habits is None:
            self.load()
        return self._habits

    def get(self, habit_id: str) -> Habit | None:
        for habit in self.list_all():
            if habit.id == habit_id:
                return habit
        return None

    def add(self, habit: Habit) -> Habit:
        self.list_all().append(habit)
        self.save()
        logger.info("Habit added: %s '%s' (%s)", habit.id, habit.name, habit.recurrence.type)
        return habit

    def remove(self, habit_id: str) -> bool:
        """Permanently delete a habit by ID."""
        habits = self.list_all()
        remaining = [h for h in habits if h.id != habit_id]
        if len(remaining) == len(habits):
            return False
        self._habits = remaining
        self.save()
        logger.info("Habit %s deleted", habit_id)
        return True

    def mutate(self, habit_id: str, change: Callable[[Habit], object]) -> Habit:
        """Apply ``change`` to one habit, then persist the whole collection.

        Raises:
            ValueError: if no habit has ``habit_id``.
        """
        habit = self.get(habit_id)
        if habit is None:
            raise ValueError(f"Habit {habit_id} not found")
        change(habit)
        self.save()
        return habit
