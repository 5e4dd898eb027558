"""
Habit Engine — Entry Point.

Single entry point: `python main.py` rolls stale periods over in the
configured habit store and lists today's habits.
"""

import logging

from src.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

from src.adapters.store_factory import create_habit_store
from src.adapters.system_clock import SystemClock
from src.core.habit_service import HabitService
from src.core.projections import progress_text
from src.core.recurrence import recurrence_label
from src.data.repository import HabitRepository


def main() -> None:
    clock = SystemClock()
    service = HabitService(HabitRepository(create_habit_store(), clock), clock)

    groups = service.today()
    if not groups:
        print("No habits for today.")
        return

    for kind, habits in groups.items():
        print(f"{kind}:")
        for habit in habits:
            print(
                f"  {habit.name} [{recurrence_label(habit.recurrence)}, "
                f"{habit.time_of_day}] {progress_text(habit)} "
                f"streak {habit.progress.streak}"
            )


if __name__ == "__main__":
    main()
