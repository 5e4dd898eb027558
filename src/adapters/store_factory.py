"""Habit store factory — creates the right store based on config."""

from __future__ import annotations

from src.config import settings
from src.ports.habit_store_port import HabitStorePort


def create_habit_store(path: str | None = None) -> HabitStorePort:
    """Return the habit store matching the HABIT_STORE setting.

    Args:
        path: Overrides the configured database/file path.
    """
    provider = settings.HABIT_STORE.lower()

    if provider == "sqlite":
        from src.data.db import HabitDB

        return HabitDB(db_path=path)

    if provider == "json":
        from src.adapters.json_file_store import JsonFileHabitStore

        return JsonFileHabitStore(path=path)

    raise ValueError(f"Unknown HABIT_STORE: {provider!r}")
