"""Shared test fixtures and configuration.

Sets up environment variables before any src imports, and provides common
fixtures: a controllable clock, temp-file stores, a repository/service
pair and a habit builder.
"""

import os

# Patch env vars BEFORE any src imports
os.environ.setdefault("HABIT_STORE", "sqlite")
os.environ.setdefault("DATABASE_PATH", ":memory:")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from datetime import datetime, timedelta

import pytest

# Wednesday
NOW = datetime(2025, 5, 14, 10, 30)


class FixedClock:
    """ClockPort whose time only moves when a test says so."""

    def __init__(self, current: datetime) -> None:
        self.current = current

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def tmp_db_path(tmp_path):
    """Return a temporary SQLite DB path."""
    return str(tmp_path / "test_habits.db")


@pytest.fixture
def habit_db(tmp_db_path):
    """Return a HabitDB instance backed by a temp file."""
    from src.data.db import HabitDB
    return HabitDB(db_path=tmp_db_path)


@pytest.fixture
def json_store(tmp_path):
    """Return a JsonFileHabitStore backed by a temp file."""
    from src.adapters.json_file_store import JsonFileHabitStore
    return JsonFileHabitStore(path=str(tmp_path / "habits.json"))


@pytest.fixture
def repository(habit_db, clock):
    from src.data.repository import HabitRepository
    return HabitRepository(habit_db, clock)


@pytest.fixture
def service(repository, clock):
    from src.core.habit_service import HabitService

    ids = iter(f"habit-{n}" for n in range(1, 1000))
    return HabitService(repository, clock, id_factory=lambda: next(ids))


@pytest.fixture
def make_habit():
    """Build a rich Habit whose current period contains ``now``.

    Usage: make_habit("weekly", times_per_week=3, completions=1)
    """
    from src.core.ledger import new_period
    from src.data.models import Habit, Progress, Recurrence

    def _make(
        kind="daily",
        now=NOW,
        completions=0,
        target=None,
        completion_dates=None,
        streak=0,
        active=True,
        name=None,
        habit_id="h1",
        time_of_day="anytime",
        **recurrence_fields,
    ):
        recurrence = Recurrence(type=kind, **recurrence_fields)
        current = new_period(recurrence, now)
        current.completions = completions
        if target is not None:
            current.target = target
        for done in completion_dates or []:
            current.completion_dates.append(done)
            current.completion_times.append(done)
        return Habit(
            id=habit_id,
            name=name or f"{kind} habit",
            recurrence=recurrence,
            progress=Progress(current_period=current, streak=streak),
            creation_date=now - timedelta(days=30),
            active=active,
            time_of_day=time_of_day,
        )

    return _make
