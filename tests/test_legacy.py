"""Tests for src.core.legacy — flat habit migration."""

from datetime import datetime

from src.core.due_evaluator import is_due
from src.core.legacy import legacy_recurrence, migrate_legacy_habit
from src.data.models import LegacyHabit

NOW = datetime(2025, 5, 14, 10, 30)


def _legacy(**overrides) -> LegacyHabit:
    values = dict(
        id="legacy-1",
        name="Read",
        frequency="daily",
        description="Twenty pages",
        time_of_day="evening",
        created_at="2025-04-02T18:00:00",
        streak=3,
    )
    values.update(overrides)
    return LegacyHabit(**values)


class TestLegacyRecurrence:
    def test_daily(self):
        rec = legacy_recurrence(_legacy(frequency="daily"))
        assert rec.type == "daily"
        assert rec.times_per_day == 1

    def test_weekly(self):
        rec = legacy_recurrence(_legacy(frequency="weekly"))
        assert rec.type == "weekly"
        assert rec.times_per_week == 1

    def test_monthly(self):
        assert legacy_recurrence(_legacy(frequency="monthly")).type == "monthly"

    def test_specific_days(self):
        rec = legacy_recurrence(
            _legacy(frequency="specific-days", specific_days=["monday", "Thursday", "funday"])
        )
        assert rec.type == "specific_days"
        assert rec.days_of_week == ["monday", "thursday"]

    def test_unknown_frequency_falls_back_to_daily(self):
        assert legacy_recurrence(_legacy(frequency="sometimes")).type == "daily"


class TestMigrateLegacyHabit:
    def test_copies_identity_fields(self):
        habit = migrate_legacy_habit(_legacy(), NOW)
        assert habit.id == "legacy-1"
        assert habit.name == "Read"
        assert habit.description == "Twenty pages"
        assert habit.time_of_day == "evening"
        assert habit.active is True
        assert habit.progress.streak == 3
        assert habit.creation_date == datetime(2025, 4, 2, 18, 0)

    def test_current_period_completions(self):
        habit = migrate_legacy_habit(_legacy(completed_dates=["2025-05-14"]), NOW)
        current = habit.progress.current_period
        assert current.completions == 1
        assert current.target == 1
        assert current.completion_dates == [datetime(2025, 5, 14)]
        assert habit.progress.history == []

    def test_older_dates_grouped_into_history(self):
        legacy = _legacy(
            frequency="weekly",
            completed_dates=["2025-04-29", "2025-05-01", "2025-05-06", "2025-05-13"],
        )
        habit = migrate_legacy_habit(legacy, NOW)

        current = habit.progress.current_period
        assert current.completion_dates == [datetime(2025, 5, 13)]
        assert current.completions == 1

        history = habit.progress.history
        assert [h.period_start for h in history] == [
            datetime(2025, 4, 28), datetime(2025, 5, 5),
        ]
        assert len(history[0].completion_dates) == 2
        assert history[0].completions == 1
        assert all(h.completed for h in history)

    def test_history_is_oldest_first_regardless_of_input_order(self):
        legacy = _legacy(completed_dates=["2025-05-10", "2025-05-02", "2025-05-07"])
        habit = migrate_legacy_habit(legacy, NOW)
        starts = [h.period_start for h in habit.progress.history]
        assert starts == sorted(starts)

    def test_bad_dates_skipped(self):
        habit = migrate_legacy_habit(
            _legacy(completed_dates=["not-a-date", "", "2025-05-14"]), NOW,
        )
        assert habit.progress.current_period.completions == 1
        assert habit.progress.history == []

    def test_missing_created_at_uses_now(self):
        habit = migrate_legacy_habit(_legacy(created_at=""), NOW)
        assert habit.creation_date == NOW

    def test_specific_days_target_and_due(self):
        legacy = _legacy(frequency="specific-days", specific_days=["wednesday", "friday"])
        habit = migrate_legacy_habit(legacy, NOW)
        assert habit.progress.current_period.target == 2
        assert is_due(habit, datetime(2025, 5, 14).date()) is True
        assert is_due(habit, datetime(2025, 5, 15).date()) is False

    def test_us_style_dates_accepted(self):
        habit = migrate_legacy_habit(
            _legacy(created_at="3/15/2025", completed_dates=["5/14/2025", "5/2/2025"]), NOW,
        )
        assert habit.creation_date == datetime(2025, 3, 15)
        assert habit.progress.current_period.completion_dates == [datetime(2025, 5, 14)]
        assert [h.period_start for h in habit.progress.history] == [datetime(2025, 5, 2)]
