"""Tests for src.core.recurrence — targets, validation, labels."""

import pytest

from src.core.recurrence import (
    InvalidRecurrence,
    compute_target,
    recurrence_label,
    validate_recurrence,
)
from src.data.models import Recurrence


class TestComputeTarget:
    def test_defaults_to_one(self):
        for kind in ("daily", "weekly", "monthly", "yearly"):
            assert compute_target(Recurrence(type=kind)) == 1

    def test_uses_times_per_period(self):
        assert compute_target(Recurrence(type="daily", times_per_day=2)) == 2
        assert compute_target(Recurrence(type="weekly", times_per_week=3)) == 3
        assert compute_target(Recurrence(type="monthly", times_per_month=4)) == 4
        assert compute_target(Recurrence(type="yearly", times_per_year=5)) == 5

    def test_specific_days_counts_days(self):
        rec = Recurrence(type="specific_days", days_of_week=["monday", "friday"])
        assert compute_target(rec) == 2

    def test_specific_days_without_days_is_zero(self):
        assert compute_target(Recurrence(type="specific_days")) == 0

    def test_unknown_type_is_zero(self):
        assert compute_target(Recurrence(type="hourly")) == 0


class TestValidateRecurrence:
    def test_valid_rules_pass(self):
        validate_recurrence(Recurrence(type="daily", times_per_day=2, specific_times=["08:00", "20:00"]))
        validate_recurrence(Recurrence(type="weekly", times_per_week=3, week_start="sunday"))
        validate_recurrence(Recurrence(type="monthly", days_of_month=[1, 15]))
        validate_recurrence(Recurrence(type="yearly", months_of_year=[3], days_of_month=[14]))
        validate_recurrence(Recurrence(type="yearly"))
        validate_recurrence(Recurrence(type="specific_days", days_of_week=["tuesday"]))

    def test_unknown_type(self):
        with pytest.raises(InvalidRecurrence, match="Unknown recurrence type"):
            validate_recurrence(Recurrence(type="hourly"))

    def test_specific_days_needs_days(self):
        with pytest.raises(InvalidRecurrence, match="at least one day"):
            validate_recurrence(Recurrence(type="specific_days", days_of_week=[]))

    def test_non_canonical_weekday(self):
        with pytest.raises(InvalidRecurrence, match="non-canonical"):
            validate_recurrence(Recurrence(type="specific_days", days_of_week=["Monday"]))

    def test_bad_week_start(self):
        with pytest.raises(InvalidRecurrence, match="week_start"):
            validate_recurrence(Recurrence(type="weekly", week_start="mon"))

    def test_non_positive_times(self):
        with pytest.raises(InvalidRecurrence, match="times_per_week"):
            validate_recurrence(Recurrence(type="weekly", times_per_week=0))

    def test_day_of_month_range(self):
        with pytest.raises(InvalidRecurrence, match="days_of_month"):
            validate_recurrence(Recurrence(type="monthly", days_of_month=[32]))

    def test_month_range(self):
        with pytest.raises(InvalidRecurrence, match="months_of_year"):
            validate_recurrence(Recurrence(type="yearly", months_of_year=[13], days_of_month=[1]))

    def test_yearly_needs_both_anchors(self):
        with pytest.raises(InvalidRecurrence, match="both"):
            validate_recurrence(Recurrence(type="yearly", months_of_year=[6]))

    def test_specific_times_format(self):
        with pytest.raises(InvalidRecurrence, match="HH:MM"):
            validate_recurrence(Recurrence(type="daily", specific_times=["8am"]))

    def test_is_a_value_error(self):
        assert issubclass(InvalidRecurrence, ValueError)


class TestRecurrenceLabel:
    def test_single_per_period(self):
        assert recurrence_label(Recurrence(type="daily")) == "Daily"
        assert recurrence_label(Recurrence(type="weekly", times_per_week=1)) == "Weekly"

    def test_multiple_per_period(self):
        assert recurrence_label(Recurrence(type="daily", times_per_day=2)) == "2x daily"
        assert recurrence_label(Recurrence(type="monthly", times_per_month=3)) == "3x monthly"

    def test_specific_days(self):
        assert recurrence_label(Recurrence(type="specific_days")) == "Specific days"
        assert recurrence_label(Recurrence(type="specific_days", days_of_week=["friday"])) == "Friday"
        assert recurrence_label(
            Recurrence(type="specific_days", days_of_week=["monday", "wednesday"])
        ) == "Mon, Wed"
        assert recurrence_label(
            Recurrence(type="specific_days", days_of_week=["monday", "tuesday", "wednesday", "thursday"])
        ) == "4 days/week"
