from datetime import date

import pytest

from models.errors import InvalidSchedule
from models.schedule import Schedule
from services.schedule_clock import describe_schedule, next_occurrence, validate_schedule


def test_weekly_and_biweekly_steps():
    weekly = Schedule("weekly", date(2024, 1, 1))
    biweekly = Schedule("biweekly", date(2024, 1, 1))
    assert next_occurrence(date(2024, 1, 1), weekly) == date(2024, 1, 8)
    assert next_occurrence(date(2024, 12, 30), biweekly) == date(2025, 1, 13)


def test_monthly_clamps_to_destination_month():
    s = Schedule("monthly", date(2024, 1, 31), day_of_month=31)
    assert next_occurrence(date(2024, 1, 31), s) == date(2024, 2, 29)
    assert next_occurrence(date(2024, 2, 29), s) == date(2024, 3, 31)
    assert next_occurrence(date(2023, 1, 31), s) == date(2023, 2, 28)


def test_monthly_never_rolls_into_following_month():
    s = Schedule("monthly", date(2024, 3, 31), day_of_month=31)
    assert next_occurrence(date(2024, 3, 31), s) == date(2024, 4, 30)
    assert next_occurrence(date(2024, 12, 31), s) == date(2025, 1, 31)


def test_monthly_without_target_day_keeps_current_day():
    s = Schedule("monthly", date(2024, 1, 15))
    assert next_occurrence(date(2024, 1, 15), s) == date(2024, 2, 15)
    assert next_occurrence(date(2024, 1, 31), s) == date(2024, 2, 29)


def test_custom_step():
    s = Schedule("custom", date(2024, 1, 1), custom_days=30)
    assert next_occurrence(date(2024, 1, 31), s) == date(2024, 3, 1)


@pytest.mark.parametrize("custom_days", [0, -3, None])
def test_custom_step_below_one_is_invalid(custom_days):
    s = Schedule("custom", date(2024, 1, 1), custom_days=custom_days)
    with pytest.raises(InvalidSchedule):
        next_occurrence(date(2024, 1, 1), s)
    with pytest.raises(InvalidSchedule):
        validate_schedule(s)


@pytest.mark.parametrize("day", [0, 32])
def test_day_of_month_out_of_range_is_invalid(day):
    s = Schedule("monthly", date(2024, 1, 1), day_of_month=day)
    with pytest.raises(InvalidSchedule):
        next_occurrence(date(2024, 1, 1), s)


def test_end_before_start_is_invalid():
    with pytest.raises(InvalidSchedule):
        validate_schedule(Schedule("weekly", date(2024, 2, 1), end_date=date(2024, 1, 1)))


def test_unknown_type_is_invalid():
    with pytest.raises(InvalidSchedule):
        validate_schedule(Schedule("yearly", date(2024, 1, 1)))


def test_invalid_schedule_is_a_value_error():
    assert issubclass(InvalidSchedule, ValueError)


def test_describe_schedule():
    assert describe_schedule(Schedule("weekly", date(2024, 1, 1))) == "Weekly"
    assert describe_schedule(Schedule("biweekly", date(2024, 1, 1))) == "Every 2 weeks"
    assert describe_schedule(Schedule("monthly", date(2024, 1, 1), day_of_month=31)) == "Monthly on the 31st"
    assert describe_schedule(Schedule("monthly", date(2024, 1, 1), day_of_month=22)) == "Monthly on the 22nd"
    assert describe_schedule(Schedule("monthly", date(2024, 1, 1), day_of_month=11)) == "Monthly on the 11th"
    assert describe_schedule(Schedule("custom", date(2024, 1, 1), custom_days=30)) == "Every 30 days"
