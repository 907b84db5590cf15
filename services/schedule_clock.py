"""Next-occurrence arithmetic for the four schedule shapes.

Everything here is pure: no clock reads, no I/O. Callers validate a schedule
once with validate_schedule() before stepping through it; next_occurrence()
still rejects the malformed fields it depends on.
"""
from datetime import date, timedelta

from models.errors import InvalidSchedule
from models.schedule import Schedule
from utils.constants import (
    MAX_DAY_OF_MONTH, MIN_DAY_OF_MONTH, SCHEDULE_LABELS,
    SCHEDULE_STEP_DAYS, SCHEDULE_TYPES,
)
from utils.date_helpers import add_months, ordinal


def validate_schedule(schedule: Schedule) -> None:
    """Raise InvalidSchedule unless the schedule can generate occurrences."""
    if schedule.type not in SCHEDULE_TYPES:
        raise InvalidSchedule(f"Unknown schedule type: {schedule.type!r}")
    if schedule.start_date is None:
        raise InvalidSchedule("Schedule needs a start date.")
    if schedule.type == "monthly":
        _check_day_of_month(schedule.day_of_month)
    if schedule.type == "custom":
        _check_custom_days(schedule.custom_days)
    if schedule.end_date is not None and schedule.end_date < schedule.start_date:
        raise InvalidSchedule("End date cannot be before the start date.")


def next_occurrence(d: date, schedule: Schedule) -> date:
    """Return the occurrence following d."""
    if schedule.type in SCHEDULE_STEP_DAYS:
        return d + timedelta(days=SCHEDULE_STEP_DAYS[schedule.type])

    if schedule.type == "monthly":
        _check_day_of_month(schedule.day_of_month)
        # Clamp against the destination month, never roll into the one after.
        return add_months(d, 1, day=schedule.day_of_month)

    if schedule.type == "custom":
        _check_custom_days(schedule.custom_days)
        return d + timedelta(days=schedule.custom_days)

    raise InvalidSchedule(f"Unknown schedule type: {schedule.type!r}")


def describe_schedule(schedule: Schedule) -> str:
    """Short label for lists, e.g. 'Monthly on the 31st' or 'Every 30 days'."""
    if schedule.type == "monthly" and schedule.day_of_month:
        return f"Monthly on the {ordinal(schedule.day_of_month)}"
    if schedule.type == "custom" and schedule.custom_days:
        if schedule.custom_days == 1:
            return "Every day"
        return f"Every {schedule.custom_days} days"
    return SCHEDULE_LABELS.get(schedule.type, schedule.type.title())


def _check_day_of_month(day_of_month: int | None) -> None:
    if day_of_month is None:
        return
    if not (MIN_DAY_OF_MONTH <= day_of_month <= MAX_DAY_OF_MONTH):
        raise InvalidSchedule(
            f"Day of month must be {MIN_DAY_OF_MONTH}-{MAX_DAY_OF_MONTH}, got {day_of_month}."
        )


def _check_custom_days(custom_days: int | None) -> None:
    if custom_days is None or custom_days < 1:
        raise InvalidSchedule(f"Custom schedules need a step of at least 1 day, got {custom_days}.")
