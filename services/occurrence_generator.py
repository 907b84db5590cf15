from datetime import date

from models.schedule import Schedule
from services.schedule_clock import next_occurrence, validate_schedule


def occurrences_in(schedule: Schedule, window_start: date, window_end: date) -> list[date]:
    """
    Return every occurrence of `schedule` inside [window_start, window_end],
    in ascending order. Both bounds are inclusive.

    The walk always starts at the anchor and uses next_occurrence() for the
    skip-forward phase too: monthly clamping depends on the path taken, so a
    closed-form jump would drift.
    """
    validate_schedule(schedule)
    end = schedule.end_date

    if schedule.start_date > window_end:
        return []
    if end is not None and end < window_start:
        return []

    current = schedule.start_date
    while current < window_start:
        current = next_occurrence(current, schedule)

    result = []
    while current <= window_end and (end is None or current <= end):
        result.append(current)
        current = next_occurrence(current, schedule)
    return result


def next_due_date(schedule: Schedule, after: date) -> date | None:
    """First occurrence strictly after `after`, or None once the schedule has ended."""
    validate_schedule(schedule)
    current = schedule.start_date
    while current <= after:
        current = next_occurrence(current, schedule)
    if schedule.end_date is not None and current > schedule.end_date:
        return None
    return current
