class InvalidSchedule(ValueError):
    """A schedule that cannot produce occurrences (bad step, bad day, end before start)."""


class DuplicateOccurrence(Exception):
    """A real transaction already exists for this (recurring_parent_id, date) pair."""

    def __init__(self, recurring_parent_id: str, occurrence_date):
        super().__init__(
            f"Template {recurring_parent_id} already has a transaction on {occurrence_date}"
        )
        self.recurring_parent_id = recurring_parent_id
        self.occurrence_date = occurrence_date
