import uuid
from datetime import date

from models.recurring_template import RecurringTemplate
from models.transaction import Transaction
from services.occurrence_generator import occurrences_in
from utils.date_helpers import format_date

# Fixed namespace so forecast ids are stable across runs and processes.
FORECAST_NAMESPACE = uuid.UUID("5f0c4a8e-3f7b-4f53-9d1e-2b7f0e6c9a41")


def forecast_id(recurring_parent_id: str, occurrence_date: date) -> str:
    """Deterministic id for the forecast of one template occurrence."""
    name = f"{recurring_parent_id}:{format_date(occurrence_date)}"
    return uuid.uuid5(FORECAST_NAMESPACE, name).hex


def forecast(
    templates: list[RecurringTemplate],
    today: date,
    window_start: date,
    window_end: date,
    existing_transactions: list[Transaction] | None = None,
    skipped: set[tuple[str, date]] | None = None,
) -> list[Transaction]:
    """
    Provisional transactions for every active template occurrence in
    [window_start, window_end].

    Occurrences after `today` come back with is_forecasted=True. Occurrences on
    or before `today` are still returned, with is_forecasted=False, so the view
    shows them as due until the materializer picks them up. When
    `existing_transactions` is given, occurrences that already have a real
    transaction are left out, as are occurrences listed in `skipped`.
    """
    covered = set(skipped or ())
    if existing_transactions:
        covered.update(
            t.occurrence_key for t in existing_transactions
            if not t.provisional and t.occurrence_key is not None
        )

    result = []
    for template in templates:
        if not template.is_active or template.schedule is None:
            continue
        for d in occurrences_in(template.schedule, window_start, window_end):
            if (template.id, d) in covered:
                continue
            result.append(Transaction(
                id=forecast_id(template.id, d),
                type=template.type,
                amount=template.amount,
                category_id=template.category_id,
                description=template.description,
                date=d,
                verified=False,
                is_forecasted=d > today,
                account_id=template.account_id,
                recurring_parent_id=template.id,
                provisional=True,
            ))
    return result
