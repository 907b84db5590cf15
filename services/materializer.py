import logging
import uuid
from datetime import date
from typing import Callable

from models.recurring_template import RecurringTemplate
from models.transaction import Transaction
from services.occurrence_generator import occurrences_in

logger = logging.getLogger(__name__)


def new_transaction_id() -> str:
    return uuid.uuid4().hex


def materialize(
    templates: list[RecurringTemplate],
    today: date,
    existing_transactions: list[Transaction],
    skipped: set[tuple[str, date]] | None = None,
    new_id: Callable[[], str] = new_transaction_id,
) -> list[Transaction]:
    """
    Real transactions to persist for every due occurrence that has none yet.

    Each active template is walked from its anchor up to and including
    `today`, so one pass catches up on everything missed since the last run.
    An occurrence counts as done when any real transaction carries its
    (recurring_parent_id, date) key, including rows the user has since edited.
    Occurrences listed in `skipped` (ones the user deleted) are never
    recreated. Nothing is persisted here; the caller inserts the returned rows.
    """
    done = {
        t.occurrence_key for t in existing_transactions
        if not t.provisional and t.occurrence_key is not None
    }
    done.update(skipped or ())

    new_transactions: list[Transaction] = []
    for template in templates:
        if not template.is_active or template.schedule is None:
            continue
        schedule = template.schedule
        if schedule.start_date > today:
            continue
        for d in occurrences_in(schedule, schedule.start_date, today):
            key = (template.id, d)
            if key in done:
                continue
            done.add(key)
            new_transactions.append(Transaction(
                id=new_id(),
                type=template.type,
                amount=template.amount,
                category_id=template.category_id,
                description=template.description,
                date=d,
                verified=False,
                is_forecasted=False,
                account_id=template.account_id,
                recurring_parent_id=template.id,
                was_auto_generated=True,
            ))

    if new_transactions:
        logger.info(
            "Materialized %d recurring occurrence(s) up to %s",
            len(new_transactions), today.isoformat(),
        )
    return new_transactions
