import logging
import threading
import uuid
from dataclasses import replace
from datetime import date
from decimal import Decimal, InvalidOperation

from database.month_settings_dao import MonthSettingsDAO
from database.recurring_dao import RecurringTemplateDAO
from database.transaction_dao import TransactionDAO
from models.recurring_template import RecurringTemplate
from models.schedule import Schedule
from models.transaction import Transaction
from services.materializer import materialize
from services.occurrence_generator import next_due_date
from services.schedule_clock import validate_schedule
from utils.constants import TRANSACTION_TYPES
from utils.date_helpers import format_month, today

logger = logging.getLogger(__name__)


class RecurringService:
    def __init__(
        self,
        template_dao: RecurringTemplateDAO,
        tx_dao: TransactionDAO,
        settings_dao: MonthSettingsDAO,
    ):
        self._dao = template_dao
        self._tx_dao = tx_dao
        self._settings_dao = settings_dao
        # One materialization pass at a time per process.
        self._materialize_lock = threading.Lock()

    def get_all(self) -> list[RecurringTemplate]:
        return self._dao.load_templates()

    def get_active(self) -> list[RecurringTemplate]:
        return self._dao.get_active()

    def get_by_id(self, template_id: str) -> RecurringTemplate | None:
        return self._dao.get_by_id(template_id)

    def create(
        self,
        type_: str,
        amount,
        category_id: str,
        description: str,
        schedule: Schedule,
        account_id: str | None = None,
        name: str = "",
        is_active: bool = True,
    ) -> RecurringTemplate:
        amount = self._validate(type_, amount, category_id, description, schedule)
        template = RecurringTemplate(
            id=uuid.uuid4().hex,
            name=name.strip(),
            type=type_,
            amount=amount,
            category_id=category_id,
            description=description.strip(),
            account_id=account_id or None,
            schedule=schedule,
            is_active=is_active,
        )
        created = self._dao.create(template)
        logger.info("Created recurring template %s (%s)", created.id, created.label)
        return created

    def update(self, template: RecurringTemplate) -> RecurringTemplate:
        """Save an edited template.

        Transactions already materialized keep their dates; the edited
        schedule only drives occurrences that have not been materialized yet.
        """
        if self._dao.get_by_id(template.id) is None:
            raise ValueError("Recurring item no longer exists.")
        amount = self._validate(
            template.type, template.amount, template.category_id,
            template.description, template.schedule,
        )
        return self._dao.update(replace(template, amount=amount))

    def set_active(self, template_id: str, is_active: bool):
        self._dao.set_active(template_id, is_active)
        logger.info("Template %s %s", template_id, "resumed" if is_active else "paused")

    def delete(self, template_id: str):
        """Remove a template. Its materialized transactions stay in the ledger."""
        self._dao.delete(template_id)
        logger.info("Deleted recurring template %s", template_id)

    def apply_due_templates(self, reference_date: date | None = None) -> list[Transaction]:
        """
        Materialize every due occurrence up to reference_date (default: today)
        and persist it. Occurrences that fall in a closed month are left out.
        Returns the transactions actually inserted.
        """
        ref = reference_date or today()
        with self._materialize_lock:
            # Re-read inside the lock so a previous pass's inserts are visible.
            existing = self._tx_dao.load_transactions()
            skipped = self._tx_dao.load_deleted_occurrences()
            pending = materialize(self._dao.get_active(), ref, existing, skipped)
            closed = self._settings_dao.get_closed_months()
            if closed:
                kept = [t for t in pending if format_month(t.date) not in closed]
                if len(kept) < len(pending):
                    logger.info(
                        "Skipped %d occurrence(s) in closed months", len(pending) - len(kept)
                    )
                pending = kept
            if not pending:
                return []
            return self._tx_dao.insert_transactions(pending)

    def next_due_date(self, template: RecurringTemplate, after: date | None = None) -> date | None:
        """Return the next date the template is due after `after` (default: today)."""
        if not template.is_active:
            return None
        return next_due_date(template.schedule, after or today())

    def _validate(self, type_, amount, category_id, description, schedule) -> Decimal:
        if type_ not in TRANSACTION_TYPES:
            raise ValueError("Type must be income or expense.")
        try:
            amount = Decimal(str(amount))
        except InvalidOperation:
            raise ValueError("Amount must be a number.") from None
        if not amount.is_finite() or amount <= 0:
            raise ValueError("Amount must be positive.")
        if not category_id:
            raise ValueError("Please select a category.")
        if not (description or "").strip():
            raise ValueError("Description cannot be empty.")
        if schedule is None:
            raise ValueError("A recurring item needs a schedule.")
        validate_schedule(schedule)
        return amount
