import logging
from datetime import date
from decimal import Decimal

from database.month_settings_dao import MonthSettingsDAO
from database.recurring_dao import RecurringTemplateDAO
from database.transaction_dao import TransactionDAO
from models.month_settings import MonthSettings
from models.transaction import Transaction
from services.forecaster import forecast
from services.merger import merge
from services.month_close import MonthSummary, can_close, summarize_month
from services.recurring_service import RecurringService
from utils.date_helpers import month_bounds, today

logger = logging.getLogger(__name__)


class MonthService:
    """Builds the per-month view: materialize, then forecast, then merge."""

    def __init__(
        self,
        recurring_service: RecurringService,
        template_dao: RecurringTemplateDAO,
        tx_dao: TransactionDAO,
        settings_dao: MonthSettingsDAO,
    ):
        self._recurring_svc = recurring_service
        self._template_dao = template_dao
        self._tx_dao = tx_dao
        self._settings_dao = settings_dao

    def month_view(self, month: str, reference_date: date | None = None) -> list[Transaction]:
        """Real transactions and remaining forecasts for a YYYY-MM month, sorted by date.

        A closed month shows only its real transactions.
        """
        ref = reference_date or today()
        start, end = month_bounds(month)

        self._recurring_svc.apply_due_templates(ref)

        existing = self._tx_dao.load_transactions()
        if self.is_closed(month):
            forecasts = []
        else:
            forecasts = forecast(
                self._template_dao.load_templates(), ref, start, end,
                existing, self._tx_dao.load_deleted_occurrences(),
            )
        real = [t for t in existing if start <= t.date <= end]
        merged = merge(real, forecasts)
        return sorted(merged, key=lambda t: (t.date, t.provisional, t.description))

    def get_settings(self, month: str) -> MonthSettings:
        return self._settings_dao.get(month)

    def is_closed(self, month: str) -> bool:
        return self._settings_dao.get(month).is_closed

    def set_starting_balance(self, month: str, amount: Decimal):
        if self.is_closed(month):
            raise ValueError("Reopen the month to change its starting balance.")
        self._settings_dao.set_starting_balance(month, Decimal(str(amount)))

    def summary(self, month: str, transactions: list[Transaction] | None = None,
                reference_date: date | None = None) -> MonthSummary:
        if transactions is None:
            transactions = self.month_view(month, reference_date)
        settings = self._settings_dao.get(month)
        return summarize_month(transactions, settings.starting_balance)

    def can_close(self, month: str, reference_date: date | None = None) -> bool:
        return can_close(self.month_view(month, reference_date))

    def close_month(self, month: str, reference_date: date | None = None):
        """Mark a month closed. Refuses while any non-forecast row is unverified."""
        view = self.month_view(month, reference_date)
        if not can_close(view):
            summary = summarize_month(view)
            logger.info(
                "Refusing to close %s: %d of %d transactions unverified",
                month, summary.unverified_count, summary.total_count,
            )
            if not view:
                raise ValueError("Add some transactions before closing the month.")
            raise ValueError(
                f"{summary.unverified_count} of {summary.total_count} "
                "transactions need verification before the month can close."
            )
        self._settings_dao.set_closed(month, True)
        logger.info("Closed month %s", month)

    def reopen_month(self, month: str):
        self._settings_dao.set_closed(month, False)
