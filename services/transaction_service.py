import uuid
from dataclasses import replace
from datetime import date
from decimal import Decimal, InvalidOperation

from database.month_settings_dao import MonthSettingsDAO
from database.transaction_dao import TransactionDAO
from models.transaction import Transaction
from utils.constants import TRANSACTION_TYPES
from utils.date_helpers import format_month, friendly_month


class TransactionService:
    def __init__(self, tx_dao: TransactionDAO, settings_dao: MonthSettingsDAO):
        self._dao = tx_dao
        self._settings_dao = settings_dao

    def get_by_id(self, tx_id: str) -> Transaction | None:
        return self._dao.get_by_id(tx_id)

    def create(
        self,
        type_: str,
        amount,
        date_: date,
        category_id: str,
        description: str = "",
        account_id: str | None = None,
        verified: bool = False,
    ) -> Transaction:
        """Record a one-off transaction entered by the user."""
        amount = self._validate(type_, amount, date_, category_id)
        self._check_open(date_)
        tx = Transaction(
            id=uuid.uuid4().hex,
            type=type_,
            amount=amount,
            category_id=category_id,
            description=description.strip(),
            account_id=account_id or None,
            date=date_,
            verified=verified,
        )
        self._dao.create(tx)
        return self._dao.get_by_id(tx.id)

    def update(
        self,
        tx_id: str,
        type_: str,
        amount,
        date_: date,
        category_id: str,
        description: str = "",
        account_id: str | None = None,
        verified: bool | None = None,
    ) -> Transaction:
        """
        Edit a real transaction. The id and recurring parent reference never
        change; a transaction that came from a recurring template also keeps
        its occurrence date, otherwise the occurrence would be materialized
        again.
        """
        current = self._existing(tx_id)
        amount = self._validate(type_, amount, date_, category_id)
        self._check_open(current.date)
        self._check_open(date_)
        if current.recurring_parent_id is not None and date_ != current.date:
            raise ValueError(
                "Recurring transactions keep their scheduled date. "
                "Edit the recurring item instead."
            )
        edited = replace(
            current,
            type=type_,
            amount=amount,
            date=date_,
            category_id=category_id,
            description=description.strip(),
            account_id=account_id or None,
            verified=current.verified if verified is None else verified,
        )
        return self._dao.update(edited)

    def set_verified(self, tx_id: str, verified: bool):
        self._check_open(self._existing(tx_id).date)
        self._dao.set_verified(tx_id, verified)

    def verify(self, tx_id: str):
        self.set_verified(tx_id, True)

    def unverify(self, tx_id: str):
        self.set_verified(tx_id, False)

    def delete(self, tx_id: str):
        current = self._dao.get_by_id(tx_id)
        if current is None:
            return
        self._check_open(current.date)
        self._dao.delete(tx_id)

    def _existing(self, tx_id: str) -> Transaction:
        current = self._dao.get_by_id(tx_id)
        if current is None:
            raise ValueError("Transaction no longer exists.")
        return current

    def _check_open(self, d: date):
        """Closed months are read-only."""
        month = format_month(d)
        if self._settings_dao.get(month).is_closed:
            raise ValueError(f"{friendly_month(month)} is closed. Reopen it to make changes.")

    def _validate(self, type_: str, amount, date_, category_id) -> Decimal:
        if type_ not in TRANSACTION_TYPES:
            raise ValueError(f"Invalid type: {type_}")
        try:
            amount = Decimal(str(amount))
        except InvalidOperation:
            raise ValueError("Amount must be a number.") from None
        if not amount.is_finite() or amount <= 0:
            raise ValueError("Amount must be positive.")
        if not isinstance(date_, date):
            raise ValueError("Invalid date.")
        if not category_id:
            raise ValueError("Please select a category.")
        return amount
