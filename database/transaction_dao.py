import logging
import sqlite3
from datetime import date
from decimal import Decimal
from typing import Optional

from database.db_manager import DatabaseManager
from models.errors import DuplicateOccurrence
from models.transaction import Transaction
from utils.date_helpers import format_date, parse_date

logger = logging.getLogger(__name__)


class TransactionDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Transaction:
        return Transaction(
            id=row["id"],
            type=row["type"],
            amount=Decimal(row["amount"]),
            category_id=row["category_id"],
            description=row["description"],
            account_id=row["account_id"],
            date=parse_date(row["date"]),
            verified=bool(row["verified"]),
            is_forecasted=False,
            recurring_parent_id=row["recurring_parent_id"],
            was_auto_generated=bool(row["was_auto_generated"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def load_transactions(self) -> list[Transaction]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM transactions ORDER BY date ASC, created_at ASC"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_month(self, month: str) -> list[Transaction]:
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT * FROM transactions
               WHERE strftime('%Y-%m', date) = ?
               ORDER BY date ASC, created_at ASC""",
            (month,),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, tx_id: str) -> Optional[Transaction]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM transactions WHERE id = ?", (tx_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def create(self, tx: Transaction, commit: bool = True) -> Transaction:
        """Insert one real transaction.

        Raises DuplicateOccurrence if another row already holds the same
        (recurring_parent_id, date) pair.
        """
        if tx.provisional:
            raise ValueError("Forecasts are never persisted.")
        conn = self._db.get_connection()
        try:
            conn.execute(
                """INSERT INTO transactions
                   (id, type, amount, category_id, description, account_id,
                    date, verified, recurring_parent_id, was_auto_generated)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    tx.id, tx.type, str(tx.amount), tx.category_id,
                    tx.description, tx.account_id, format_date(tx.date),
                    1 if tx.verified else 0, tx.recurring_parent_id,
                    1 if tx.was_auto_generated else 0,
                ),
            )
        except sqlite3.IntegrityError as e:
            if "recurring_parent_id" in str(e):
                raise DuplicateOccurrence(tx.recurring_parent_id, tx.date) from e
            raise
        if commit:
            conn.commit()
        return tx

    def insert_transactions(self, new_ones: list[Transaction]) -> list[Transaction]:
        """Persist a batch in one commit, skipping occurrences that already exist.

        Returns the rows actually inserted. Any other failure rolls the whole
        batch back and propagates.
        """
        conn = self._db.get_connection()
        inserted = []
        try:
            for tx in new_ones:
                try:
                    self.create(tx, commit=False)
                except DuplicateOccurrence as e:
                    logger.info("Skipping duplicate occurrence: %s", e)
                    continue
                inserted.append(tx)
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        return inserted

    def update(self, tx: Transaction) -> Transaction:
        conn = self._db.get_connection()
        try:
            conn.execute(
                """UPDATE transactions SET
                   type=?, amount=?, category_id=?, description=?, account_id=?,
                   date=?, verified=?, updated_at=datetime('now')
                   WHERE id=?""",
                (
                    tx.type, str(tx.amount), tx.category_id, tx.description,
                    tx.account_id, format_date(tx.date),
                    1 if tx.verified else 0, tx.id,
                ),
            )
        except sqlite3.IntegrityError as e:
            if "recurring_parent_id" in str(e):
                raise DuplicateOccurrence(tx.recurring_parent_id, tx.date) from e
            raise
        conn.commit()
        return self.get_by_id(tx.id)

    def set_verified(self, tx_id: str, verified: bool):
        conn = self._db.get_connection()
        conn.execute(
            "UPDATE transactions SET verified = ?, updated_at = datetime('now') WHERE id = ?",
            (1 if verified else 0, tx_id),
        )
        conn.commit()

    def delete(self, tx_id: str):
        """Delete a transaction. A recurring occurrence is remembered as deleted
        so the next materialization pass does not bring it back."""
        conn = self._db.get_connection()
        tx = self.get_by_id(tx_id)
        if tx is None:
            return
        if tx.recurring_parent_id is not None:
            conn.execute(
                """INSERT OR IGNORE INTO deleted_occurrences(recurring_parent_id, date)
                   VALUES (?, ?)""",
                (tx.recurring_parent_id, format_date(tx.date)),
            )
        conn.execute("DELETE FROM transactions WHERE id = ?", (tx_id,))
        conn.commit()

    def load_deleted_occurrences(self) -> set[tuple[str, date]]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT recurring_parent_id, date FROM deleted_occurrences"
        ).fetchall()
        return {(r["recurring_parent_id"], parse_date(r["date"])) for r in rows}
