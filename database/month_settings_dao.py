from decimal import Decimal

from database.db_manager import DatabaseManager
from models.month_settings import MonthSettings


class MonthSettingsDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def get(self, month: str) -> MonthSettings:
        """Settings for a YYYY-MM month; defaults when none were saved."""
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM month_settings WHERE month = ?", (month,)
        ).fetchone()
        if not row:
            return MonthSettings(month=month)
        return MonthSettings(
            month=row["month"],
            starting_balance=Decimal(row["starting_balance"]),
            is_closed=bool(row["is_closed"]),
        )

    def get_closed_months(self) -> set[str]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT month FROM month_settings WHERE is_closed = 1"
        ).fetchall()
        return {r["month"] for r in rows}

    def set_starting_balance(self, month: str, amount: Decimal):
        conn = self._db.get_connection()
        conn.execute(
            """INSERT INTO month_settings(month, starting_balance)
               VALUES (?, ?)
               ON CONFLICT(month) DO UPDATE SET starting_balance = excluded.starting_balance""",
            (month, str(amount)),
        )
        conn.commit()

    def set_closed(self, month: str, is_closed: bool = True):
        conn = self._db.get_connection()
        conn.execute(
            """INSERT INTO month_settings(month, is_closed)
               VALUES (?, ?)
               ON CONFLICT(month) DO UPDATE SET is_closed = excluded.is_closed""",
            (month, 1 if is_closed else 0),
        )
        conn.commit()
