from decimal import Decimal
from typing import Optional

from database.db_manager import DatabaseManager
from models.recurring_template import RecurringTemplate
from models.schedule import Schedule
from utils.date_helpers import format_date, parse_date


class RecurringTemplateDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> RecurringTemplate:
        schedule = Schedule(
            type=row["schedule_type"],
            start_date=parse_date(row["start_date"]),
            day_of_month=row["day_of_month"],
            custom_days=row["custom_days"],
            end_date=parse_date(row["end_date"]),
        )
        return RecurringTemplate(
            id=row["id"],
            name=row["name"],
            type=row["type"],
            amount=Decimal(row["amount"]),
            category_id=row["category_id"],
            description=row["description"],
            account_id=row["account_id"],
            schedule=schedule,
            is_active=bool(row["is_active"]),
        )

    def _params(self, t: RecurringTemplate) -> tuple:
        s = t.schedule
        return (
            t.name, t.type, str(t.amount), t.category_id, t.description,
            t.account_id, s.type, format_date(s.start_date), s.day_of_month,
            s.custom_days, format_date(s.end_date) if s.end_date else None,
            1 if t.is_active else 0,
        )

    def load_templates(self) -> list[RecurringTemplate]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM recurring_templates ORDER BY created_at, id"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_active(self) -> list[RecurringTemplate]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM recurring_templates WHERE is_active = 1 ORDER BY created_at, id"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, template_id: str) -> Optional[RecurringTemplate]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM recurring_templates WHERE id = ?", (template_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def create(self, template: RecurringTemplate) -> RecurringTemplate:
        conn = self._db.get_connection()
        conn.execute(
            """INSERT INTO recurring_templates
               (name, type, amount, category_id, description, account_id,
                schedule_type, start_date, day_of_month, custom_days,
                end_date, is_active, id)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            self._params(template) + (template.id,),
        )
        conn.commit()
        return self.get_by_id(template.id)

    def update(self, template: RecurringTemplate) -> RecurringTemplate:
        conn = self._db.get_connection()
        conn.execute(
            """UPDATE recurring_templates SET
               name=?, type=?, amount=?, category_id=?, description=?,
               account_id=?, schedule_type=?, start_date=?, day_of_month=?,
               custom_days=?, end_date=?, is_active=?
               WHERE id=?""",
            self._params(template) + (template.id,),
        )
        conn.commit()
        return self.get_by_id(template.id)

    def set_active(self, template_id: str, is_active: bool):
        conn = self._db.get_connection()
        conn.execute(
            "UPDATE recurring_templates SET is_active = ? WHERE id = ?",
            (1 if is_active else 0, template_id),
        )
        conn.commit()

    def delete(self, template_id: str):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM recurring_templates WHERE id = ?", (template_id,))
        conn.commit()
