from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Transaction:
    id: str
    type: str               # 'income' | 'expense'
    amount: Decimal
    category_id: str
    description: str
    date: date
    verified: bool = False
    is_forecasted: bool = False
    account_id: Optional[str] = None
    recurring_parent_id: Optional[str] = None
    provisional: bool = False        # produced by the forecaster, never persisted
    was_auto_generated: bool = False
    created_at: str = ""
    updated_at: str = ""

    @property
    def occurrence_key(self) -> tuple[str, date] | None:
        if self.recurring_parent_id is None:
            return None
        return (self.recurring_parent_id, self.date)

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.type == "income" else -self.amount
