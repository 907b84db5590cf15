from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from models.schedule import Schedule


@dataclass
class RecurringTemplate:
    id: str
    type: str               # 'income' | 'expense'
    amount: Decimal
    category_id: str
    description: str
    schedule: Schedule
    is_active: bool = True
    account_id: Optional[str] = None
    name: str = ""

    @property
    def label(self) -> str:
        return self.name or self.description
