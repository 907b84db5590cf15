from dataclasses import dataclass
from decimal import Decimal


@dataclass
class MonthSettings:
    month: str              # 'YYYY-MM'
    starting_balance: Decimal = Decimal("0")
    is_closed: bool = False
