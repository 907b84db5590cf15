from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Schedule:
    type: str                          # 'weekly' | 'biweekly' | 'monthly' | 'custom'
    start_date: date                   # anchor: first possible occurrence
    day_of_month: Optional[int] = None # monthly only, 1-31, clamped to month length
    custom_days: Optional[int] = None  # custom only, step in days >= 1
    end_date: Optional[date] = None    # inclusive
