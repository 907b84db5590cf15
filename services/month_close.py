from dataclasses import dataclass
from decimal import Decimal

from models.transaction import Transaction


@dataclass(frozen=True)
class MonthSummary:
    income: Decimal
    expenses: Decimal
    net: Decimal
    starting_balance: Decimal
    ending_balance: Decimal
    verified_count: int
    unverified_count: int
    forecasted_count: int
    total_count: int

    @property
    def all_verified(self) -> bool:
        return self.total_count > 0 and self.unverified_count == 0


def can_close(transactions: list[Transaction]) -> bool:
    """A month can close once it has rows and every non-forecasted one is verified."""
    if not transactions:
        return False
    return all(t.verified for t in transactions if not t.is_forecasted)


def summarize_month(
    transactions: list[Transaction],
    starting_balance: Decimal = Decimal("0"),
) -> MonthSummary:
    """Totals and verification counts for one month's merged view.

    Future forecasts count toward income/expenses (the month's projected
    outcome) but not toward verified/unverified.
    """
    income = sum((t.amount for t in transactions if t.type == "income"), Decimal("0"))
    expenses = sum((t.amount for t in transactions if t.type == "expense"), Decimal("0"))
    settled = [t for t in transactions if not t.is_forecasted]
    verified = sum(1 for t in settled if t.verified)
    net = income - expenses
    return MonthSummary(
        income=income,
        expenses=expenses,
        net=net,
        starting_balance=starting_balance,
        ending_balance=starting_balance + net,
        verified_count=verified,
        unverified_count=len(settled) - verified,
        forecasted_count=len(transactions) - len(settled),
        total_count=len(transactions),
    )
