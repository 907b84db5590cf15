from datetime import date
from decimal import Decimal

from conftest import make_transaction
from services.month_close import can_close, summarize_month


def test_empty_month_cannot_close():
    assert can_close([]) is False


def test_unverified_real_transaction_blocks_close():
    txs = [
        make_transaction(id="a", verified=True),
        make_transaction(id="b", verified=False),
    ]
    assert can_close(txs) is False


def test_future_forecasts_do_not_block_close():
    txs = [
        make_transaction(id="a", verified=True),
        make_transaction(id="f", verified=False, is_forecasted=True),
    ]
    assert can_close(txs) is True


def test_summary_totals_and_counts():
    txs = [
        make_transaction(id="pay", type="income", amount="3000.00", verified=True),
        make_transaction(id="rent", amount="1200.00", verified=False),
        make_transaction(id="gym", amount="50.00", on=date(2024, 1, 28), is_forecasted=True),
    ]
    s = summarize_month(txs, Decimal("100.00"))
    assert s.income == Decimal("3000.00")
    assert s.expenses == Decimal("1250.00")
    assert s.net == Decimal("1750.00")
    assert s.ending_balance == Decimal("1850.00")
    assert (s.verified_count, s.unverified_count, s.forecasted_count, s.total_count) == (1, 1, 1, 3)
    assert s.all_verified is False


def test_summary_of_empty_month():
    s = summarize_month([])
    assert s.total_count == 0
    assert s.net == Decimal("0")
    assert s.all_verified is False
