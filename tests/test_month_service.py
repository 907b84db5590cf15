from datetime import date
from decimal import Decimal

import pytest

from models.schedule import Schedule


def _weekly_gym(recurring_svc):
    return recurring_svc.create(
        "expense", "20", "health", "Gym", Schedule("weekly", date(2024, 1, 1))
    )


def test_month_view_merges_real_and_forecast_without_duplicates(recurring_svc, month_svc):
    gym = _weekly_gym(recurring_svc)
    view = month_svc.month_view("2024-01", reference_date=date(2024, 1, 10))

    assert [t.date for t in view] == [
        date(2024, 1, 1), date(2024, 1, 8), date(2024, 1, 15),
        date(2024, 1, 22), date(2024, 1, 29),
    ]
    real = [t for t in view if not t.provisional]
    forecasts = [t for t in view if t.provisional]
    assert [t.date for t in real] == [date(2024, 1, 1), date(2024, 1, 8)]
    assert all(t.is_forecasted for t in forecasts)
    assert {t.recurring_parent_id for t in view} == {gym.id}
    assert len({t.occurrence_key for t in view}) == len(view)


def test_month_view_is_stable_across_calls(recurring_svc, month_svc, tx_dao):
    _weekly_gym(recurring_svc)
    first = month_svc.month_view("2024-01", reference_date=date(2024, 1, 10))
    second = month_svc.month_view("2024-01", reference_date=date(2024, 1, 10))
    assert [t.id for t in first] == [t.id for t in second]
    assert len(tx_dao.load_transactions()) == 2


def test_paused_template_stops_forecasting(recurring_svc, month_svc):
    rent = recurring_svc.create(
        "expense", "1200", "housing", "Rent", Schedule("monthly", date(2024, 1, 1))
    )
    month_svc.month_view("2024-02", reference_date=date(2024, 2, 15))
    recurring_svc.set_active(rent.id, False)

    assert month_svc.month_view("2024-03", reference_date=date(2024, 2, 15)) == []
    feb = month_svc.month_view("2024-02", reference_date=date(2024, 2, 15))
    assert [(t.date, t.provisional) for t in feb] == [(date(2024, 2, 1), False)]


def test_deleted_occurrence_stays_deleted(recurring_svc, month_svc, tx_svc):
    _weekly_gym(recurring_svc)
    view = month_svc.month_view("2024-01", reference_date=date(2024, 1, 10))
    tx_svc.delete(view[0].id)
    view = month_svc.month_view("2024-01", reference_date=date(2024, 1, 10))
    assert date(2024, 1, 1) not in [t.date for t in view]


def test_close_month_refuses_when_unverified(month_svc, tx_svc):
    tx_svc.create("expense", "5", date(2024, 1, 5), "food", "Coffee")
    with pytest.raises(ValueError, match="1 of 1"):
        month_svc.close_month("2024-01", reference_date=date(2024, 2, 1))
    assert month_svc.is_closed("2024-01") is False


def test_close_month_refuses_empty_month(month_svc):
    with pytest.raises(ValueError):
        month_svc.close_month("2024-01", reference_date=date(2024, 2, 1))


def test_close_and_reopen(month_svc, tx_svc):
    tx = tx_svc.create("expense", "5", date(2024, 1, 5), "food", "Coffee")
    tx_svc.verify(tx.id)
    month_svc.close_month("2024-01", reference_date=date(2024, 2, 1))
    assert month_svc.is_closed("2024-01") is True
    month_svc.reopen_month("2024-01")
    assert month_svc.is_closed("2024-01") is False


def test_forecasts_do_not_block_closing(recurring_svc, month_svc, tx_svc):
    _weekly_gym(recurring_svc)
    for tx in month_svc.month_view("2024-01", reference_date=date(2024, 1, 10)):
        if not tx.provisional:
            tx_svc.verify(tx.id)
    assert month_svc.can_close("2024-01", reference_date=date(2024, 1, 10)) is True


def test_summary_uses_starting_balance(month_svc, tx_svc):
    month_svc.set_starting_balance("2024-01", Decimal("100"))
    tx_svc.create("income", "50", date(2024, 1, 2), "salary", "Pay")
    tx_svc.create("expense", "30", date(2024, 1, 3), "food", "Groceries")
    summary = month_svc.summary("2024-01", reference_date=date(2024, 2, 1))
    assert summary.income == Decimal("50")
    assert summary.expenses == Decimal("30")
    assert summary.ending_balance == Decimal("120")
    assert summary.total_count == 2


def test_closed_month_gets_no_late_recurring_rows(recurring_svc, month_svc, tx_svc, tx_dao):
    _weekly_gym(recurring_svc)
    for tx in month_svc.month_view("2024-01", reference_date=date(2024, 1, 10)):
        if not tx.provisional:
            tx_svc.verify(tx.id)
    month_svc.close_month("2024-01", reference_date=date(2024, 1, 10))

    view = month_svc.month_view("2024-01", reference_date=date(2024, 2, 1))

    assert [t.date for t in view] == [date(2024, 1, 1), date(2024, 1, 8)]
    assert all(t.verified and not t.provisional for t in view)
    assert month_svc.can_close("2024-01", reference_date=date(2024, 2, 1)) is True

    feb = month_svc.month_view("2024-02", reference_date=date(2024, 2, 5))
    assert [t.date for t in feb if not t.provisional] == [date(2024, 2, 5)]
    assert len(tx_dao.load_transactions()) == 3


def test_reopened_month_catches_up_skipped_occurrences(recurring_svc, month_svc, tx_svc):
    _weekly_gym(recurring_svc)
    for tx in month_svc.month_view("2024-01", reference_date=date(2024, 1, 10)):
        if not tx.provisional:
            tx_svc.verify(tx.id)
    month_svc.close_month("2024-01", reference_date=date(2024, 1, 10))
    month_svc.month_view("2024-01", reference_date=date(2024, 2, 1))

    month_svc.reopen_month("2024-01")
    view = month_svc.month_view("2024-01", reference_date=date(2024, 2, 1))
    assert [t.date for t in view if not t.provisional] == [
        date(2024, 1, 1), date(2024, 1, 8), date(2024, 1, 15),
        date(2024, 1, 22), date(2024, 1, 29),
    ]


def test_starting_balance_is_locked_while_closed(month_svc, tx_svc):
    tx_svc.create("expense", "5", date(2024, 1, 5), "food", "Coffee", verified=True)
    month_svc.set_starting_balance("2024-01", Decimal("250"))
    assert month_svc.get_settings("2024-01").starting_balance == Decimal("250")

    month_svc.close_month("2024-01", reference_date=date(2024, 2, 1))
    with pytest.raises(ValueError):
        month_svc.set_starting_balance("2024-01", Decimal("300"))
    assert month_svc.get_settings("2024-01").starting_balance == Decimal("250")
