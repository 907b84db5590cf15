from datetime import date
from decimal import Decimal

import pytest

from conftest import make_transaction


def test_create_strips_and_validates(tx_svc):
    tx = tx_svc.create("expense", "12.34", date(2024, 1, 5), "food", "  Lunch ")
    assert tx.description == "Lunch"
    assert tx.amount == Decimal("12.34")
    assert tx.recurring_parent_id is None
    assert tx.verified is False


@pytest.mark.parametrize("kwargs", [
    {"type_": "transfer"},
    {"amount": "0"},
    {"amount": "twelve"},
    {"category_id": ""},
    {"date_": "2024-01-05"},
])
def test_create_rejects_bad_input(tx_svc, kwargs):
    args = {
        "type_": "expense", "amount": "5", "date_": date(2024, 1, 5),
        "category_id": "food", "description": "Coffee",
    }
    args.update(kwargs)
    with pytest.raises(ValueError):
        tx_svc.create(**args)


def test_verify_and_unverify(tx_svc):
    tx = tx_svc.create("expense", "5", date(2024, 1, 5), "food", "Coffee")
    tx_svc.verify(tx.id)
    assert tx_svc.get_by_id(tx.id).verified is True
    tx_svc.unverify(tx.id)
    assert tx_svc.get_by_id(tx.id).verified is False


def test_update_keeps_verified_unless_given(tx_svc):
    tx = tx_svc.create("expense", "5", date(2024, 1, 5), "food", "Coffee", verified=True)
    updated = tx_svc.update(tx.id, "expense", "6", date(2024, 1, 6), "food", "Coffee")
    assert updated.amount == Decimal("6")
    assert updated.date == date(2024, 1, 6)
    assert updated.verified is True


def test_recurring_row_cannot_move_date(tx_svc, tx_dao):
    tx_dao.create(make_transaction(id="r1", on=date(2024, 1, 1), parent="rent"))
    with pytest.raises(ValueError):
        tx_svc.update("r1", "expense", "10.00", date(2024, 1, 2), "housing")
    updated = tx_svc.update("r1", "expense", "11.00", date(2024, 1, 1), "housing", "Rent")
    assert updated.recurring_parent_id == "rent"
    assert updated.amount == Decimal("11.00")


def test_update_missing_transaction(tx_svc):
    with pytest.raises(ValueError):
        tx_svc.update("nope", "expense", "1", date(2024, 1, 1), "food")


@pytest.fixture
def closed_january(tx_svc, settings_dao):
    tx = tx_svc.create("expense", "5", date(2024, 1, 5), "food", "Coffee", verified=True)
    settings_dao.set_closed("2024-01", True)
    return tx


def test_closed_month_rejects_new_transactions(tx_svc, tx_dao, closed_january):
    with pytest.raises(ValueError, match="closed"):
        tx_svc.create("expense", "7", date(2024, 1, 6), "food", "Lunch")
    assert len(tx_dao.get_by_month("2024-01")) == 1
    tx_svc.create("expense", "7", date(2024, 2, 6), "food", "Lunch")


def test_closed_month_rejects_edits_moves_and_deletes(tx_svc, closed_january):
    tx_id = closed_january.id
    with pytest.raises(ValueError):
        tx_svc.update(tx_id, "expense", "9", date(2024, 1, 5), "food", "Coffee")
    with pytest.raises(ValueError):
        tx_svc.update(tx_id, "expense", "5", date(2024, 2, 5), "food", "Coffee")
    with pytest.raises(ValueError):
        tx_svc.unverify(tx_id)
    with pytest.raises(ValueError):
        tx_svc.delete(tx_id)
    assert tx_svc.get_by_id(tx_id) == closed_january


def test_moving_into_closed_month_is_rejected(tx_svc, closed_january):
    tx = tx_svc.create("expense", "5", date(2024, 2, 1), "food", "Coffee")
    with pytest.raises(ValueError):
        tx_svc.update(tx.id, "expense", "5", date(2024, 1, 31), "food", "Coffee")
