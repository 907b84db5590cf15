from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from conftest import make_transaction
from models.errors import DuplicateOccurrence


def test_round_trip_preserves_fields(tx_dao):
    tx = make_transaction(id="t1", on=date(2024, 2, 29), parent="rent", amount="1200.50")
    tx_dao.create(tx)
    loaded = tx_dao.get_by_id("t1")
    assert loaded.date == date(2024, 2, 29)
    assert loaded.amount == Decimal("1200.50")
    assert loaded.recurring_parent_id == "rent"
    assert loaded.is_forecasted is False
    assert loaded.provisional is False


def test_create_rejects_duplicate_occurrence(tx_dao):
    tx_dao.create(make_transaction(id="a", on=date(2024, 1, 1), parent="rent"))
    with pytest.raises(DuplicateOccurrence):
        tx_dao.create(make_transaction(id="b", on=date(2024, 1, 1), parent="rent"))


def test_manual_transactions_may_share_a_date(tx_dao):
    tx_dao.create(make_transaction(id="a", on=date(2024, 1, 1)))
    tx_dao.create(make_transaction(id="b", on=date(2024, 1, 1)))
    assert len(tx_dao.load_transactions()) == 2


def test_insert_transactions_skips_conflicts_without_raising(tx_dao):
    tx_dao.create(make_transaction(id="a", on=date(2024, 1, 1), parent="rent"))
    inserted = tx_dao.insert_transactions([
        make_transaction(id="b", on=date(2024, 1, 1), parent="rent"),
        make_transaction(id="c", on=date(2024, 2, 1), parent="rent"),
    ])
    assert [t.id for t in inserted] == ["c"]
    assert {t.id for t in tx_dao.load_transactions()} == {"a", "c"}


def test_insert_transactions_rolls_back_on_other_errors(tx_dao):
    tx_dao.create(make_transaction(id="a", on=date(2024, 1, 1)))
    with pytest.raises(Exception):
        tx_dao.insert_transactions([
            make_transaction(id="b", on=date(2024, 1, 2)),
            make_transaction(id="a", on=date(2024, 1, 3)),
        ])
    assert [t.id for t in tx_dao.load_transactions()] == ["a"]


def test_forecasts_are_never_persisted(tx_dao):
    tx = make_transaction(id="f")
    with pytest.raises(ValueError):
        tx_dao.create(replace(tx, provisional=True))


def test_get_by_month(tx_dao):
    tx_dao.create(make_transaction(id="jan", on=date(2024, 1, 31)))
    tx_dao.create(make_transaction(id="feb", on=date(2024, 2, 1)))
    assert [t.id for t in tx_dao.get_by_month("2024-02")] == ["feb"]


def test_delete_remembers_recurring_occurrence(tx_dao):
    tx_dao.create(make_transaction(id="a", on=date(2024, 1, 1), parent="rent"))
    tx_dao.create(make_transaction(id="m", on=date(2024, 1, 1)))
    tx_dao.delete("a")
    tx_dao.delete("m")
    assert tx_dao.load_transactions() == []
    assert tx_dao.load_deleted_occurrences() == {("rent", date(2024, 1, 1))}


def test_set_verified(tx_dao):
    tx_dao.create(make_transaction(id="a"))
    tx_dao.set_verified("a", True)
    assert tx_dao.get_by_id("a").verified is True
