from dataclasses import replace
from datetime import date
from decimal import Decimal

from conftest import make_template, make_transaction
from models.schedule import Schedule
from services.materializer import materialize


def test_custom_thirty_days_catches_up_in_one_pass():
    s = Schedule("custom", date(2024, 1, 1), custom_days=30)
    t = make_template(id="gym", schedule=s)
    result = materialize([t], date(2024, 3, 15), [])
    assert [tx.date for tx in result] == [date(2024, 1, 1), date(2024, 1, 31), date(2024, 3, 1)]
    assert all(not tx.is_forecasted and not tx.verified for tx in result)
    assert all(tx.recurring_parent_id == "gym" and tx.was_auto_generated for tx in result)
    assert all(not tx.provisional for tx in result)
    assert len({tx.id for tx in result}) == 3


def test_second_pass_after_persisting_creates_nothing():
    t = make_template(start_date=date(2024, 1, 1))
    first = materialize([t], date(2024, 4, 10), [])
    assert len(first) == 4
    assert materialize([t], date(2024, 4, 10), first) == []


def test_advancing_today_only_adds_new_occurrences():
    t = make_template(start_date=date(2024, 1, 1))
    first = materialize([t], date(2024, 2, 10), [])
    second = materialize([t], date(2024, 4, 10), first)
    assert [tx.date for tx in second] == [date(2024, 3, 1), date(2024, 4, 1)]


def test_edited_transaction_still_counts_as_materialized():
    t = make_template(start_date=date(2024, 1, 1))
    [tx] = materialize([t], date(2024, 1, 20), [])
    edited = replace(tx, amount=Decimal("999.00"), description="changed", verified=True)
    assert materialize([t], date(2024, 1, 20), [edited]) == []


def test_never_materializes_future_dates():
    t = make_template(start_date=date(2024, 1, 1))
    result = materialize([t], date(2024, 1, 31), [])
    assert [tx.date for tx in result] == [date(2024, 1, 1)]
    assert materialize([make_template(start_date=date(2024, 5, 1))], date(2024, 4, 30), []) == []


def test_inactive_template_is_skipped():
    t = make_template(start_date=date(2024, 1, 1), is_active=False)
    assert materialize([t], date(2024, 6, 1), []) == []


def test_skipped_occurrences_are_not_recreated():
    t = make_template(start_date=date(2024, 1, 1))
    result = materialize([t], date(2024, 3, 5), [], skipped={("rent", date(2024, 2, 1))})
    assert [tx.date for tx in result] == [date(2024, 1, 1), date(2024, 3, 1)]


def test_unrelated_transactions_do_not_block_materialization():
    t = make_template(start_date=date(2024, 1, 1))
    other = make_transaction(on=date(2024, 1, 1), parent="other-template")
    manual = make_transaction(id="manual", on=date(2024, 1, 1))
    assert len(materialize([t], date(2024, 1, 1), [other, manual])) == 1


def test_ids_come_from_factory():
    t = make_template(start_date=date(2024, 1, 1))
    ids = iter(["a", "b"])
    result = materialize([t], date(2024, 2, 1), [], new_id=lambda: next(ids))
    assert [tx.id for tx in result] == ["a", "b"]
