from datetime import date
from decimal import Decimal

import pytest

from database.db_manager import DatabaseManager
from database.month_settings_dao import MonthSettingsDAO
from database.recurring_dao import RecurringTemplateDAO
from database.transaction_dao import TransactionDAO
from models.recurring_template import RecurringTemplate
from models.schedule import Schedule
from models.transaction import Transaction
from services.month_service import MonthService
from services.recurring_service import RecurringService
from services.transaction_service import TransactionService


@pytest.fixture
def db(tmp_path):
    manager = DatabaseManager(str(tmp_path / "test.db"))
    manager.initialize()
    yield manager
    manager.close()


@pytest.fixture
def template_dao(db):
    return RecurringTemplateDAO(db)


@pytest.fixture
def tx_dao(db):
    return TransactionDAO(db)


@pytest.fixture
def settings_dao(db):
    return MonthSettingsDAO(db)


@pytest.fixture
def recurring_svc(template_dao, tx_dao, settings_dao):
    return RecurringService(template_dao, tx_dao, settings_dao)


@pytest.fixture
def tx_svc(tx_dao, settings_dao):
    return TransactionService(tx_dao, settings_dao)


@pytest.fixture
def month_svc(recurring_svc, template_dao, tx_dao, settings_dao):
    return MonthService(recurring_svc, template_dao, tx_dao, settings_dao)


def make_template(
    id="rent",
    direction="expense",
    amount="1200.00",
    schedule=None,
    is_active=True,
    every="monthly",
    start_date=date(2024, 1, 1),
    **schedule_kwargs,
) -> RecurringTemplate:
    if schedule is None:
        schedule = Schedule(every, start_date, **schedule_kwargs)
    return RecurringTemplate(
        id=id,
        type=direction,
        amount=Decimal(amount),
        category_id="housing",
        description=f"{id} payment",
        schedule=schedule,
        is_active=is_active,
    )


def make_transaction(id="tx1", on=date(2024, 1, 1), parent=None, verified=False,
                     type="expense", amount="10.00", is_forecasted=False) -> Transaction:
    return Transaction(
        id=id,
        type=type,
        amount=Decimal(amount),
        category_id="other",
        description=id,
        date=on,
        verified=verified,
        is_forecasted=is_forecasted,
        recurring_parent_id=parent,
    )
