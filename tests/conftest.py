"""Shared pytest fixtures for envelopes tests."""

import logging
import os
import tempfile
from datetime import date

import pytest

from envelopes.database.factories import create_sqlite_database
from envelopes.domain.account import AccountService
from envelopes.domain.budget import BudgetService
from envelopes.domain.category import CategoryService
from envelopes.domain.entities import Transaction
from envelopes.domain.owner import OwnerService
from envelopes.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for CLI tests that open their own connection
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def owner_service(temp_db):
    return OwnerService(temp_db)


@pytest.fixture
def account_service(temp_db):
    return AccountService(temp_db)


@pytest.fixture
def category_service(temp_db):
    return CategoryService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    return TransactionService(temp_db)


@pytest.fixture
def budget_service(temp_db):
    return BudgetService(temp_db)


@pytest.fixture
def sample_owner(owner_service):
    """The owner the CLI uses when --owner is not given."""
    return owner_service.get_or_create_owner("default")


@pytest.fixture
def other_owner(owner_service):
    return owner_service.get_or_create_owner("someone else")


@pytest.fixture
def sample_account(account_service, sample_owner):
    account_id = account_service.create_account(sample_owner.id, "Checking")
    return account_service.get_account(account_id)


@pytest.fixture
def sample_categories(category_service, sample_owner):
    """Two groups with a few categories; returns name -> category ID."""
    everyday = category_service.create_group(sample_owner.id, "Everyday")
    bills = category_service.create_group(sample_owner.id, "Bills")
    return {
        "Groceries": category_service.create_category(sample_owner.id, everyday, "Groceries"),
        "Dining": category_service.create_category(sample_owner.id, everyday, "Dining"),
        "Rent": category_service.create_category(sample_owner.id, bills, "Rent"),
    }


@pytest.fixture
def make_transaction():
    """Build in-memory transactions for the pure calculators."""
    counter = iter(range(1, 10_000))

    def _make(txn_date, amount, category_id=None, cleared=False):
        if isinstance(txn_date, str):
            txn_date = date.fromisoformat(txn_date)
        return Transaction(
            id=next(counter),
            owner_id=1,
            account_id=1,
            date=txn_date,
            amount=amount,
            category_id=category_id,
            cleared=cleared,
            payee=None,
            memo=None,
            created_at=None,
        )

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers the CLI installs so they don't outlive the runner's streams."""
    yield
    logging.getLogger("envelopes").handlers.clear()
