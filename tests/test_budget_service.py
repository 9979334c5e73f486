"""Tests for the budget service over a real database."""

import logging
from datetime import date

import pytest

from envelopes.domain.assignments import AssignmentStore
from envelopes.domain.entities import (
    BudgetStatus,
    MoveMode,
    RefillType,
    TargetDefinition,
    TargetType,
)
from envelopes.domain.errors import (
    ConcurrentModificationError,
    CrossOwnerOperationError,
    InvalidAmountError,
    NotFoundError,
    ValidationError,
)
from envelopes.domain.month import MonthKey

JAN = MonthKey(2024, 1)
FEB = MonthKey(2024, 2)


@pytest.fixture
def funded_budget(transaction_service, budget_service, sample_owner, sample_account, sample_categories):
    """300000 of income, 50000 assigned to Groceries, 12000 spent on it."""
    transaction_service.create_transaction(sample_account.id, date(2024, 1, 1), 300000)
    budget_service.set_assigned(sample_owner.id, sample_categories["Groceries"], JAN, 50000)
    transaction_service.create_transaction(
        sample_account.id, date(2024, 1, 9), -12000, category_id=sample_categories["Groceries"]
    )
    return sample_categories


def test_income_and_assignment_scenario(budget_service, sample_owner, funded_budget):
    budget = budget_service.get_budget(sample_owner.id, "2024-01")
    groceries = budget.find(funded_budget["Groceries"])

    assert budget.ready_to_assign == 250000
    assert groceries.assigned == 50000
    assert groceries.activity == -12000
    assert groceries.available == 38000
    assert groceries.status == BudgetStatus.AVAILABLE
    assert [g.group.name for g in budget.category_groups] == ["Everyday", "Bills"]


def test_empty_budget_defaults_to_zero(budget_service, sample_owner, sample_categories):
    budget = budget_service.get_budget(sample_owner.id, JAN)

    assert budget.ready_to_assign == 0
    rent = budget.find(sample_categories["Rent"])
    assert (rent.assigned, rent.activity, rent.available) == (0, 0, 0)
    assert rent.status == BudgetStatus.EMPTY


def test_get_budget_is_idempotent(budget_service, sample_owner, funded_budget):
    first = budget_service.get_budget(sample_owner.id, JAN)
    second = budget_service.get_budget(sample_owner.id, JAN)
    assert first == second
    assert first.to_dict() == second.to_dict()


def test_balances_roll_into_next_month(
    budget_service, transaction_service, sample_owner, sample_account, sample_categories
):
    dining = sample_categories["Dining"]
    transaction_service.create_transaction(sample_account.id, date(2024, 1, 1), 100000)
    budget_service.set_assigned(sample_owner.id, dining, JAN, 1000)
    transaction_service.create_transaction(sample_account.id, date(2024, 1, 20), -1200, category_id=dining)
    budget_service.set_assigned(sample_owner.id, dining, FEB, 500)

    jan = budget_service.get_category_budget(sample_owner.id, dining, JAN)
    feb = budget_service.get_category_budget(sample_owner.id, dining, FEB)

    assert jan.available == -200
    assert jan.status == BudgetStatus.OVERSPENT
    assert feb.available == 300
    assert budget_service.get_budget(sample_owner.id, FEB).ready_to_assign == 100000 - 1500


def test_conservation(budget_service, transaction_service, sample_owner, sample_account, sample_categories):
    """Income equals Ready to Assign plus everything assigned."""
    transaction_service.create_transaction(sample_account.id, date(2024, 1, 1), 250000)
    transaction_service.create_transaction(sample_account.id, date(2024, 2, 1), 80000)
    budget_service.set_assigned(sample_owner.id, sample_categories["Rent"], JAN, 120000)
    budget_service.set_assigned(sample_owner.id, sample_categories["Groceries"], FEB, 40000)
    budget_service.set_assigned(sample_owner.id, sample_categories["Dining"], FEB, -5000)
    transaction_service.create_transaction(
        sample_account.id, date(2024, 2, 3), -120000, category_id=sample_categories["Rent"]
    )

    budget = budget_service.get_budget(sample_owner.id, FEB)
    assigned_total = sum(
        entry.assigned for entry in AssignmentStore(budget_service.db, sample_owner.id).entries(FEB)
    )
    activity_total = sum(b.activity for g in budget.category_groups for b in g.budgets)
    available_total = sum(b.available for g in budget.category_groups for b in g.budgets)

    assert 330000 == budget.ready_to_assign + assigned_total
    assert 330000 + activity_total == budget.ready_to_assign + available_total


def test_off_budget_accounts_are_ignored(
    budget_service, account_service, transaction_service, sample_owner, sample_categories
):
    tracking = account_service.create_account(sample_owner.id, "Brokerage", on_budget=False)
    transaction_service.create_transaction(tracking, date(2024, 1, 5), 999999)

    assert budget_service.get_budget(sample_owner.id, JAN).ready_to_assign == 0


def test_hidden_categories_still_count(
    budget_service, category_service, transaction_service, sample_owner, sample_account, sample_categories
):
    transaction_service.create_transaction(sample_account.id, date(2024, 1, 1), 10000)
    budget_service.set_assigned(sample_owner.id, sample_categories["Dining"], JAN, 4000)
    category_service.set_category_hidden(sample_categories["Dining"], True)

    budget = budget_service.get_budget(sample_owner.id, JAN)
    assert budget.find(sample_categories["Dining"]) is None
    assert budget.ready_to_assign == 6000

    with_hidden = budget_service.get_budget(sample_owner.id, JAN, include_hidden=True)
    assert with_hidden.find(sample_categories["Dining"]).available == 4000


def test_over_assignment_logs_warning(budget_service, sample_owner, sample_categories, caplog):
    budget_service.set_assigned(sample_owner.id, sample_categories["Rent"], JAN, 1000)

    with caplog.at_level(logging.WARNING, logger="envelopes"):
        budget = budget_service.get_budget(sample_owner.id, JAN)

    assert budget.ready_to_assign == -1000
    assert budget.is_overassigned
    assert "Ready to Assign is negative" in caplog.text


def test_set_assigned_replaces_value(budget_service, sample_owner, sample_categories):
    rent = sample_categories["Rent"]
    budget_service.set_assigned(sample_owner.id, rent, JAN, 1000)
    data = budget_service.set_assigned(sample_owner.id, rent, JAN, 700)

    assert data.assigned == 700
    assert budget_service.get_budget(sample_owner.id, JAN).ready_to_assign == -700


def test_set_assigned_version_conflict(budget_service, sample_owner, sample_categories):
    rent = sample_categories["Rent"]
    store = AssignmentStore(budget_service.db, sample_owner.id)
    budget_service.set_assigned(sample_owner.id, rent, JAN, 1000, expected_version=0)
    version = store.version(rent, JAN)
    assert version == 1

    budget_service.set_assigned(sample_owner.id, rent, JAN, 2000, expected_version=version)
    with pytest.raises(ConcurrentModificationError):
        budget_service.set_assigned(sample_owner.id, rent, JAN, 3000, expected_version=version)
    with pytest.raises(ConcurrentModificationError):
        budget_service.set_assigned(sample_owner.id, sample_categories["Dining"], JAN, 10, expected_version=4)

    assert store.get(rent, JAN) == 2000


def test_set_assigned_rejects_bad_input(budget_service, sample_owner, other_owner, sample_categories):
    with pytest.raises(InvalidAmountError):
        budget_service.set_assigned(sample_owner.id, sample_categories["Rent"], JAN, 10.5)
    with pytest.raises(NotFoundError):
        budget_service.set_assigned(sample_owner.id, 9999, JAN, 100)
    with pytest.raises(CrossOwnerOperationError):
        budget_service.set_assigned(other_owner.id, sample_categories["Rent"], JAN, 100)
    with pytest.raises(ValidationError):
        budget_service.set_assigned(sample_owner.id, sample_categories["Rent"], "2024-13", 100)


def test_get_budget_unknown_owner(budget_service):
    with pytest.raises(NotFoundError):
        budget_service.get_budget(4242, JAN)


def test_category_calls_check_owner_first(budget_service, sample_categories):
    """An unknown owner is reported as missing, not as a cross-owner access."""
    rent = sample_categories["Rent"]
    with pytest.raises(NotFoundError):
        budget_service.set_assigned(4242, rent, JAN, 100)
    with pytest.raises(NotFoundError):
        budget_service.get_category_budget(4242, rent, JAN)
    with pytest.raises(NotFoundError):
        budget_service.category_history(4242, rent, JAN, FEB)


def test_oversized_amount_leaves_database_usable(budget_service, sample_owner, sample_categories):
    rent = sample_categories["Rent"]
    with pytest.raises(InvalidAmountError):
        budget_service.set_assigned(sample_owner.id, rent, JAN, 2**63)

    budget = budget_service.set_assigned(sample_owner.id, rent, JAN, 100)

    assert budget.assigned == 100


def test_target_progress_in_budget(budget_service, sample_owner, sample_categories):
    groceries = sample_categories["Groceries"]
    budget_service.set_target(groceries, TargetDefinition(type=TargetType.MONTHLY, amount=5000))

    budget_service.set_assigned(sample_owner.id, groceries, JAN, 4999)
    data = budget_service.get_category_budget(sample_owner.id, groceries, JAN)
    assert data.target.needed == 1
    assert data.status == BudgetStatus.UNDERFUNDED

    budget_service.set_assigned(sample_owner.id, groceries, JAN, 5000)
    data = budget_service.get_category_budget(sample_owner.id, groceries, JAN)
    assert data.target.needed == 0
    assert data.target.progress == 1.0
    assert data.status == BudgetStatus.FUNDED


def test_set_target_replaces_and_clear_removes(budget_service, sample_owner, sample_categories):
    rent = sample_categories["Rent"]
    budget_service.set_target(rent, TargetDefinition(type=TargetType.MONTHLY, amount=100000))
    budget_service.set_target(
        rent,
        TargetDefinition(
            type=TargetType.BY_DATE,
            amount=60000,
            target_month=MonthKey(2024, 3),
            refill_type=RefillType.SET_ASIDE,
        ),
    )

    stored = budget_service.db.get_target(rent)
    assert stored.definition.type == TargetType.BY_DATE
    assert stored.definition.target_month == MonthKey(2024, 3)
    assert budget_service.get_category_budget(sample_owner.id, rent, JAN).target.needed == 20000

    budget_service.clear_target(rent)
    budget_service.clear_target(rent)
    assert budget_service.db.get_target(rent) is None
    assert budget_service.get_category_budget(sample_owner.id, rent, JAN).target is None


def test_target_errors(budget_service, sample_categories):
    with pytest.raises(NotFoundError):
        budget_service.set_target(9999, TargetDefinition(type=TargetType.MONTHLY, amount=100))
    with pytest.raises(InvalidAmountError):
        budget_service.set_target(
            sample_categories["Rent"], TargetDefinition(type=TargetType.MONTHLY, amount=0)
        )
    with pytest.raises(NotFoundError):
        budget_service.clear_target(9999)


def test_category_history(budget_service, transaction_service, sample_owner, sample_account, sample_categories):
    dining = sample_categories["Dining"]
    budget_service.set_assigned(sample_owner.id, dining, JAN, 1000)
    transaction_service.create_transaction(sample_account.id, date(2024, 1, 20), -1200, category_id=dining)
    budget_service.set_assigned(sample_owner.id, dining, FEB, 500)

    rows = budget_service.category_history(sample_owner.id, dining, JAN, "2024-03")

    assert [row.available for row in rows] == [-200, 300, 300]
    assert rows[1].carry_in == -200


def test_start_balance_is_income_from_opening_month(
    account_service, budget_service, sample_owner, sample_categories
):
    account_service.create_account(
        sample_owner.id, "Savings", start_balance=150000, opened_on=date(2024, 2, 10)
    )
    account_service.create_account(
        sample_owner.id, "Brokerage", on_budget=False, start_balance=999999, opened_on=date(2024, 1, 1)
    )

    assert budget_service.get_budget(sample_owner.id, JAN).ready_to_assign == 0
    assert budget_service.get_budget(sample_owner.id, FEB).ready_to_assign == 150000

    budget_service.set_assigned(sample_owner.id, sample_categories["Rent"], FEB, 100000)
    assert budget_service.get_budget(sample_owner.id, MonthKey(2024, 3)).ready_to_assign == 50000
