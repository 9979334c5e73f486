"""Tests for moving money between categories."""

from datetime import date

import pytest

from envelopes.domain.assignments import AssignmentStore
from envelopes.domain.entities import MoveMode
from envelopes.domain.errors import (
    CrossOwnerOperationError,
    InvalidAmountError,
    NotFoundError,
    ValidationError,
)
from envelopes.domain.month import MonthKey
from envelopes.domain.movement import plan_move, validate_move

JAN = MonthKey(2024, 1)


def test_plan_surplus():
    plan = plan_move(source_available=5000, amount=2000)
    assert plan.mode == MoveMode.SURPLUS
    assert (plan.source_delta, plan.dest_delta) == (-2000, 2000)


def test_plan_zero_balance_is_surplus():
    assert plan_move(0, 100).mode == MoveMode.SURPLUS


def test_plan_cover_overspend():
    plan = plan_move(source_available=-300, amount=300)
    assert plan.mode == MoveMode.COVER_OVERSPEND
    assert (plan.source_delta, plan.dest_delta) == (300, -300)


@pytest.mark.parametrize("amount", [0, -5, 1.5, "10"])
def test_validate_move_amount(amount):
    with pytest.raises(InvalidAmountError):
        validate_move(1, 2, amount)


def test_validate_move_same_category():
    with pytest.raises(ValidationError):
        validate_move(3, 3, 100)


@pytest.fixture
def budgeted(transaction_service, budget_service, sample_owner, sample_account, sample_categories):
    transaction_service.create_transaction(sample_account.id, date(2024, 1, 1), 100000)
    budget_service.set_assigned(sample_owner.id, sample_categories["Groceries"], JAN, 30000)
    budget_service.set_assigned(sample_owner.id, sample_categories["Dining"], JAN, 10000)
    return sample_categories


def test_surplus_move(budget_service, sample_owner, budgeted):
    before = budget_service.get_budget(sample_owner.id, JAN)

    result = budget_service.move_money(
        sample_owner.id, budgeted["Groceries"], budgeted["Dining"], JAN, 5000
    )

    assert result.mode == MoveMode.SURPLUS
    assert result.source.assigned == 25000
    assert result.dest.assigned == 15000
    after = budget_service.get_budget(sample_owner.id, JAN)
    assert after.ready_to_assign == before.ready_to_assign


def test_cover_overspend_move(budget_service, transaction_service, sample_owner, sample_account, budgeted):
    transaction_service.create_transaction(
        sample_account.id, date(2024, 1, 12), -12500, category_id=budgeted["Dining"]
    )
    assert budget_service.get_category_budget(sample_owner.id, budgeted["Dining"], JAN).available == -2500

    result = budget_service.move_money(
        sample_owner.id, budgeted["Dining"], budgeted["Groceries"], JAN, 2500
    )

    assert result.mode == MoveMode.COVER_OVERSPEND
    assert result.source.available == 0
    assert result.source.assigned == 12500
    assert result.dest.available == 27500
    assert result.to_dict()["mode"] == "cover_overspend"


def test_move_is_neutral(budget_service, sample_owner, budgeted):
    """The two categories' combined balance and Ready to Assign do not change."""
    ids = (budgeted["Groceries"], budgeted["Rent"])
    before = budget_service.get_budget(sample_owner.id, JAN)
    combined_before = sum(before.find(i).available for i in ids)

    budget_service.move_money(sample_owner.id, ids[0], ids[1], JAN, 12345)

    after = budget_service.get_budget(sample_owner.id, JAN)
    assert sum(after.find(i).available for i in ids) == combined_before
    assert after.ready_to_assign == before.ready_to_assign


def test_move_rolls_back_when_second_write_fails(budget_service, sample_owner, budgeted, monkeypatch):
    original_delta = AssignmentStore.delta
    calls = []

    def failing_delta(self, category_id, month, amount):
        calls.append(category_id)
        if len(calls) == 2:
            raise RuntimeError("disk full")
        return original_delta(self, category_id, month, amount)

    monkeypatch.setattr(AssignmentStore, "delta", failing_delta)
    with pytest.raises(RuntimeError):
        budget_service.move_money(sample_owner.id, budgeted["Groceries"], budgeted["Dining"], JAN, 5000)
    monkeypatch.undo()

    store = AssignmentStore(budget_service.db, sample_owner.id)
    assert store.get(budgeted["Groceries"], JAN) == 30000
    assert store.get(budgeted["Dining"], JAN) == 10000


def test_move_into_untouched_month(budget_service, sample_owner, budgeted):
    """Moving in a month with no assignments yet creates both rows."""
    feb = MonthKey(2024, 2)
    result = budget_service.move_money(sample_owner.id, budgeted["Groceries"], budgeted["Rent"], feb, 1000)

    assert result.source.assigned == -1000
    assert result.source.available == 29000
    assert result.dest.available == 1000


def test_move_rejects_invalid_requests(budget_service, sample_owner, other_owner, budgeted, category_service):
    groceries, dining = budgeted["Groceries"], budgeted["Dining"]
    with pytest.raises(InvalidAmountError):
        budget_service.move_money(sample_owner.id, groceries, dining, JAN, 0)
    with pytest.raises(ValidationError):
        budget_service.move_money(sample_owner.id, groceries, groceries, JAN, 100)
    with pytest.raises(NotFoundError):
        budget_service.move_money(sample_owner.id, groceries, 9999, JAN, 100)

    foreign_group = category_service.create_group(other_owner.id, "Theirs")
    foreign = category_service.create_category(other_owner.id, foreign_group, "Theirs")
    with pytest.raises(CrossOwnerOperationError):
        budget_service.move_money(sample_owner.id, groceries, foreign, JAN, 100)

    store = AssignmentStore(budget_service.db, sample_owner.id)
    assert store.get(groceries, JAN) == 30000
