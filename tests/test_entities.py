"""Tests for domain entities."""

from datetime import UTC, datetime

import pytest

from envelopes.domain.entities import (
    BudgetStatus,
    Category,
    CategoryBudgetData,
    CategoryGroup,
    GroupBudget,
    MonthBudget,
    MoveMode,
    MoveResult,
    RefillType,
    TargetProgress,
    TargetType,
)
from envelopes.domain.month import MonthKey

JAN = MonthKey(2024, 1)


def budget_data(category_id, available, target=None):
    return CategoryBudgetData(
        category_id=category_id,
        month=JAN,
        assigned=available,
        activity=0,
        available=available,
        status=BudgetStatus.AVAILABLE,
        target=target,
    )


class TestCategoryBudgetData:
    """Tests for CategoryBudgetData entity."""

    def test_immutability(self):
        data = budget_data(1, 100)
        with pytest.raises(Exception):  # dataclass frozen raises FrozenInstanceError
            data.available = 0

    def test_to_dict_uses_wire_names(self):
        target = TargetProgress(
            type=TargetType.BY_DATE,
            amount=6000,
            needed=2000,
            progress=0.25,
            day_of_month=None,
            refill_type=RefillType.REFILL,
            target_month=MonthKey(2024, 3),
            monthly_contribution=2000,
        )

        data = budget_data(4, 1500, target).to_dict()

        assert data["categoryId"] == 4
        assert data["month"] == "2024-01"
        assert data["status"] == "available"
        assert data["target"]["targetMonth"] == "2024-03"
        assert data["target"]["refillType"] == "refill"
        assert data["target"]["monthlyContribution"] == 2000


class TestMonthBudget:
    """Tests for MonthBudget entity."""

    def test_find_and_overassigned(self):
        now = datetime.now(UTC)
        category = Category(
            id=4, owner_id=1, group_id=2, name="Rent", sort_order=0, is_hidden=False, created_at=now
        )
        group = CategoryGroup(
            id=2, owner_id=1, name="Bills", sort_order=0, is_hidden=False, created_at=now,
            categories=(category,),
        )
        budget = MonthBudget(
            month=JAN,
            ready_to_assign=-10,
            category_groups=(GroupBudget(group=group, budgets=(budget_data(4, 10),)),),
        )

        assert budget.is_overassigned
        assert budget.find(4).available == 10
        assert budget.find(5) is None
        assert budget.to_dict()["categoryGroups"][0]["group"]["categories"][0]["name"] == "Rent"


class TestMoveResult:
    """Tests for MoveResult entity."""

    def test_to_dict(self):
        result = MoveResult(MoveMode.SURPLUS, 300, budget_data(1, 700), budget_data(2, 300))
        data = result.to_dict()
        assert data["mode"] == "surplus"
        assert data["source"]["available"] == 700
        assert data["dest"]["categoryId"] == 2
