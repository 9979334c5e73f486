"""Domain model entities for envelopes.

These are pure data classes representing business concepts, independent of
database schema. Stored records (owners, accounts, categories, transactions,
assignments, targets) come back from the Database layer as these types;
the derived budget figures are built by the engine.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from enum import Enum
from typing import Any, Optional

from envelopes.domain.month import MonthKey


class TargetType(str, Enum):
    """Kind of funding target."""

    MONTHLY = "monthly"
    BY_DATE = "by_date"


class RefillType(str, Enum):
    """How a target treats money carried in from the previous month."""

    REFILL = "refill"
    SET_ASIDE = "set_aside"


class BudgetStatus(str, Enum):
    """Presentation state of a category for a month, in priority order."""

    OVERSPENT = "overspent"
    FUNDED = "funded"
    UNDERFUNDED = "underfunded"
    SPENT = "spent"
    AVAILABLE = "available"
    EMPTY = "empty"


class MoveMode(str, Enum):
    """Direction chosen by the money-movement operator."""

    SURPLUS = "surplus"
    COVER_OVERSPEND = "cover_overspend"


@dataclass(frozen=True)
class Owner:
    """Budget owner domain entity."""

    id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class Account:
    """Account domain entity.

    The start balance is the account's balance on ``opened_on``; for an
    on-budget account it is income to assign in that month.
    """

    id: int
    owner_id: int
    name: str
    on_budget: bool
    start_balance: int
    opened_on: date
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Budget category domain entity."""

    id: int
    owner_id: int
    group_id: int
    name: str
    sort_order: int
    is_hidden: bool
    created_at: datetime


@dataclass(frozen=True)
class CategoryGroup:
    """Ordered, named container of categories. Carries no money itself."""

    id: int
    owner_id: int
    name: str
    sort_order: int
    is_hidden: bool
    created_at: datetime
    categories: tuple[Category, ...] = ()


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    Amounts are signed cents: negative is an outflow, positive an inflow.
    A transaction without a category is income waiting to be assigned.
    """

    id: int
    owner_id: int
    account_id: int
    date: date
    amount: int
    category_id: Optional[int]
    cleared: bool
    payee: Optional[str]
    memo: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class Assignment:
    """Money assigned to a category for one month."""

    owner_id: int
    category_id: int
    month: MonthKey
    assigned: int
    version: int


@dataclass(frozen=True)
class TargetDefinition:
    """User-supplied funding goal for a category."""

    type: TargetType
    amount: int
    day_of_month: Optional[int] = None
    target_month: Optional[MonthKey] = None
    refill_type: RefillType = RefillType.REFILL


@dataclass(frozen=True)
class CategoryTarget:
    """Stored target, one per category."""

    id: int
    owner_id: int
    category_id: int
    definition: TargetDefinition
    created_at: datetime


@dataclass(frozen=True)
class TargetProgress:
    """Evaluation of a target for one month."""

    type: TargetType
    amount: int
    needed: int
    progress: float
    day_of_month: Optional[int]
    refill_type: RefillType
    target_month: Optional[MonthKey] = None
    monthly_contribution: Optional[int] = None

    @property
    def is_funded(self) -> bool:
        return self.needed == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "amount": self.amount,
            "needed": self.needed,
            "progress": self.progress,
            "dayOfMonth": self.day_of_month,
            "refillType": self.refill_type.value,
            "targetMonth": str(self.target_month) if self.target_month else None,
            "monthlyContribution": self.monthly_contribution,
        }


@dataclass(frozen=True)
class CategoryBudgetData:
    """Derived budget figures for one category in one month."""

    category_id: int
    month: MonthKey
    assigned: int
    activity: int
    available: int
    status: BudgetStatus
    target: Optional[TargetProgress] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "categoryId": self.category_id,
            "month": str(self.month),
            "assigned": self.assigned,
            "activity": self.activity,
            "available": self.available,
            "status": self.status.value,
            "target": self.target.to_dict() if self.target else None,
        }


@dataclass(frozen=True)
class GroupBudget:
    """A category group with the budget figures of its categories."""

    group: CategoryGroup
    budgets: tuple[CategoryBudgetData, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "group": {
                "id": self.group.id,
                "name": self.group.name,
                "sortOrder": self.group.sort_order,
                "categories": [
                    {"id": c.id, "name": c.name, "sortOrder": c.sort_order}
                    for c in self.group.categories
                ],
            },
            "budgets": [b.to_dict() for b in self.budgets],
        }


@dataclass(frozen=True)
class MonthBudget:
    """Full budget view for a month."""

    month: MonthKey
    ready_to_assign: int
    category_groups: tuple[GroupBudget, ...] = field(default_factory=tuple)

    @property
    def is_overassigned(self) -> bool:
        """True when more money was assigned than has come in."""
        return self.ready_to_assign < 0

    def find(self, category_id: int) -> Optional[CategoryBudgetData]:
        """Return the budget data of a category, if it is part of this view."""
        for group_budget in self.category_groups:
            for budget in group_budget.budgets:
                if budget.category_id == category_id:
                    return budget
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": str(self.month),
            "readyToAssign": self.ready_to_assign,
            "categoryGroups": [g.to_dict() for g in self.category_groups],
        }


@dataclass(frozen=True)
class MoveResult:
    """Outcome of a money movement between two categories."""

    mode: MoveMode
    amount: int
    source: CategoryBudgetData
    dest: CategoryBudgetData

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "amount": self.amount,
            "source": self.source.to_dict(),
            "dest": self.dest.to_dict(),
        }
