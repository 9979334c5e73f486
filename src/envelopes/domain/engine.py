"""Budget engine over an immutable snapshot of one owner's data.

The engine is a pure function of its inputs: the same transactions,
assignments and targets always give the same figures. It holds no notion of
a current month; every query names the month it is about.
"""

from typing import Iterable, Mapping, Optional

from envelopes.domain.assignments import AssignmentLedger
from envelopes.domain.entities import (
    CategoryBudgetData,
    CategoryGroup,
    GroupBudget,
    MonthBudget,
    TargetDefinition,
    Transaction,
)
from envelopes.domain.ledger import (
    MonthActivity,
    activity_by_category,
    inflow_by_month,
    partition_by_month,
)
from envelopes.domain.month import MonthKey
from envelopes.domain.ready_to_assign import ReadyToAssignCalculator
from envelopes.domain.rollover import RolloverCalculator
from envelopes.domain.targets import classify, evaluate_target


class BudgetEngine:
    """Composes the ledger, rollover, Ready to Assign and target calculations."""

    def __init__(
        self,
        transactions: Iterable[Transaction],
        assignments: AssignmentLedger,
        targets: Optional[Mapping[int, TargetDefinition]] = None,
        opening_balances: Optional[Mapping[MonthKey, int]] = None,
    ):
        """Initialize engine.

        Args:
            transactions: On-budget transactions of the owner
            assignments: Snapshot of stored assignments
            targets: Target definition per category ID
            opening_balances: Start balances of on-budget accounts, summed per
                opening month; they count as income to assign
        """
        self.partitions: dict[MonthKey, MonthActivity] = partition_by_month(transactions)
        self.assignments = assignments
        self.targets = dict(targets or {})
        self.rollover = RolloverCalculator(
            activity_by_category(self.partitions),
            assignments.by_category(),
        )
        inflow = inflow_by_month(self.partitions)
        for month, amount in (opening_balances or {}).items():
            inflow[month] = inflow.get(month, 0) + amount
        self.ready = ReadyToAssignCalculator(
            inflow,
            assignments.totals_by_month(),
        )

    def month_activity(self, month: MonthKey) -> MonthActivity:
        return self.partitions.get(month) or MonthActivity(month=month)

    def ready_to_assign(self, month: MonthKey) -> int:
        return self.ready.ready_to_assign(month)

    def available(self, category_id: int, month: MonthKey) -> int:
        return self.rollover.available(category_id, month)

    def category_budget(self, category_id: int, month: MonthKey) -> CategoryBudgetData:
        """Budget figures, target progress and status for one category-month."""
        assigned = self.assignments.get(category_id, month)
        activity = self.rollover.activity(category_id, month)
        available = self.rollover.available(category_id, month)

        target = None
        definition = self.targets.get(category_id)
        if definition is not None:
            target = evaluate_target(
                definition,
                month,
                assigned=assigned,
                available=available,
                carry_in=self.rollover.carry_in(category_id, month),
            )

        had_outflow = category_id in self.month_activity(month).outflow_categories
        return CategoryBudgetData(
            category_id=category_id,
            month=month,
            assigned=assigned,
            activity=activity,
            available=available,
            status=classify(available, had_outflow, target),
            target=target,
        )

    def month_budget(self, groups: Iterable[CategoryGroup], month: MonthKey) -> MonthBudget:
        """Assemble the full budget view for ``month`` in group order."""
        group_budgets = tuple(
            GroupBudget(
                group=group,
                budgets=tuple(
                    self.category_budget(category.id, month) for category in group.categories
                ),
            )
            for group in groups
        )
        return MonthBudget(
            month=month,
            ready_to_assign=self.ready_to_assign(month),
            category_groups=group_budgets,
        )
