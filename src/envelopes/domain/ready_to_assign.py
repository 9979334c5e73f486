"""Ready to Assign: income that has not been given to any category yet."""

import bisect
from typing import Mapping

from envelopes.domain.month import MonthKey


class ReadyToAssignCalculator:
    """Computes the global free balance for any month.

    ready_to_assign(m) = sum(unassigned inflow for months <= m)
                       - sum(assigned for all categories, months <= m)

    A negative result means more has been assigned than has come in. It is
    returned unchanged so callers can surface it.
    """

    def __init__(
        self,
        inflow_by_month: Mapping[MonthKey, int],
        assigned_by_month: Mapping[MonthKey, int],
    ):
        """Initialize calculator.

        Args:
            inflow_by_month: Unassigned inflow per month
            assigned_by_month: Total assigned across categories per month
        """
        self._months = sorted(set(inflow_by_month) | set(assigned_by_month))
        self._inflow: list[int] = []
        self._assigned: list[int] = []
        inflow_total = 0
        assigned_total = 0
        for month in self._months:
            inflow_total += inflow_by_month.get(month, 0)
            assigned_total += assigned_by_month.get(month, 0)
            self._inflow.append(inflow_total)
            self._assigned.append(assigned_total)

    def _index(self, month: MonthKey) -> int:
        return bisect.bisect_right(self._months, month) - 1

    def total_inflow(self, month: MonthKey) -> int:
        """Cumulative unassigned inflow through ``month``."""
        index = self._index(month)
        return self._inflow[index] if index >= 0 else 0

    def total_assigned(self, month: MonthKey) -> int:
        """Cumulative assigned amount through ``month``."""
        index = self._index(month)
        return self._assigned[index] if index >= 0 else 0

    def ready_to_assign(self, month: MonthKey) -> int:
        return self.total_inflow(month) - self.total_assigned(month)
