"""Month-over-month rollover of category balances.

available(c, m) = assigned(c, m) + activity(c, m) + available(c, m - 1)

A negative balance is carried into the next month as-is; it is never reset
to zero. Months without any data still carry the previous balance forward.
"""

import bisect
from dataclasses import dataclass
from typing import Iterator, Mapping, Optional

from envelopes.domain.month import MonthKey, month_range


@dataclass(frozen=True)
class RolloverRow:
    """One month of a category's running balance."""

    month: MonthKey
    carry_in: int
    assigned: int
    activity: int
    available: int


class _CategoryBalances:
    """Prefix sums over the months where a category has data."""

    def __init__(self, assigned: Mapping[MonthKey, int], activity: Mapping[MonthKey, int]):
        self.months = sorted(set(assigned) | set(activity))
        self.assigned = assigned
        self.activity = activity
        self.running: list[int] = []
        total = 0
        for month in self.months:
            total += assigned.get(month, 0) + activity.get(month, 0)
            self.running.append(total)

    def balance_through(self, month: MonthKey) -> int:
        index = bisect.bisect_right(self.months, month)
        return self.running[index - 1] if index else 0


class RolloverCalculator:
    """Computes available balances for every category of a snapshot.

    Running balances are built once per category on first use and reused for
    every later query, so a lookup costs O(log n) in the number of months with
    data rather than a walk from the first month.
    """

    def __init__(
        self,
        activity: Mapping[int, Mapping[MonthKey, int]],
        assignments: Mapping[int, Mapping[MonthKey, int]],
    ):
        """Initialize rollover calculator.

        Args:
            activity: category -> month -> net transaction amount
            assignments: category -> month -> assigned amount
        """
        self._activity = activity
        self._assignments = assignments
        self._cache: dict[int, _CategoryBalances] = {}

    def _balances(self, category_id: int) -> _CategoryBalances:
        balances = self._cache.get(category_id)
        if balances is None:
            balances = _CategoryBalances(
                self._assignments.get(category_id, {}),
                self._activity.get(category_id, {}),
            )
            self._cache[category_id] = balances
        return balances

    def first_month(self, category_id: int) -> Optional[MonthKey]:
        """First month with any assignment or activity, None for an untouched category."""
        months = self._balances(category_id).months
        return months[0] if months else None

    def assigned(self, category_id: int, month: MonthKey) -> int:
        return self._balances(category_id).assigned.get(month, 0)

    def activity(self, category_id: int, month: MonthKey) -> int:
        return self._balances(category_id).activity.get(month, 0)

    def available(self, category_id: int, month: MonthKey) -> int:
        """Balance at the end of ``month``."""
        return self._balances(category_id).balance_through(month)

    def carry_in(self, category_id: int, month: MonthKey) -> int:
        """Balance carried into ``month`` from the month before."""
        return self.available(category_id, month.previous())

    def history(self, category_id: int, start: MonthKey, end: MonthKey) -> Iterator[RolloverRow]:
        """Yield a row per month from ``start`` to ``end``, empty months included."""
        carry = self.carry_in(category_id, start)
        for month in month_range(start, end):
            assigned = self.assigned(category_id, month)
            activity = self.activity(category_id, month)
            available = carry + assigned + activity
            yield RolloverRow(
                month=month,
                carry_in=carry,
                assigned=assigned,
                activity=activity,
                available=available,
            )
            carry = available
