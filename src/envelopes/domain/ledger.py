"""Ledger aggregation: transactions to per-category, per-month activity.

Both cleared and uncleared transactions count toward activity. Only the
transaction date decides which month a transaction belongs to.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable

from envelopes.domain.entities import Transaction
from envelopes.domain.month import MonthKey


@dataclass
class MonthActivity:
    """Aggregated ledger figures for one month.

    Attributes:
        activity: Net signed amount per category
        unassigned_inflow: Sum of positive amounts on uncategorized transactions
        outflow_categories: Categories with at least one outflow in the month
    """

    month: MonthKey
    activity: dict[int, int] = field(default_factory=dict)
    unassigned_inflow: int = 0
    outflow_categories: set[int] = field(default_factory=set)

    def activity_for(self, category_id: int) -> int:
        return self.activity.get(category_id, 0)

    def add(self, txn: Transaction) -> None:
        """Fold one transaction of this month into the totals."""
        if txn.category_id is None:
            # Uncategorized outflows are neither income nor envelope activity
            if txn.amount > 0:
                self.unassigned_inflow += txn.amount
            return
        self.activity[txn.category_id] = self.activity.get(txn.category_id, 0) + txn.amount
        if txn.amount < 0:
            self.outflow_categories.add(txn.category_id)


def aggregate_month(transactions: Iterable[Transaction], month: MonthKey) -> MonthActivity:
    """Aggregate the transactions dated within ``month``.

    Args:
        transactions: Any collection of transactions; other months are skipped
        month: Month to aggregate

    Returns:
        MonthActivity for the month (empty when nothing matches)
    """
    result = MonthActivity(month=month)
    for txn in transactions:
        if month.contains(txn.date):
            result.add(txn)
    return result


def partition_by_month(transactions: Iterable[Transaction]) -> dict[MonthKey, MonthActivity]:
    """Aggregate all transactions in a single pass, keyed by month.

    Produces the same figures as calling ``aggregate_month`` once per month.
    """
    months: dict[MonthKey, MonthActivity] = {}
    for txn in transactions:
        key = MonthKey.from_date(txn.date)
        bucket = months.get(key)
        if bucket is None:
            bucket = months[key] = MonthActivity(month=key)
        bucket.add(txn)
    return dict(sorted(months.items()))


def activity_by_category(
    partitions: dict[MonthKey, MonthActivity],
) -> dict[int, dict[MonthKey, int]]:
    """Pivot monthly partitions into category -> month -> activity."""
    pivot: dict[int, dict[MonthKey, int]] = defaultdict(dict)
    for month, bucket in partitions.items():
        for category_id, amount in bucket.activity.items():
            pivot[category_id][month] = amount
    return dict(pivot)


def inflow_by_month(partitions: dict[MonthKey, MonthActivity]) -> dict[MonthKey, int]:
    """Unassigned inflow per month."""
    return {
        month: bucket.unassigned_inflow
        for month, bucket in partitions.items()
        if bucket.unassigned_inflow
    }
