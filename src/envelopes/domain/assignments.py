"""Assignment store: money assigned per (category, month).

``get`` is the one definition of the default: a pair that has never been
written is worth 0. Negative assignments are allowed; they pull money back
to Ready to Assign.
"""

import logging
from collections import defaultdict
from typing import Iterable, Iterator, Optional

from envelopes.database.base import Database
from envelopes.domain.entities import Assignment
from envelopes.domain.money import Money, ensure_cents
from envelopes.domain.month import MonthKey

logger = logging.getLogger(__name__)


class AssignmentLedger:
    """In-memory snapshot of assignments used by the calculators."""

    def __init__(self, entries: Iterable[Assignment] = ()):
        self._values: dict[tuple[int, MonthKey], int] = {}
        self._versions: dict[tuple[int, MonthKey], int] = {}
        for entry in entries:
            key = (entry.category_id, entry.month)
            self._values[key] = entry.assigned
            self._versions[key] = entry.version

    def get(self, category_id: int, month: MonthKey) -> Money:
        return Money(self._values.get((category_id, month), 0))

    def version(self, category_id: int, month: MonthKey) -> int:
        return self._versions.get((category_id, month), 0)

    def set(self, category_id: int, month: MonthKey, amount: int) -> None:
        key = (category_id, month)
        self._values[key] = ensure_cents(amount)
        self._versions[key] = self._versions.get(key, 0) + 1

    def delta(self, category_id: int, month: MonthKey, amount: int) -> None:
        self.set(category_id, month, self.get(category_id, month) + ensure_cents(amount))

    def __iter__(self) -> Iterator[tuple[int, MonthKey, int]]:
        for (category_id, month), amount in sorted(
            self._values.items(), key=lambda item: (item[0][1], item[0][0])
        ):
            yield category_id, month, amount

    def by_category(self) -> dict[int, dict[MonthKey, int]]:
        """Pivot into category -> month -> assigned."""
        pivot: dict[int, dict[MonthKey, int]] = defaultdict(dict)
        for category_id, month, amount in self:
            pivot[category_id][month] = amount
        return dict(pivot)

    def totals_by_month(self) -> dict[MonthKey, int]:
        """Sum of assignments across all categories, per month."""
        totals: dict[MonthKey, int] = defaultdict(int)
        for _, month, amount in self:
            totals[month] += amount
        return dict(totals)


class AssignmentStore:
    """Database-backed assignment store for one budget owner."""

    def __init__(self, db: Database, owner_id: int):
        """Initialize assignment store.

        Args:
            db: Database instance
            owner_id: Budget owner whose assignments are read and written
        """
        self.db = db
        self.owner_id = owner_id

    def get(self, category_id: int, month: MonthKey) -> Money:
        """Return the assigned amount, 0 when nothing has been stored."""
        entry = self.db.get_assignment(self.owner_id, category_id, month)
        return Money(entry.assigned if entry is not None else 0)

    def version(self, category_id: int, month: MonthKey) -> int:
        """Return the stored version (0 when the row does not exist)."""
        entry = self.db.get_assignment(self.owner_id, category_id, month)
        return entry.version if entry is not None else 0

    def set(
        self,
        category_id: int,
        month: MonthKey,
        amount: int,
        expected_version: Optional[int] = None,
    ) -> Assignment:
        """Replace the assigned amount.

        Args:
            category_id: Category ID
            month: Budget month
            amount: New assigned amount in cents (may be negative)
            expected_version: If given, the write only succeeds when the stored
                version still matches

        Raises:
            InvalidAmountError: If amount is not an integer
            ConcurrentModificationError: If expected_version does not match
        """
        amount = ensure_cents(amount)
        entry = self.db.set_assignment(
            owner_id=self.owner_id,
            category_id=category_id,
            month=month,
            assigned=amount,
            expected_version=expected_version,
        )
        logger.debug(
            "Assignment set",
            extra={"category_id": category_id, "month": str(month), "assigned": amount},
        )
        return entry

    def delta(self, category_id: int, month: MonthKey, amount: int) -> Assignment:
        """Add ``amount`` to the stored value, guarded by its current version."""
        amount = ensure_cents(amount)
        entry = self.db.get_assignment(self.owner_id, category_id, month)
        current = entry.assigned if entry is not None else 0
        version = entry.version if entry is not None else 0
        return self.set(category_id, month, current + amount, expected_version=version)

    def entries(self, through: Optional[MonthKey] = None) -> list[Assignment]:
        """List stored assignments up to and including ``through``."""
        return self.db.list_assignments(self.owner_id, through=through)

    def snapshot(self, through: Optional[MonthKey] = None) -> AssignmentLedger:
        """Load the stored assignments into an in-memory ledger."""
        return AssignmentLedger(self.entries(through=through))
