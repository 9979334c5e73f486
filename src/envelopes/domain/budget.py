"""Budget domain service: the engine's interface to its callers.

Every call names the owner and the month it is about. Writes for one owner
are serialized by a per-owner lock; reads take the same lock only while they
load their snapshot, so they never see half of a money movement.
"""

import logging
import threading
from collections import defaultdict
from datetime import date
from typing import ClassVar, Optional, Union

from envelopes.database.base import Database
from envelopes.domain.assignments import AssignmentStore
from envelopes.domain.engine import BudgetEngine
from envelopes.domain.entities import (
    Category,
    CategoryBudgetData,
    MonthBudget,
    MoveResult,
    TargetDefinition,
)
from envelopes.domain.errors import (
    CrossOwnerOperationError,
    NotFoundError,
    category_not_found,
    category_owner_mismatch,
    owner_not_found,
)
from envelopes.domain.money import ensure_cents
from envelopes.domain.month import MonthKey
from envelopes.domain.movement import MoneyMover, plan_move, validate_move
from envelopes.domain.rollover import RolloverRow
from envelopes.domain.targets import validate_target

logger = logging.getLogger(__name__)

MonthLike = Union[MonthKey, str, date]


class BudgetService:
    """Service for reading and editing an owner's envelope budget."""

    _owner_locks: ClassVar[dict[int, threading.RLock]] = {}
    _registry_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, db: Database):
        """Initialize budget service.

        Args:
            db: Database instance
        """
        self.db = db

    @classmethod
    def owner_lock(cls, owner_id: int) -> threading.RLock:
        """Return the lock that serializes writes for one owner."""
        with cls._registry_lock:
            lock = cls._owner_locks.get(owner_id)
            if lock is None:
                lock = cls._owner_locks[owner_id] = threading.RLock()
            return lock

    def _require_owner(self, owner_id: int) -> None:
        if self.db.get_owner(owner_id) is None:
            raise NotFoundError(owner_not_found(owner_id))

    def _require_category(self, owner_id: int, category_id: int) -> Category:
        category = self.db.get_category(category_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))
        if category.owner_id != owner_id:
            raise CrossOwnerOperationError(category_owner_mismatch(category_id, owner_id))
        return category

    def load_engine(self, owner_id: int, month: MonthKey) -> BudgetEngine:
        """Build an engine over everything recorded up to the end of ``month``."""
        transactions = self.db.list_transactions(
            owner_id=owner_id, end_date=month.last_day, on_budget_only=True
        )
        assignments = AssignmentStore(self.db, owner_id).snapshot(through=month)
        targets = {t.category_id: t.definition for t in self.db.list_targets(owner_id)}
        opening: dict[MonthKey, int] = defaultdict(int)
        for account in self.db.list_accounts(owner_id):
            if account.on_budget and account.start_balance and account.opened_on <= month.last_day:
                opening[MonthKey.from_date(account.opened_on)] += account.start_balance
        logger.debug(
            "Loaded budget snapshot",
            extra={
                "owner_id": owner_id,
                "month": str(month),
                "transactions": len(transactions),
                "targets": len(targets),
            },
        )
        return BudgetEngine(transactions, assignments, targets, opening_balances=opening)

    def get_budget(
        self, owner_id: int, month: MonthLike, include_hidden: bool = False
    ) -> MonthBudget:
        """Return Ready to Assign and per-category figures for a month.

        Hidden groups and categories are left out of the listing unless
        ``include_hidden`` is set; their assignments still count toward
        Ready to Assign.

        Raises:
            NotFoundError: If the owner doesn't exist
            ValidationError: If the month is not a valid "YYYY-MM" key
        """
        month = MonthKey.coerce(month)
        self._require_owner(owner_id)
        with self.owner_lock(owner_id):
            engine = self.load_engine(owner_id, month)
            groups = self.db.list_category_groups(owner_id, include_hidden=include_hidden)

        budget = engine.month_budget(groups, month)
        if budget.is_overassigned:
            logger.warning(
                "Ready to Assign is negative for owner %s in %s: %s",
                owner_id,
                month,
                budget.ready_to_assign,
            )
        return budget

    def get_category_budget(
        self, owner_id: int, category_id: int, month: MonthLike
    ) -> CategoryBudgetData:
        """Return the figures of a single category for a month."""
        month = MonthKey.coerce(month)
        with self.owner_lock(owner_id):
            self._require_owner(owner_id)
            self._require_category(owner_id, category_id)
            engine = self.load_engine(owner_id, month)
        return engine.category_budget(category_id, month)

    def category_history(
        self, owner_id: int, category_id: int, start: MonthLike, end: MonthLike
    ) -> list[RolloverRow]:
        """Month-by-month balances of a category between two months, inclusive."""
        start = MonthKey.coerce(start)
        end = MonthKey.coerce(end)
        with self.owner_lock(owner_id):
            self._require_owner(owner_id)
            self._require_category(owner_id, category_id)
            engine = self.load_engine(owner_id, end)
        return list(engine.rollover.history(category_id, start, end))

    def set_assigned(
        self,
        owner_id: int,
        category_id: int,
        month: MonthLike,
        amount_cents: int,
        expected_version: Optional[int] = None,
    ) -> CategoryBudgetData:
        """Overwrite the amount assigned to a category for a month.

        Args:
            owner_id: Budget owner
            category_id: Category ID
            month: Budget month
            amount_cents: New assigned amount (replaces, does not add)
            expected_version: Optional version for an optimistic concurrency check

        Returns:
            The category's figures after the write

        Raises:
            NotFoundError: If the owner or the category doesn't exist
            CrossOwnerOperationError: If the category belongs to another owner
            InvalidAmountError: If the amount is not an integer number of cents
            ConcurrentModificationError: If expected_version no longer matches
        """
        month = MonthKey.coerce(month)
        amount = ensure_cents(amount_cents)
        with self.owner_lock(owner_id):
            self._require_owner(owner_id)
            self._require_category(owner_id, category_id)
            AssignmentStore(self.db, owner_id).set(
                category_id, month, amount, expected_version=expected_version
            )
            engine = self.load_engine(owner_id, month)

        logger.info(
            "Assigned %s cents to category %s in %s",
            amount,
            category_id,
            month,
            extra={"owner_id": owner_id},
        )
        return engine.category_budget(category_id, month)

    def move_money(
        self,
        owner_id: int,
        source_category_id: int,
        dest_category_id: int,
        month: MonthLike,
        amount_cents: int,
    ) -> MoveResult:
        """Move assigned money between two categories within one month.

        The mode follows the source's balance: a source with money gives it
        to the destination; an overspent source is covered by the destination.
        Both assignment writes happen in one database transaction.

        Raises:
            InvalidAmountError: If the amount is not a positive integer
            ValidationError: If source and destination are the same
            NotFoundError: If the owner or a category doesn't exist
            CrossOwnerOperationError: If a category belongs to another owner
        """
        month = MonthKey.coerce(month)
        amount = validate_move(source_category_id, dest_category_id, amount_cents)

        with self.owner_lock(owner_id):
            self._require_owner(owner_id)
            self._require_category(owner_id, source_category_id)
            self._require_category(owner_id, dest_category_id)

            with self.db.transaction():
                engine = self.load_engine(owner_id, month)
                plan = plan_move(engine.available(source_category_id, month), amount)
                MoneyMover(AssignmentStore(self.db, owner_id)).apply(
                    plan, source_category_id, dest_category_id, month
                )
            engine = self.load_engine(owner_id, month)

        return MoveResult(
            mode=plan.mode,
            amount=amount,
            source=engine.category_budget(source_category_id, month),
            dest=engine.category_budget(dest_category_id, month),
        )

    def set_target(self, category_id: int, target: TargetDefinition) -> None:
        """Create or replace the funding target of a category.

        Raises:
            NotFoundError: If the category doesn't exist
            InvalidAmountError: If the target amount is not a positive integer
            ValidationError: If the definition is otherwise invalid
        """
        category = self.db.get_category(category_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))
        definition = validate_target(target)
        with self.owner_lock(category.owner_id):
            self.db.upsert_target(category.owner_id, category_id, definition)
        logger.info(
            "Set %s target of %s cents on category %s",
            definition.type.value,
            definition.amount,
            category_id,
        )

    def clear_target(self, category_id: int) -> None:
        """Remove the funding target of a category. Clearing twice is a no-op.

        Raises:
            NotFoundError: If the category doesn't exist
        """
        category = self.db.get_category(category_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))
        with self.owner_lock(category.owner_id):
            removed = self.db.delete_target(category_id)
        if removed:
            logger.info("Cleared target on category %s", category_id)
