"""Transaction domain service.

This is the thin CRUD layer that feeds the budget engine; the engine itself
only ever reads transactions.
"""

import logging
from datetime import date
from typing import Optional

from envelopes.database.base import Database
from envelopes.domain.entities import Transaction as TransactionEntity
from envelopes.domain.errors import (
    CrossOwnerOperationError,
    NotFoundError,
    account_not_found,
    category_not_found,
    category_owner_mismatch,
    transaction_not_found,
)
from envelopes.domain.money import ensure_cents

logger = logging.getLogger(__name__)


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def _check_category(self, owner_id: int, category_id: Optional[int]) -> None:
        if category_id is None:
            return
        category = self.db.get_category(category_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))
        if category.owner_id != owner_id:
            raise CrossOwnerOperationError(category_owner_mismatch(category_id, owner_id))

    def create_transaction(
        self,
        account_id: int,
        date: date,
        amount: int,
        category_id: Optional[int] = None,
        cleared: bool = False,
        payee: Optional[str] = None,
        memo: Optional[str] = None,
    ) -> int:
        """Create a transaction.

        Args:
            account_id: Account ID; the owner is taken from the account
            date: Transaction date
            amount: Signed amount in cents (negative = outflow)
            category_id: Optional category ID; None records unassigned income
            cleared: Whether the transaction has cleared the bank
            payee: Optional payee
            memo: Optional memo

        Returns:
            Transaction ID

        Raises:
            NotFoundError: If account or category doesn't exist
            CrossOwnerOperationError: If the category belongs to another owner
            InvalidAmountError: If amount is not an integer number of cents
        """
        amount = ensure_cents(amount)
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        self._check_category(account.owner_id, category_id)

        transaction_id = self.db.create_transaction(
            owner_id=account.owner_id,
            account_id=account_id,
            date=date,
            amount=amount,
            category_id=category_id,
            cleared=cleared,
            payee=payee,
            memo=memo,
        )
        logger.info(
            "Created transaction %s",
            transaction_id,
            extra={"account_id": account_id, "amount": amount, "category_id": category_id},
        )
        return transaction_id

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def _require(self, transaction_id: int) -> TransactionEntity:
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def update_category(self, transaction_id: int, category_id: Optional[int]) -> None:
        """Recategorize a transaction; None marks it uncategorized.

        Raises:
            NotFoundError: If transaction or category doesn't exist
            CrossOwnerOperationError: If the category belongs to another owner
        """
        txn = self._require(transaction_id)
        self._check_category(txn.owner_id, category_id)
        self.db.update_transaction_category(transaction_id, category_id)

    def set_cleared(self, transaction_id: int, cleared: bool) -> None:
        """Mark a transaction cleared or uncleared. Budget figures do not change."""
        self._require(transaction_id)
        self.db.update_transaction_cleared(transaction_id, cleared)

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction."""
        self._require(transaction_id)
        self.db.delete_transaction(transaction_id)
        logger.info("Deleted transaction %s", transaction_id)

    def list_transactions(
        self,
        owner_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
        account_id: Optional[int] = None,
        uncategorized: bool = False,
    ) -> list[TransactionEntity]:
        """List an owner's transactions, oldest first."""
        return self.db.list_transactions(
            owner_id=owner_id,
            start_date=start_date,
            end_date=end_date,
            category_id=category_id,
            account_id=account_id,
            uncategorized=uncategorized,
        )
