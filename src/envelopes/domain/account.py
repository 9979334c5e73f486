"""Account domain service."""

import logging
from datetime import date
from typing import Optional

from envelopes.database.base import Database
from envelopes.domain.entities import Account as AccountEntity
from envelopes.domain.errors import ConflictError, NotFoundError, owner_not_found
from envelopes.domain.money import ensure_cents

logger = logging.getLogger(__name__)


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        owner_id: int,
        name: str,
        on_budget: bool = True,
        start_balance: int = 0,
        opened_on: Optional[date] = None,
    ) -> int:
        """Create a new account.

        Args:
            owner_id: Budget owner
            name: Account name, unique per owner
            on_budget: Whether the account's transactions feed the budget
            start_balance: Balance in cents on the opening date
            opened_on: Opening date; defaults to today

        Returns:
            Account ID

        Raises:
            NotFoundError: If the owner doesn't exist
            ConflictError: If the owner already has an account with this name
            InvalidAmountError: If start_balance is not an integer number of cents
        """
        start_balance = ensure_cents(start_balance, "start balance")
        if self.db.get_owner(owner_id) is None:
            raise NotFoundError(owner_not_found(owner_id))

        for acc in self.db.list_accounts(owner_id):
            if acc.name == name:
                raise ConflictError(f"Account with name '{name}' already exists")

        account_id = self.db.create_account(
            owner_id=owner_id,
            name=name,
            on_budget=on_budget,
            start_balance=start_balance,
            opened_on=opened_on,
        )
        logger.info("Created account %s (ID: %s, on budget: %s)", name, account_id, on_budget)
        return account_id

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def list_accounts(self, owner_id: int) -> list[AccountEntity]:
        """List all accounts of an owner."""
        return self.db.list_accounts(owner_id)

    def account_balances(self, owner_id: int) -> list[tuple[AccountEntity, int]]:
        """List an owner's accounts with their balance: start balance plus all transactions."""
        totals = self.db.get_account_transaction_totals(owner_id)
        return [
            (acc, acc.start_balance + totals.get(acc.id, 0))
            for acc in self.db.list_accounts(owner_id)
        ]

    def find_account(self, owner_id: int, name_or_id: str) -> Optional[AccountEntity]:
        """Find an owner's account by ID or exact name."""
        accounts = self.db.list_accounts(owner_id)
        if name_or_id.isdigit():
            for acc in accounts:
                if acc.id == int(name_or_id):
                    return acc
        for acc in accounts:
            if acc.name == name_or_id:
                return acc
        return None
