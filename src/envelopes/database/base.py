"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import date
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from envelopes.domain.entities import (
    Owner,
    Account,
    Assignment,
    Category,
    CategoryGroup,
    CategoryTarget,
    TargetDefinition,
    Transaction,
)
from envelopes.domain.month import MonthKey


class Database(ABC):
    """Abstract database interface for envelopes."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Group writes into one unit: all commit on success, none on error.

        Nested use joins the outermost transaction.
        """
        pass

    # Owner operations
    @abstractmethod
    def create_owner(self, name: str) -> int:
        """Create a budget owner. Returns owner ID."""
        pass

    @abstractmethod
    def get_owner(self, owner_id: int) -> Optional[Owner]:
        """Get owner by ID."""
        pass

    @abstractmethod
    def get_owner_by_name(self, name: str) -> Optional[Owner]:
        """Get owner by name."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        owner_id: int,
        name: str,
        on_budget: bool = True,
        start_balance: int = 0,
        opened_on: Optional[date] = None,
    ) -> int:
        """Create a new account. Returns account ID.

        Args:
            owner_id: Budget owner
            name: Account name
            on_budget: Whether the account feeds the budget
            start_balance: Balance in cents when the account was opened
            opened_on: Opening date (defaults to today)
        """
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self, owner_id: int) -> list[Account]:
        """List all accounts of an owner."""
        pass

    @abstractmethod
    def get_account_transaction_totals(self, owner_id: int) -> dict[int, int]:
        """Sum of transaction amounts per account ID (accounts without any are omitted)."""
        pass

    # Category group operations
    @abstractmethod
    def create_category_group(self, owner_id: int, name: str, sort_order: Optional[int] = None) -> int:
        """Create a category group. Returns group ID.

        Without a sort order the group is placed after the existing ones.
        """
        pass

    @abstractmethod
    def get_category_group(self, group_id: int) -> Optional[CategoryGroup]:
        """Get category group by ID, with its categories."""
        pass

    @abstractmethod
    def update_category_group(
        self,
        group_id: int,
        name: Optional[str] = None,
        sort_order: Optional[int] = None,
        is_hidden: Optional[bool] = None,
    ) -> None:
        """Update category group fields."""
        pass

    @abstractmethod
    def delete_category_group(self, group_id: int) -> None:
        """Delete an empty category group."""
        pass

    @abstractmethod
    def list_category_groups(self, owner_id: int, include_hidden: bool = True) -> list[CategoryGroup]:
        """List an owner's groups with their categories, in sort order."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self, owner_id: int, group_id: int, name: str, sort_order: Optional[int] = None
    ) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def update_category(
        self,
        category_id: int,
        name: Optional[str] = None,
        sort_order: Optional[int] = None,
        is_hidden: Optional[bool] = None,
        group_id: Optional[int] = None,
    ) -> None:
        """Update category fields."""
        pass

    @abstractmethod
    def delete_category(self, category_id: int) -> None:
        """Delete a category, its target and its zero-valued assignments."""
        pass

    @abstractmethod
    def get_category_transaction_count(self, category_id: int) -> int:
        """Count transactions assigned to a category."""
        pass

    @abstractmethod
    def get_category_assignment_count(self, category_id: int) -> int:
        """Count non-zero assignments of a category."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        owner_id: int,
        account_id: int,
        date: date,
        amount: int,
        category_id: Optional[int] = None,
        cleared: bool = False,
        payee: Optional[str] = None,
        memo: Optional[str] = None,
    ) -> int:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def update_transaction_category(self, transaction_id: int, category_id: Optional[int]) -> None:
        """Update transaction category (None marks it uncategorized)."""
        pass

    @abstractmethod
    def update_transaction_cleared(self, transaction_id: int, cleared: bool) -> None:
        """Update transaction cleared flag."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        owner_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
        account_id: Optional[int] = None,
        uncategorized: bool = False,
        on_budget_only: bool = False,
    ) -> list[Transaction]:
        """List an owner's transactions, oldest first, with optional filters.

        Args:
            owner_id: Budget owner
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)
            category_id: Optional category ID filter
            account_id: Optional account ID filter
            uncategorized: If True, only return transactions without a category
            on_budget_only: If True, skip transactions on off-budget accounts
        """
        pass

    # Assignment operations
    @abstractmethod
    def get_assignment(self, owner_id: int, category_id: int, month: MonthKey) -> Optional[Assignment]:
        """Get the stored assignment for a category and month."""
        pass

    @abstractmethod
    def set_assignment(
        self,
        owner_id: int,
        category_id: int,
        month: MonthKey,
        assigned: int,
        expected_version: Optional[int] = None,
    ) -> Assignment:
        """Replace the assigned amount for a category and month.

        When expected_version is given the write is a compare-and-set against
        the stored version (0 meaning "no row yet").

        Raises:
            ConcurrentModificationError: If the stored version differs
        """
        pass

    @abstractmethod
    def list_assignments(self, owner_id: int, through: Optional[MonthKey] = None) -> list[Assignment]:
        """List stored assignments up to and including a month."""
        pass

    # Target operations
    @abstractmethod
    def get_target(self, category_id: int) -> Optional[CategoryTarget]:
        """Get the target of a category."""
        pass

    @abstractmethod
    def upsert_target(self, owner_id: int, category_id: int, definition: TargetDefinition) -> int:
        """Create or replace the target of a category. Returns target ID."""
        pass

    @abstractmethod
    def delete_target(self, category_id: int) -> bool:
        """Delete the target of a category. Returns False if there was none."""
        pass

    @abstractmethod
    def list_targets(self, owner_id: int) -> list[CategoryTarget]:
        """List all targets of an owner."""
        pass
