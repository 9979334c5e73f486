"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, making it easy to change when
the database schema changes. Months are stored as "YYYY-MM" strings and
become MonthKey values on the way out.
"""

from typing import Iterable

from envelopes.domain import entities as domain
from envelopes.domain.month import MonthKey
from envelopes.database.models import (
    Owner as ORMOwner,
    Account as ORMAccount,
    Category as ORMCategory,
    CategoryGroup as ORMCategoryGroup,
    Transaction as ORMTransaction,
    MonthlyAssignment as ORMMonthlyAssignment,
    CategoryTarget as ORMCategoryTarget,
)


def owner_to_domain(orm_owner: ORMOwner) -> domain.Owner:
    """Convert SQLAlchemy Owner model to domain Owner entity."""
    return domain.Owner(
        id=orm_owner.id,
        name=orm_owner.name,
        created_at=orm_owner.created_at,
    )


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        owner_id=orm_account.owner_id,
        name=orm_account.name,
        on_budget=orm_account.on_budget,
        start_balance=int(orm_account.start_balance),
        opened_on=orm_account.opened_on,
        created_at=orm_account.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        owner_id=orm_category.owner_id,
        group_id=orm_category.group_id,
        name=orm_category.name,
        sort_order=orm_category.sort_order,
        is_hidden=orm_category.is_hidden,
        created_at=orm_category.created_at,
    )


def category_group_to_domain(
    orm_group: ORMCategoryGroup, categories: Iterable[ORMCategory] = ()
) -> domain.CategoryGroup:
    """Convert SQLAlchemy CategoryGroup model to domain CategoryGroup entity.

    Args:
        orm_group: Group row
        categories: Category rows to attach, already filtered and ordered
    """
    return domain.CategoryGroup(
        id=orm_group.id,
        owner_id=orm_group.owner_id,
        name=orm_group.name,
        sort_order=orm_group.sort_order,
        is_hidden=orm_group.is_hidden,
        created_at=orm_group.created_at,
        categories=tuple(category_to_domain(cat) for cat in categories),
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        owner_id=orm_transaction.owner_id,
        account_id=orm_transaction.account_id,
        date=orm_transaction.date,
        amount=int(orm_transaction.amount),
        category_id=orm_transaction.category_id,
        cleared=orm_transaction.cleared,
        payee=orm_transaction.payee,
        memo=orm_transaction.memo,
        created_at=orm_transaction.created_at,
    )


def assignment_to_domain(orm_assignment: ORMMonthlyAssignment) -> domain.Assignment:
    """Convert SQLAlchemy MonthlyAssignment model to domain Assignment entity."""
    return domain.Assignment(
        owner_id=orm_assignment.owner_id,
        category_id=orm_assignment.category_id,
        month=MonthKey.parse(orm_assignment.month),
        assigned=int(orm_assignment.assigned),
        version=orm_assignment.version,
    )


def target_to_domain(orm_target: ORMCategoryTarget) -> domain.CategoryTarget:
    """Convert SQLAlchemy CategoryTarget model to domain CategoryTarget entity."""
    definition = domain.TargetDefinition(
        type=domain.TargetType(orm_target.type),
        amount=int(orm_target.amount),
        day_of_month=orm_target.day_of_month,
        target_month=MonthKey.parse(orm_target.target_month) if orm_target.target_month else None,
        refill_type=domain.RefillType(orm_target.refill_type),
    )
    return domain.CategoryTarget(
        id=orm_target.id,
        owner_id=orm_target.owner_id,
        category_id=orm_target.category_id,
        definition=definition,
        created_at=orm_target.created_at,
    )
