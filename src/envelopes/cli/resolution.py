"""CLI helpers that turn user-typed names into IDs or exit with an error."""

from __future__ import annotations

import click

from envelopes.domain.account import AccountService
from envelopes.domain.category import CategoryService
from envelopes.domain.entities import Account, Category


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, owner_id: int, account: str
) -> Account:
    """Resolve an account name or ID, or exit with a CLI error."""
    found = account_service.find_account(owner_id, account)
    if found is None:
        click.echo(f"Error: Account '{account}' not found", err=True)
        ctx.exit(1)
    return found


def resolve_category_or_exit(
    ctx: click.Context, category_service: CategoryService, owner_id: int, category: str
) -> Category:
    """Resolve a category name, ID or "Group > Category" path, or exit with a CLI error."""
    found = category_service.find_category(owner_id, category)
    if found is None:
        click.echo(f"Error: Category '{category}' not found", err=True)
        ctx.exit(1)
    return found
