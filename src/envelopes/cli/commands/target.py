"""Funding target commands."""

import click

from envelopes.cli.error_handling import handle_domain_error
from envelopes.cli.resolution import resolve_category_or_exit
from envelopes.domain.budget import BudgetService
from envelopes.domain.category import CategoryService
from envelopes.domain.entities import RefillType, TargetDefinition, TargetType
from envelopes.domain.errors import DomainError
from envelopes.utils.amount_parser import parse_amount
from envelopes.utils.date_parser import parse_month


@click.group()
def target_group():
    """Manage category funding targets."""
    pass


@target_group.command("set")
@click.argument("category")
@click.option(
    "--type",
    "target_type",
    type=click.Choice([t.value for t in TargetType]),
    default=TargetType.MONTHLY.value,
    show_default=True,
    help="'monthly' needs the amount every month; 'by_date' saves it up by a month",
)
@click.option("--amount", required=True, help="Target amount (e.g., 500 or 1,200.00)")
@click.option("--day", "day_of_month", type=int, help="Day of month the money is due (1-31)")
@click.option("--by", "target_month", help="Month the balance is due (by_date targets)")
@click.option(
    "--refill-type",
    type=click.Choice([r.value for r in RefillType]),
    default=RefillType.REFILL.value,
    show_default=True,
    help="'refill' tops the balance up; 'set_aside' assigns the full amount every month",
)
@click.pass_context
def set_target(
    ctx,
    category: str,
    target_type: str,
    amount: str,
    day_of_month: int | None,
    target_month: str | None,
    refill_type: str,
):
    """Set or replace the funding target of CATEGORY.

    Examples:
        envelopes target set Groceries --amount 500
        envelopes target set Vacation --type by_date --amount 2400 --by 2025-06
    """
    db = ctx.obj["db"]
    cat = resolve_category_or_exit(ctx, CategoryService(db), ctx.obj["owner_id"], category)

    try:
        amount_cents = parse_amount(amount)
        due_month = parse_month(target_month) if target_month else None
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    definition = TargetDefinition(
        type=TargetType(target_type),
        amount=amount_cents,
        day_of_month=day_of_month,
        target_month=due_month,
        refill_type=RefillType(refill_type),
    )
    try:
        BudgetService(db).set_target(cat.id, definition)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Set {target_type} target on '{cat.name}'")


@target_group.command("clear")
@click.argument("category")
@click.pass_context
def clear_target(ctx, category: str):
    """Remove the funding target of CATEGORY."""
    db = ctx.obj["db"]
    cat = resolve_category_or_exit(ctx, CategoryService(db), ctx.obj["owner_id"], category)

    try:
        BudgetService(db).clear_target(cat.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Cleared target on '{cat.name}'")


def register_commands(cli):
    """Register target commands with main CLI."""
    cli.add_command(target_group, name="target")
