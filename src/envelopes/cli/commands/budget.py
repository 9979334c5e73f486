"""Budget commands: view a month, assign money, move money."""

import json

import click

from envelopes.cli.error_handling import handle_domain_error
from envelopes.cli.resolution import resolve_category_or_exit
from envelopes.domain.budget import BudgetService
from envelopes.domain.category import CategoryService
from envelopes.domain.entities import CategoryBudgetData, MoveMode
from envelopes.domain.errors import DomainError
from envelopes.domain.money import format_cents
from envelopes.domain.month import MonthKey
from envelopes.utils.amount_parser import parse_amount
from envelopes.utils.date_parser import parse_month

MONTH_HELP = "Budget month (YYYY-MM, 'this month', 'last month', 'next month')"


def _parse_month_or_exit(ctx: click.Context, month: str) -> MonthKey:
    try:
        return parse_month(month)
    except ValueError as e:
        click.echo(f"Error: Invalid month: {e}", err=True)
        ctx.exit(1)


def _parse_amount_or_exit(ctx: click.Context, amount: str) -> int:
    try:
        return parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)


def _target_column(data: CategoryBudgetData) -> str:
    if data.target is None:
        return ""
    if data.target.is_funded:
        return "funded"
    return f"needs {format_cents(data.target.needed)}"


@click.group()
def budget_group():
    """View and edit the monthly budget."""
    pass


@budget_group.command("show")
@click.argument("month", default="this month")
@click.option("--all", "show_all", is_flag=True, help="Include hidden groups and categories")
@click.option("--json", "as_json", is_flag=True, help="Print the budget as JSON (amounts in cents)")
@click.pass_context
def show_budget(ctx, month: str, show_all: bool, as_json: bool):
    """Show Ready to Assign and every category's balance for a month.

    Examples:
        envelopes budget show
        envelopes budget show 2024-03 --json
    """
    month_key = _parse_month_or_exit(ctx, month)
    service = BudgetService(ctx.obj["db"])

    try:
        budget = service.get_budget(ctx.obj["owner_id"], month_key, include_hidden=show_all)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if as_json:
        click.echo(json.dumps(budget.to_dict(), indent=2))
        return

    click.echo(f"\nBudget for {budget.month}")
    click.echo(f"Ready to Assign: {format_cents(budget.ready_to_assign)}")
    if budget.is_overassigned:
        click.echo("Warning: more money is assigned than has come in.")
    click.echo("=" * 86)
    click.echo(
        f"{'Category':28s} {'Assigned':>12s} {'Activity':>12s} {'Available':>12s}  {'Status':12s} Target"
    )

    for group_budget in budget.category_groups:
        names = {cat.id: cat.name for cat in group_budget.group.categories}
        click.echo("-" * 86)
        click.echo(group_budget.group.name)
        for data in group_budget.budgets:
            click.echo(
                f"  {names.get(data.category_id, str(data.category_id))[:26]:26s} "
                f"{format_cents(data.assigned):>12s} "
                f"{format_cents(data.activity):>12s} "
                f"{format_cents(data.available):>12s}  "
                f"{data.status.value:12s} {_target_column(data)}"
            )


@budget_group.command("assign")
@click.argument("category")
@click.argument("amount")
@click.option("--month", default="this month", help=MONTH_HELP)
@click.option(
    "--expected-version",
    type=int,
    help="Fail if the assignment was changed since this version was read",
)
@click.pass_context
def assign(ctx, category: str, amount: str, month: str, expected_version: int | None):
    """Set the amount assigned to CATEGORY for a month.

    The amount replaces what was assigned before; it is not added to it.

    Examples:
        envelopes budget assign Groceries 500
        envelopes budget assign "Bills > Rent" 1200 --month 2024-03
    """
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]
    month_key = _parse_month_or_exit(ctx, month)
    amount_cents = _parse_amount_or_exit(ctx, amount)
    cat = resolve_category_or_exit(ctx, CategoryService(db), owner_id, category)

    try:
        data = BudgetService(db).set_assigned(
            owner_id, cat.id, month_key, amount_cents, expected_version=expected_version
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Assigned {format_cents(data.assigned)} to '{cat.name}' for {month_key} "
        f"(available: {format_cents(data.available)})"
    )


@budget_group.command("move")
@click.argument("source")
@click.argument("dest")
@click.argument("amount")
@click.option("--month", default="this month", help=MONTH_HELP)
@click.pass_context
def move(ctx, source: str, dest: str, amount: str, month: str):
    """Move money between two categories.

    If SOURCE has money available it is moved to DEST. If SOURCE is
    overspent, DEST gives up money to cover it.

    Examples:
        envelopes budget move Dining Groceries 50
    """
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]
    month_key = _parse_month_or_exit(ctx, month)
    amount_cents = _parse_amount_or_exit(ctx, amount)
    category_service = CategoryService(db)
    source_cat = resolve_category_or_exit(ctx, category_service, owner_id, source)
    dest_cat = resolve_category_or_exit(ctx, category_service, owner_id, dest)

    try:
        result = BudgetService(db).move_money(
            owner_id, source_cat.id, dest_cat.id, month_key, amount_cents
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if result.mode is MoveMode.COVER_OVERSPEND:
        click.echo(
            f"Covered {format_cents(result.amount)} of overspending in '{source_cat.name}' "
            f"from '{dest_cat.name}'"
        )
    else:
        click.echo(
            f"Moved {format_cents(result.amount)} from '{source_cat.name}' to '{dest_cat.name}'"
        )
    click.echo(
        f"  {source_cat.name}: {format_cents(result.source.available)} available"
    )
    click.echo(f"  {dest_cat.name}: {format_cents(result.dest.available)} available")


@budget_group.command("history")
@click.argument("category")
@click.option("--from", "start", required=True, help=MONTH_HELP)
@click.option("--to", "end", default="this month", help=MONTH_HELP)
@click.pass_context
def history(ctx, category: str, start: str, end: str):
    """Show how a category's balance rolled forward month by month."""
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]
    start_key = _parse_month_or_exit(ctx, start)
    end_key = _parse_month_or_exit(ctx, end)
    cat = resolve_category_or_exit(ctx, CategoryService(db), owner_id, category)

    try:
        rows = BudgetService(db).category_history(owner_id, cat.id, start_key, end_key)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\n{cat.name}")
    click.echo(f"{'Month':8s} {'Carried':>12s} {'Assigned':>12s} {'Activity':>12s} {'Available':>12s}")
    for row in rows:
        click.echo(
            f"{str(row.month):8s} {format_cents(row.carry_in):>12s} {format_cents(row.assigned):>12s} "
            f"{format_cents(row.activity):>12s} {format_cents(row.available):>12s}"
        )


def register_commands(cli):
    """Register budget commands with main CLI."""
    cli.add_command(budget_group, name="budget")
