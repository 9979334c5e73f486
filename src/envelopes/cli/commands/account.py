"""Account management commands."""

import click

from envelopes.cli.error_handling import handle_domain_error
from envelopes.domain.account import AccountService
from envelopes.domain.errors import DomainError
from envelopes.domain.money import format_cents
from envelopes.utils.amount_parser import parse_amount
from envelopes.utils.date_parser import parse_date


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--off-budget",
    is_flag=True,
    help="Track the account without letting its transactions affect the budget",
)
@click.option(
    "--start-balance",
    default="0",
    help="Balance on the opening date (e.g., 1500.00); on-budget balances become Ready to Assign",
)
@click.option("--opened", help="Opening date (YYYY-MM-DD or 'today'); defaults to today")
@click.pass_context
def create_account(ctx, name: str, off_budget: bool, start_balance: str, opened: str | None):
    """Create a new account.

    Examples:
        envelopes account create "Checking"
        envelopes account create "Savings" --start-balance 1500 --opened 2024-01-01
        envelopes account create "Mortgage" --off-budget
    """
    service = AccountService(ctx.obj["db"])

    try:
        balance_cents = parse_amount(start_balance)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    opened_on = None
    if opened:
        try:
            opened_on = parse_date(opened)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    try:
        account_id = service.create_account(
            owner_id=ctx.obj["owner_id"],
            name=name,
            on_budget=not off_budget,
            start_balance=balance_cents,
            opened_on=opened_on,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{name}' (ID: {account_id})")
    if balance_cents:
        click.echo(f"Start balance: {format_cents(balance_cents)}")
    if off_budget:
        click.echo("Account is off budget")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts with their current balance."""
    service = AccountService(ctx.obj["db"])

    balances = service.account_balances(ctx.obj["owner_id"])
    if not balances:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 64)
    for acc, balance in balances:
        budget_flag = "on budget" if acc.on_budget else "off budget"
        click.echo(f"ID: {acc.id:3d} | {acc.name:20s} | {format_cents(balance):>12s} | {budget_flag}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
