"""Transaction management commands."""

import click

from envelopes.cli.error_handling import handle_domain_error
from envelopes.cli.resolution import resolve_account_or_exit, resolve_category_or_exit
from envelopes.domain.account import AccountService
from envelopes.domain.category import CategoryService
from envelopes.domain.errors import DomainError
from envelopes.domain.money import format_cents
from envelopes.domain.transaction import TransactionService
from envelopes.utils.amount_parser import parse_amount
from envelopes.utils.date_parser import parse_date


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("add")
@click.option("--account", required=True, help="Account name or ID")
@click.option(
    "--date",
    "txn_date",
    required=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option(
    "--amount", required=True, help="Transaction amount (e.g., 123.45 or -123.45)"
)
@click.option(
    "--category",
    help="Category name or 'Group > Category'. Leave out to record income for Ready to Assign",
)
@click.option("--payee", help="Payee")
@click.option("--memo", help="Memo")
@click.option("--cleared", is_flag=True, help="Mark the transaction as cleared")
@click.pass_context
def add_transaction(
    ctx,
    account: str,
    txn_date: str,
    amount: str,
    category: str | None,
    payee: str | None,
    memo: str | None,
    cleared: bool,
):
    """Add a transaction.

    Negative amounts are outflows, positive amounts inflows.

    Examples:
        envelopes transaction add --account Checking --date today --amount 3000
        envelopes transaction add --account Checking --date 2024-01-15 --amount -45.20 --category Groceries
    """
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]
    account_obj = resolve_account_or_exit(ctx, AccountService(db), owner_id, account)

    try:
        parsed_date = parse_date(txn_date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        amount_cents = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    category_id = None
    if category:
        category_id = resolve_category_or_exit(ctx, CategoryService(db), owner_id, category).id

    try:
        transaction_id = TransactionService(db).create_transaction(
            account_id=account_obj.id,
            date=parsed_date,
            amount=amount_cents,
            category_id=category_id,
            cleared=cleared,
            payee=payee,
            memo=memo,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created transaction {transaction_id}")


@transaction_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'yesterday')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--category", help="Category name or 'Group > Category'")
@click.option("--account", help="Account name or ID")
@click.option("--uncategorized", is_flag=True, help="Show only uncategorized transactions")
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    category: str | None,
    account: str | None,
    uncategorized: bool,
):
    """View transactions with optional filters."""
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]
    category_service = CategoryService(db)
    account_service = AccountService(db)

    try:
        start = parse_date(start_date) if start_date else None
        end = parse_date(end_date) if end_date else None
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)

    account_id = None
    if account:
        account_id = resolve_account_or_exit(ctx, account_service, owner_id, account).id

    category_id = None
    if category:
        category_id = resolve_category_or_exit(ctx, category_service, owner_id, category).id

    transactions = TransactionService(db).list_transactions(
        owner_id=owner_id,
        start_date=start,
        end_date=end,
        category_id=category_id,
        account_id=account_id,
        uncategorized=uncategorized,
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    accounts = {acc.id: acc.name for acc in account_service.list_accounts(owner_id)}
    categories = {
        cat.id: cat.name
        for group in category_service.list_groups(owner_id)
        for cat in group.categories
    }

    click.echo(
        f"{'ID':>5} {'Date':10s} {'Account':15s} {'Amount':>12s} {'Category':20s} Payee"
    )
    click.echo("-" * 80)
    for txn in transactions:
        category_name = categories.get(txn.category_id, "") if txn.category_id else "Uncategorized"
        cleared_mark = "*" if txn.cleared else " "
        click.echo(
            f"{txn.id:5d} {txn.date.isoformat():10s} {accounts.get(txn.account_id, 'Unknown')[:15]:15s} "
            f"{format_cents(txn.amount):>12s}{cleared_mark}{category_name[:20]:20s} {txn.payee or ''}"
        )


@transaction_group.command("categorize")
@click.argument("transaction_id", type=int)
@click.argument("category", required=False)
@click.pass_context
def categorize_transaction(ctx, transaction_id: int, category: str | None):
    """Set the category of a transaction.

    Leave CATEGORY out to mark the transaction uncategorized.
    """
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]

    category_id = None
    if category:
        category_id = resolve_category_or_exit(ctx, CategoryService(db), owner_id, category).id

    try:
        TransactionService(db).update_category(transaction_id, category_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    if category_id is None:
        click.echo(f"Transaction {transaction_id} is now uncategorized")
    else:
        click.echo(f"Categorized transaction {transaction_id} as '{category}'")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
