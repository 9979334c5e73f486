"""Main CLI entry point."""

import click

from envelopes.config import Settings
from envelopes.database.factories import create_sqlite_database
from envelopes.domain.owner import OwnerService
from envelopes.logging_config import setup_logging

# Import and register all commands at module level
from envelopes.cli.commands import (
    account,
    budget,
    category,
    target,
    transaction,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides ENVELOPES_DB_PATH environment variable)",
)
@click.option(
    "--owner",
    help="Budget owner name (overrides ENVELOPES_OWNER; created on first use)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level (overrides ENVELOPES_LOG_LEVEL, default WARNING)",
)
@click.option("--log-json", is_flag=True, help="Write logs as JSON lines (or set ENVELOPES_LOG_JSON)")
@click.pass_context
def cli(ctx, db_path: str | None, owner: str | None, log_level: str | None, log_json: bool):
    """Envelopes - envelope budgeting.

    Give every dollar a job: assign incoming money to categories month by
    month and watch each envelope's balance roll forward.
    """
    ctx.ensure_object(dict)
    settings = Settings.from_env()

    setup_logging(
        level=log_level or settings.log_level,
        json_format=log_json or settings.log_json,
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path or settings.db_path)
        db.connect()
        db.initialize_schema()
        ctx.call_on_close(db.disconnect)

        budget_owner = OwnerService(db).get_or_create_owner(owner or settings.owner)
        ctx.obj["db"] = db
        ctx.obj["owner_id"] = budget_owner.id


# Register all commands
account.register_commands(cli)
category.register_commands(cli)
transaction.register_commands(cli)
budget.register_commands(cli)
target.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
