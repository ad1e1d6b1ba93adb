"""Main CLI entry point."""

import click
from fintrack.database.factories import create_sqlite_database
from fintrack.logging_setup import configure_logging

# Import and register all commands at module level
from fintrack.cli.commands import (
    card,
    mapping,
    import_cmd,
    categorize,
    init_categories,
    category,
    transaction,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FINTRACK_DB_PATH environment variable)",
    envvar="FINTRACK_DB_PATH",
)
@click.option(
    "--log-level",
    help="Log level (DEBUG, INFO, WARNING, ...). Defaults to FINTRACK_LOG_LEVEL or WARNING.",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None):
    """Fintrack - Statement import and categorization.

    Import bank and credit card CSV exports using per-institution mappings,
    skip transactions that were already imported and categorize the rest.
    """
    ctx.ensure_object(dict)

    try:
        configure_logging(level=log_level)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--log-level")

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
card.register_commands(cli)
mapping.register_commands(cli)
import_cmd.register_commands(cli)
categorize.register_commands(cli)
init_categories.register_commands(cli)
category.register_commands(cli)
transaction.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
