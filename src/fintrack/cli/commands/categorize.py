"""Manual and bulk categorization commands."""

import click
from fintrack.cli.engine_setup import build_categorization_engine
from fintrack.config import DEFAULT_RECATEGORIZE_WORKERS, acceptance_threshold
from fintrack.domain.category import CategoryService
from fintrack.domain.recategorization import RecategorizationService
from fintrack.domain.transaction import TransactionService


@click.command("categorize")
@click.argument("transaction_ids", nargs=-1, required=True, type=int)
@click.argument("category_name", nargs=1)
@click.pass_context
def categorize_transaction(ctx, transaction_ids: tuple[int, ...], category_name: str):
    """Assign a category to one or more transactions by hand.

    Examples:
        fintrack categorize 1 "Alimentação"
        fintrack categorize 1 2 3 4 5 "Transporte"
    """
    db = ctx.obj["db"]
    service = TransactionService(db)
    category_service = CategoryService(db)

    # Validate category exists before processing any transactions
    if category_service.get_category_by_name(category_name) is None:
        click.echo(f"Error: Category '{category_name}' not found", err=True)
        ctx.exit(1)

    # Remove duplicates while preserving order
    unique_ids = list(dict.fromkeys(transaction_ids))

    successes = []
    errors = []

    if len(unique_ids) > 1:
        click.echo(f"Categorizing {len(unique_ids)} transactions as '{category_name}'...")

    for txn_id in unique_ids:
        try:
            service.update_category(transaction_id=txn_id, category_name=category_name)
            successes.append(txn_id)
            if len(unique_ids) == 1:
                click.echo(f"Transaction {txn_id} categorized as '{category_name}'")
            else:
                click.echo(f"✓ Transaction {txn_id} categorized")
        except ValueError as e:
            errors.append((txn_id, str(e)))
            if len(unique_ids) > 1:
                click.echo(f"✗ Transaction {txn_id}: {e}")

    if len(unique_ids) > 1:
        click.echo(f"\nResults: {len(successes)} succeeded, {len(errors)} failed")
        if errors:
            ctx.exit(1)
    elif errors:
        click.echo(f"Error: {errors[0][1]}", err=True)
        ctx.exit(1)


@click.command("recategorize")
@click.option("--user", "user_id", required=True, type=int, help="Owner user ID")
@click.option(
    "--all",
    "include_categorized",
    is_flag=True,
    help="Also redo automatically categorized transactions (manual choices are kept)",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=DEFAULT_RECATEGORIZE_WORKERS,
    show_default=True,
    help="Maximum number of concurrent classifier calls",
)
@click.pass_context
def recategorize(ctx, user_id: int, include_categorized: bool, workers: int):
    """Run automatic categorization again over stored transactions.

    By default only uncategorized transactions are processed.
    """
    db = ctx.obj["db"]

    try:
        service = RecategorizationService(db, build_categorization_engine(db))
        report = service.recategorize(
            user_id,
            include_categorized=include_categorized,
            max_workers=workers,
            acceptance_threshold=acceptance_threshold(),
        )
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
        return

    if report.examined == 0:
        click.echo("No transactions to categorize.")
        return

    click.echo(f"Categorized {report.categorized} of {report.examined} transactions")
    if report.errors:
        click.echo(f"  Errors: {len(report.errors)}")
        for error in report.errors:
            click.echo(f"    {error}", err=True)


def register_commands(cli):
    """Register categorize and recategorize commands with main CLI."""
    cli.add_command(categorize_transaction)
    cli.add_command(recategorize)
