"""Transaction viewing commands."""

import click
from fintrack.domain.category import CategoryService
from fintrack.domain.transaction import TransactionService
from fintrack.utils.date_parser import parse_date


@click.group()
def transaction_group():
    """View transactions."""
    pass


@transaction_group.command("list")
@click.option("--user", "user_id", required=True, type=int, help="Owner user ID")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--category", help="Category name")
@click.option("--uncategorized", is_flag=True, help="Only transactions without a category")
@click.option("--verbose", "-v", is_flag=True, help="Show establishment, confidence and import details")
@click.pass_context
def list_transactions(
    ctx,
    user_id: int,
    start_date: str | None,
    end_date: str | None,
    category: str | None,
    uncategorized: bool,
    verbose: bool,
):
    """List transactions with optional filters."""
    db = ctx.obj["db"]
    service = TransactionService(db)
    category_service = CategoryService(db)

    start = None
    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    end = None
    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    transactions = service.list_transactions(
        user_id=user_id,
        start_date=start,
        end_date=end,
        category_name=category,
        uncategorized=uncategorized,
    )

    if not transactions:
        click.echo("No transactions found.")
        return

    categories = {c.id: c.name for c in category_service.list_categories()}

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    if verbose:
        click.echo("=" * 100)
        for txn in transactions:
            click.echo(f"\nTransaction ID: {txn.id}")
            click.echo(f"  Date: {txn.date}")
            click.echo(f"  Amount: R$ {txn.amount:,.2f}")
            click.echo(f"  Description: {txn.description}")
            click.echo(f"  Establishment: {txn.establishment or ''}")
            click.echo(f"  Category: {categories.get(txn.category_id, 'Uncategorized')}")
            if txn.category_id is not None:
                if txn.is_categorized_by_ai:
                    click.echo(f"  Categorized automatically (confidence {txn.ai_confidence:.2f})")
                else:
                    click.echo("  Categorized manually")
            if txn.credit_card_id is not None:
                click.echo(f"  Credit card: {txn.credit_card_id}")
            if txn.metadata is not None:
                click.echo(f"  Imported: {txn.metadata.imported_at} ({txn.metadata.institution})")
            click.echo("-" * 100)
        return

    click.echo("-" * 100)
    click.echo(f"{'ID':<6} {'Date':<12} {'Amount':<14} {'Category':<20} {'Description':<40}")
    click.echo("-" * 100)
    for txn in transactions:
        amount_str = f"R$ {txn.amount:,.2f}"
        category_name = categories.get(txn.category_id, "")
        description = txn.description[:40]
        click.echo(
            f"{txn.id:<6} {str(txn.date):<12} {amount_str:<14} {category_name:<20} {description:<40}"
        )


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
