"""CSV import command."""

import click
from fintrack.cli.engine_setup import build_categorization_engine
from fintrack.cli.error_handling import handle_domain_error
from fintrack.config import acceptance_threshold
from fintrack.domain.ingestion import IngestionService


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--user", "user_id", required=True, type=int, help="Owner user ID")
@click.option("--card", "card_id", type=int, help="Credit card ID the statement belongs to")
@click.option(
    "--threshold",
    type=click.FloatRange(0.0, 1.0),
    help="Minimum confidence for storing a category (defaults to FINTRACK_ACCEPTANCE_THRESHOLD or 0.3)",
)
@click.option("--delete-after", is_flag=True, help="Delete the CSV file once the import is over")
@click.pass_context
def import_csv(
    ctx, csv_file: str, user_id: int, card_id: int | None, threshold: float | None, delete_after: bool
):
    """Import transactions from a CSV file.

    The mapping is chosen from the card, then the card's institution, then
    the default institution.

    Examples:
        fintrack import extrato.csv --user 1 --card 2
        fintrack import nubank.csv --user 1 --delete-after
    """
    db = ctx.obj["db"]

    try:
        service = IngestionService(db, engine=build_categorization_engine(db))
        report = service.ingest(
            csv_file,
            user_id,
            card_id,
            acceptance_threshold=threshold if threshold is not None else acceptance_threshold(),
            delete_after=delete_after,
        )
    except (ValueError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"\nImport complete (mapping: {report.mapping_used}):")
    click.echo(f"  Imported: {report.processed} transactions")
    click.echo(f"  Skipped: {report.duplicates} duplicates")
    click.echo(f"  Categorized: {report.categorized}")
    if report.errors:
        click.echo(f"  Errors: {len(report.errors)}")
        for error in report.errors:
            click.echo(f"    {error}", err=True)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_csv)
