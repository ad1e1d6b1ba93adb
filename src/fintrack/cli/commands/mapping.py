"""CSV mapping management commands."""

import csv

import click
from fintrack.cli.error_handling import handle_domain_error
from fintrack.domain.csv_mapping import CSVMappingService
from fintrack.domain.entities import AmountFormat, CSVMapping, ParseError
from fintrack.domain.errors import DomainError


def parse_columns(value: str) -> dict[str, int]:
    """Parse "date=0,description=1,amount=2" into a role → index map."""
    columns: dict[str, int] = {}
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        role, sep, index = part.partition("=")
        if not sep:
            raise click.BadParameter(f"Expected ROLE=INDEX, got '{part}'", param_hint="--columns")
        try:
            columns[role.strip()] = int(index)
        except ValueError:
            raise click.BadParameter(
                f"Column index for '{role.strip()}' must be an integer", param_hint="--columns"
            )
    return columns


def print_mapping(mapping: CSVMapping) -> None:
    """Print all settings of a mapping."""
    fmt = mapping.amount_format
    columns = ", ".join(f"{role}={index}" for role, index in sorted(mapping.column_map.items(), key=lambda x: x[1]))
    click.echo(f"\nMapping '{mapping.name}' (ID: {mapping.id})")
    click.echo("-" * 60)
    click.echo(f"Institution: {mapping.institution}")
    click.echo(f"Credit card: {mapping.credit_card_id if mapping.credit_card_id is not None else '(any)'}")
    click.echo(f"Columns: {columns}")
    click.echo(f"Date formats: {', '.join(mapping.date_formats)}")
    click.echo(f"Currency symbol: {fmt.currency_symbol or '(default)'}")
    click.echo(f"Decimal separator: {fmt.decimal_separator or '(auto)'}")
    click.echo(f"Thousands separator: {fmt.thousands_separator or '(auto)'}")
    click.echo(f"Negative values are income: {'yes' if fmt.negative_values_are_income else 'no'}")
    click.echo(f"Delimiter: '{mapping.delimiter}'")
    click.echo(f"Header row: {'yes' if mapping.has_header else 'no'}")
    click.echo(f"Active: {'yes' if mapping.is_active else 'no'}")


@click.group()
def mapping_group():
    """Manage CSV mappings."""
    pass


@mapping_group.command("create")
@click.argument("name")
@click.option("--institution", required=True, help="Institution the export comes from")
@click.option("--card", "card_id", type=int, help="Bind the mapping to a credit card")
@click.option("--columns", required=True, help="Column roles, e.g. 'date=0,description=1,amount=2'")
@click.option("--date-format", "date_formats", multiple=True, required=True, help="Date pattern (repeatable), e.g. 'd/m/Y'")
@click.option("--currency", help="Currency symbol to strip (e.g., 'R$')")
@click.option("--decimal", "decimal_separator", help="Decimal separator")
@click.option("--thousands", "thousands_separator", help="Thousands separator")
@click.option("--negative-income", is_flag=True, help="Keep the sign of negative amounts (income)")
@click.option("--delimiter", default=",", show_default=True, help="Field delimiter")
@click.option("--no-header", is_flag=True, help="The file has no header row")
@click.pass_context
def create_mapping(
    ctx,
    name: str,
    institution: str,
    card_id: int | None,
    columns: str,
    date_formats: tuple[str, ...],
    currency: str | None,
    decimal_separator: str | None,
    thousands_separator: str | None,
    negative_income: bool,
    delimiter: str,
    no_header: bool,
):
    """Create a new CSV mapping.

    Examples:
        fintrack mapping create "Inter Simples" --institution Inter \\
            --columns date=0,description=1,amount=2 --date-format d/m/Y \\
            --currency 'R$' --decimal , --thousands .
    """
    db = ctx.obj["db"]
    service = CSVMappingService(db)

    try:
        mapping_id = service.create_mapping(
            name=name,
            institution=institution,
            column_map=parse_columns(columns),
            date_formats=list(date_formats),
            amount_format=AmountFormat(
                currency_symbol=currency,
                decimal_separator=decimal_separator,
                thousands_separator=thousands_separator,
                negative_values_are_income=negative_income,
            ),
            delimiter=delimiter,
            has_header=not no_header,
            credit_card_id=card_id,
        )
        click.echo(f"Created CSV mapping '{name}' (ID: {mapping_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@mapping_group.command("list")
@click.option("--institution", help="Only mappings of this institution")
@click.option("--card", "card_id", type=int, help="Only mappings bound to this card")
@click.option("--all", "include_inactive", is_flag=True, help="Include deactivated mappings")
@click.pass_context
def list_mappings(ctx, institution: str | None, card_id: int | None, include_inactive: bool):
    """List CSV mappings."""
    db = ctx.obj["db"]
    service = CSVMappingService(db)

    mappings = service.list_mappings(
        institution=institution, credit_card_id=card_id, include_inactive=include_inactive
    )
    if not mappings:
        click.echo("No CSV mappings found. Run 'mapping init-defaults' to create the built-in ones.")
        return

    click.echo("\nCSV mappings:")
    click.echo("-" * 70)
    for m in mappings:
        card = f"card {m.credit_card_id}" if m.credit_card_id is not None else "any card"
        status = "" if m.is_active else " (inactive)"
        click.echo(f"ID: {m.id:3d} | {m.name:20s} | {m.institution:10s} | {card}{status}")


@mapping_group.command("show")
@click.argument("mapping_id", type=int)
@click.pass_context
def show_mapping(ctx, mapping_id: int):
    """Show the settings of a CSV mapping."""
    db = ctx.obj["db"]
    service = CSVMappingService(db)

    mapping = service.get_mapping(mapping_id)
    if mapping is None:
        click.echo(f"Error: CSV mapping {mapping_id} not found", err=True)
        ctx.exit(1)

    print_mapping(mapping)


@mapping_group.command("update")
@click.argument("mapping_id", type=int)
@click.option("--name", help="New mapping name")
@click.option("--columns", help="Column roles, e.g. 'date=0,description=1,amount=2'")
@click.option("--date-format", "date_formats", multiple=True, help="Date pattern (repeatable), replaces the current list")
@click.option("--currency", help="Currency symbol to strip")
@click.option("--decimal", "decimal_separator", help="Decimal separator")
@click.option("--thousands", "thousands_separator", help="Thousands separator")
@click.option("--negative-income/--no-negative-income", default=None, help="Keep the sign of negative amounts")
@click.option("--delimiter", help="Field delimiter")
@click.option("--header/--no-header", default=None, help="Whether the file has a header row")
@click.pass_context
def update_mapping(
    ctx,
    mapping_id: int,
    name: str | None,
    columns: str | None,
    date_formats: tuple[str, ...],
    currency: str | None,
    decimal_separator: str | None,
    thousands_separator: str | None,
    negative_income: bool | None,
    delimiter: str | None,
    header: bool | None,
):
    """Update a CSV mapping.

    Updates only the options that are provided.
    """
    db = ctx.obj["db"]
    service = CSVMappingService(db)

    mapping = service.get_mapping(mapping_id)
    if mapping is None:
        click.echo(f"Error: CSV mapping {mapping_id} not found", err=True)
        ctx.exit(1)

    amount_format = None
    if any(v is not None for v in (currency, decimal_separator, thousands_separator, negative_income)):
        current = mapping.amount_format
        amount_format = AmountFormat(
            currency_symbol=currency if currency is not None else current.currency_symbol,
            decimal_separator=decimal_separator if decimal_separator is not None else current.decimal_separator,
            thousands_separator=thousands_separator if thousands_separator is not None else current.thousands_separator,
            negative_values_are_income=(
                negative_income if negative_income is not None else current.negative_values_are_income
            ),
        )

    try:
        service.update_mapping(
            mapping_id,
            name=name,
            column_map=parse_columns(columns) if columns is not None else None,
            date_formats=list(date_formats) if date_formats else None,
            amount_format=amount_format,
            delimiter=delimiter,
            has_header=header,
        )
        click.echo(f"Updated CSV mapping {mapping_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@mapping_group.command("deactivate")
@click.argument("mapping_id", type=int)
@click.pass_context
def deactivate_mapping(ctx, mapping_id: int):
    """Deactivate a CSV mapping."""
    db = ctx.obj["db"]
    service = CSVMappingService(db)

    try:
        service.set_active(mapping_id, False)
        click.echo(f"Deactivated CSV mapping {mapping_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@mapping_group.command("test")
@click.argument("mapping_id", type=int)
@click.argument("sample_row")
@click.pass_context
def test_mapping(ctx, mapping_id: int, sample_row: str):
    """Show how a sample CSV line would be imported.

    SAMPLE_ROW is one line of the CSV file, split with the mapping's delimiter.

    Examples:
        fintrack mapping test 1 "2025-01-10,Uber Trip,25.50"
    """
    db = ctx.obj["db"]
    service = CSVMappingService(db)

    mapping = service.get_mapping(mapping_id)
    if mapping is None:
        click.echo(f"Error: CSV mapping {mapping_id} not found", err=True)
        ctx.exit(1)

    row = next(csv.reader([sample_row], delimiter=mapping.delimiter), [])
    result = service.preview_row(mapping_id, row)
    if isinstance(result, ParseError):
        click.echo(f"Error: {result}", err=True)
        ctx.exit(1)

    click.echo(f"Date: {result.date.isoformat()}")
    click.echo(f"Description: {result.description}")
    click.echo(f"Establishment: {result.establishment}")
    click.echo(f"Amount: {result.amount}")
    if result.metadata.category_from_csv:
        click.echo(f"Category (from CSV): {result.metadata.category_from_csv}")
    if result.metadata.type_from_csv:
        click.echo(f"Type (from CSV): {result.metadata.type_from_csv}")


@mapping_group.command("init-defaults")
@click.pass_context
def init_default_mappings(ctx):
    """Create the built-in mappings (Nubank, Inter)."""
    db = ctx.obj["db"]
    service = CSVMappingService(db)

    created = service.seed_default_mappings()
    if not created:
        click.echo("Default mappings already exist.")
        return
    for name in created:
        click.echo(f"Created CSV mapping '{name}'")


def register_commands(cli):
    """Register mapping commands with main CLI."""
    cli.add_command(mapping_group, name="mapping")
