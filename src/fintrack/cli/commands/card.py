"""Credit card management commands."""

import click
from fintrack.cli.error_handling import handle_domain_error
from fintrack.domain.credit_card import CreditCardService
from fintrack.domain.errors import DomainError


@click.group()
def card_group():
    """Manage credit cards."""
    pass


@card_group.command("create")
@click.argument("name")
@click.option("--user", "user_id", required=True, type=int, help="Owner user ID")
@click.option("--institution", required=True, help="Issuing institution (e.g., Nubank, Inter)")
@click.option("--brand", help="Card brand (Visa, Mastercard, ...)")
@click.option("--last-digits", help="Last four digits of the card number")
@click.pass_context
def create_card(
    ctx, name: str, user_id: int, institution: str, brand: str | None, last_digits: str | None
):
    """Create a new credit card.

    Examples:
        fintrack card create "Roxinho" --user 1 --institution Nubank
        fintrack card create "Inter Black" --user 1 --institution Inter --last-digits 1234
    """
    db = ctx.obj["db"]
    service = CreditCardService(db)

    try:
        card_id = service.create_card(
            user_id=user_id,
            name=name,
            institution=institution,
            brand=brand,
            last_digits=last_digits,
        )
        click.echo(f"Created credit card '{name}' (ID: {card_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@card_group.command("list")
@click.option("--user", "user_id", type=int, help="Only cards of this user")
@click.option("--active-only", is_flag=True, help="Hide deactivated cards")
@click.pass_context
def list_cards(ctx, user_id: int | None, active_only: bool):
    """List credit cards."""
    db = ctx.obj["db"]
    service = CreditCardService(db)

    cards = service.list_cards(user_id=user_id, active_only=active_only)
    if not cards:
        click.echo("No credit cards found.")
        return

    click.echo("\nCredit cards:")
    click.echo("-" * 70)
    for c in cards:
        digits = f"**** {c.last_digits}" if c.last_digits else ""
        status = "" if c.is_active else " (inactive)"
        click.echo(
            f"ID: {c.id:3d} | User: {c.user_id:3d} | {c.name:20s} | {c.institution:10s} {digits}{status}"
        )


@card_group.command("deactivate")
@click.argument("card_id", type=int)
@click.pass_context
def deactivate_card(ctx, card_id: int):
    """Deactivate a credit card."""
    db = ctx.obj["db"]
    service = CreditCardService(db)

    try:
        service.deactivate_card(card_id)
        click.echo(f"Deactivated credit card {card_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register card commands with main CLI."""
    cli.add_command(card_group, name="card")
