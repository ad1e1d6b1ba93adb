"""Initialize default categories."""

import click
from fintrack.domain.category import CategoryService


@click.command("init-categories")
@click.pass_context
def init_categories(ctx):
    """Initialize database with the default categories.

    Categories that already exist are left untouched.
    """
    db = ctx.obj["db"]
    service = CategoryService(db)

    created = service.seed_default_categories()
    if not created:
        click.echo("Default categories already exist.")
        return

    click.echo(f"Successfully created {len(created)} categories.")


def register_commands(cli):
    """Register init-categories command with main CLI."""
    cli.add_command(init_categories)
