"""Category management commands."""

import click
from fintrack.cli.error_handling import handle_domain_error
from fintrack.domain.category import CategoryService
from fintrack.domain.errors import DomainError


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.pass_context
def list_categories(ctx):
    """List all categories."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    categories = service.list_categories()
    if not categories:
        click.echo("No categories found. Run 'init-categories' to create default categories.")
        return

    click.echo("\nCategories:")
    for cat in categories:
        description = f" - {cat.description}" if cat.description else ""
        click.echo(f"{cat.name} (ID: {cat.id}){description}")


@category_group.command("create")
@click.argument("name")
@click.option("--description", help="What belongs in this category")
@click.option("--color", help="Display color (e.g., '#ff6b6b')")
@click.option("--icon", help="Display icon name")
@click.pass_context
def create_category(ctx, name: str, description: str | None, color: str | None, icon: str | None):
    """Create a new category."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    try:
        category_id = service.create_category(
            name=name, description=description, color=color, icon=icon
        )
        click.echo(f"Created category '{name}' (ID: {category_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
