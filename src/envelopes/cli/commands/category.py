"""Category management commands."""

import click

from envelopes.cli.error_handling import handle_domain_error
from envelopes.cli.resolution import resolve_category_or_exit
from envelopes.domain.category import CategoryService
from envelopes.domain.errors import DomainError


@click.group()
def category_group():
    """Manage categories and category groups."""
    pass


@category_group.command("list")
@click.option("--all", "show_all", is_flag=True, help="Include hidden groups and categories")
@click.pass_context
def list_categories(ctx, show_all: bool):
    """List category groups and their categories."""
    service = CategoryService(ctx.obj["db"])

    groups = service.list_groups(ctx.obj["owner_id"], include_hidden=show_all)
    if not groups:
        click.echo("No categories found. Create a group with 'category group-create'.")
        return

    click.echo("\nCategories:")
    for group in groups:
        hidden = " [hidden]" if group.is_hidden else ""
        click.echo(f"{group.name} (ID: {group.id}){hidden}")
        for cat in group.categories:
            hidden = " [hidden]" if cat.is_hidden else ""
            click.echo(f"  {cat.name} (ID: {cat.id}){hidden}")


@category_group.command("group-create")
@click.argument("name")
@click.pass_context
def create_group(ctx, name: str):
    """Create a new category group."""
    service = CategoryService(ctx.obj["db"])

    try:
        group_id = service.create_group(ctx.obj["owner_id"], name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created category group '{name}' (ID: {group_id})")


@category_group.command("create")
@click.argument("name")
@click.option("--group", "group_name", required=True, help="Group name or ID")
@click.pass_context
def create_category(ctx, name: str, group_name: str):
    """Create a new category in a group.

    Examples:
        envelopes category create "Groceries" --group "Everyday"
    """
    service = CategoryService(ctx.obj["db"])
    owner_id = ctx.obj["owner_id"]

    group = next(
        (
            g
            for g in service.list_groups(owner_id)
            if g.name == group_name or (group_name.isdigit() and g.id == int(group_name))
        ),
        None,
    )
    if group is None:
        click.echo(f"Error: Category group '{group_name}' not found", err=True)
        ctx.exit(1)

    try:
        category_id = service.create_category(owner_id, group.id, name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created category '{name}' in '{group.name}' (ID: {category_id})")


@category_group.command("rename")
@click.argument("category")
@click.argument("new_name")
@click.pass_context
def rename_category(ctx, category: str, new_name: str):
    """Rename a category.

    CATEGORY can be a name, an ID or a "Group > Category" path.
    """
    service = CategoryService(ctx.obj["db"])
    cat = resolve_category_or_exit(ctx, service, ctx.obj["owner_id"], category)

    try:
        service.rename_category(cat.id, new_name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Renamed category '{cat.name}' to '{new_name}'")


@category_group.command("hide")
@click.argument("category")
@click.option("--show", is_flag=True, help="Unhide the category instead")
@click.pass_context
def hide_category(ctx, category: str, show: bool):
    """Hide a category from the budget view.

    Money assigned to a hidden category still counts against Ready to Assign.
    """
    service = CategoryService(ctx.obj["db"])
    cat = resolve_category_or_exit(ctx, service, ctx.obj["owner_id"], category)

    service.set_category_hidden(cat.id, not show)
    click.echo(f"{'Unhid' if show else 'Hid'} category '{cat.name}'")


@category_group.command("delete")
@click.argument("category")
@click.pass_context
def delete_category(ctx, category: str):
    """Delete a category.

    The category can only be deleted if no transaction uses it and no month
    has money assigned to it.
    """
    service = CategoryService(ctx.obj["db"])
    cat = resolve_category_or_exit(ctx, service, ctx.obj["owner_id"], category)

    try:
        service.delete_category(cat.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted category '{cat.name}'")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
