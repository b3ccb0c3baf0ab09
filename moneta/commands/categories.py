"""Category and subcategory commands."""

from typing import Any

from rich.table import Table

from moneta.commands.common import (
    console,
    fail,
    message,
    parse_choice,
    reporting_errors,
    require_database,
    success,
    yes_no,
)
from moneta.domain.models import CategoryColor, LogCategory, LogOperation, TransactionType
from moneta.store.queries import (
    add_category,
    add_subcategory,
    delete_category,
    delete_subcategory,
    get_category,
    list_categories,
    list_subcategories,
    update_category,
    update_subcategory,
)


def add_category_command(name: str, category_type: str, color: str = CategoryColor.PURPLE.value) -> None:
    """Create a category."""
    require_database()
    parsed_type = parse_choice(TransactionType, category_type, "type")
    parsed_color = parse_choice(CategoryColor, color, "color")

    with reporting_errors(LogOperation.CREATE, LogCategory.CATEGORY):
        category = add_category(name, parsed_type, parsed_color)

    success("CREATED", entity=name, id=category["id"])


def list_categories_command(category_type: str | None = None, active_only: bool = False) -> None:
    """List categories, optionally only income or expense ones."""
    require_database()
    parsed_type = parse_choice(TransactionType, category_type, "type") if category_type else None

    with reporting_errors():
        categories = list_categories(parsed_type, active_only)

    if not categories:
        console.print(f"[yellow]{message('NO_RECORDS_FOUND')}[/yellow]")
        return

    table = Table(title="Categories")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Type", style="magenta")
    table.add_column("Color")
    table.add_column("Active", justify="center")

    for category in categories:
        table.add_row(
            str(category["id"]),
            category["name"],
            category["type"],
            category["color"],
            yes_no(category["active"]),
        )

    console.print(table)


def show_category_command(category_id: int) -> None:
    """Show a category and its subcategories."""
    require_database()

    with reporting_errors():
        category = get_category(category_id)
        if category is None:
            fail("CATEGORY_NOT_FOUND", id=category_id)
        subcategories = list_subcategories(category_id)

    console.print(f"[bold cyan]{category['name']}[/bold cyan] [dim](ID {category['id']})[/dim]")
    console.print(f"  Type: {category['type']}")
    console.print(f"  Color: {category['color']}")
    console.print(f"  Active: {yes_no(category['active'])}")

    if subcategories:
        console.print("  Subcategories:")
        for subcategory in subcategories:
            status = "" if subcategory["active"] else " [dim](inactive)[/dim]"
            console.print(f"    {subcategory['id']}. {subcategory['name']}{status}")


def update_category_command(
    category_id: int,
    name: str | None = None,
    category_type: str | None = None,
    color: str | None = None,
    active: bool | None = None,
) -> None:
    """Update a category. Only the given options change."""
    require_database()

    changes: dict[str, Any] = {}
    if name is not None:
        changes["name"] = name
    if category_type is not None:
        changes["type"] = parse_choice(TransactionType, category_type, "type")
    if color is not None:
        changes["color"] = parse_choice(CategoryColor, color, "color")
    if active is not None:
        changes["active"] = int(active)

    if not changes:
        fail("NOTHING_TO_UPDATE")

    with reporting_errors(LogOperation.UPDATE, LogCategory.CATEGORY):
        category = update_category(category_id, changes)

    success("UPDATED", entity=category["name"], id=category_id)


def delete_category_command(category_id: int) -> None:
    """Delete a category and its subcategories."""
    require_database()

    with reporting_errors(LogOperation.DELETE, LogCategory.CATEGORY):
        delete_category(category_id)

    success("DELETED", entity="category", id=category_id)


def add_subcategory_command(name: str, category_id: int) -> None:
    """Create a subcategory under an active category."""
    require_database()

    with reporting_errors(LogOperation.CREATE, LogCategory.SUBCATEGORY):
        subcategory = add_subcategory(name, category_id)

    success("CREATED", entity=name, id=subcategory["id"])


def list_subcategories_command(category_id: int | None = None, active_only: bool = False) -> None:
    """List subcategories grouped by category name."""
    require_database()

    with reporting_errors():
        subcategories = list_subcategories(category_id, active_only)

    if not subcategories:
        console.print(f"[yellow]{message('NO_RECORDS_FOUND')}[/yellow]")
        return

    table = Table(title="Subcategories")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Category", style="magenta")
    table.add_column("Name", style="cyan")
    table.add_column("Active", justify="center")

    for subcategory in subcategories:
        table.add_row(
            str(subcategory["id"]),
            subcategory["category_name"],
            subcategory["name"],
            yes_no(subcategory["active"]),
        )

    console.print(table)


def update_subcategory_command(
    subcategory_id: int,
    name: str | None = None,
    category_id: int | None = None,
    active: bool | None = None,
) -> None:
    """Rename, move or (de)activate a subcategory."""
    require_database()

    changes: dict[str, Any] = {}
    if name is not None:
        changes["name"] = name
    if category_id is not None:
        changes["category_id"] = category_id
    if active is not None:
        changes["active"] = int(active)

    if not changes:
        fail("NOTHING_TO_UPDATE")

    with reporting_errors(LogOperation.UPDATE, LogCategory.SUBCATEGORY):
        subcategory = update_subcategory(subcategory_id, changes)

    success("UPDATED", entity=subcategory["name"], id=subcategory_id)


def delete_subcategory_command(subcategory_id: int) -> None:
    """Delete a subcategory no transaction references."""
    require_database()

    with reporting_errors(LogOperation.DELETE, LogCategory.SUBCATEGORY):
        delete_subcategory(subcategory_id)

    success("DELETED", entity="subcategory", id=subcategory_id)
