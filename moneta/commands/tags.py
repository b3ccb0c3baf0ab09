"""Tag commands."""

from typing import Any

from rich.table import Table

from moneta.commands.common import console, fail, message, reporting_errors, require_database, success, yes_no
from moneta.domain.models import LogCategory, LogOperation
from moneta.store.queries import add_tag, delete_tag, list_tags, update_tag


def add_command(name: str) -> None:
    """Create a tag."""
    require_database()

    with reporting_errors(LogOperation.CREATE, LogCategory.TAG):
        tag = add_tag(name)

    success("CREATED", entity=name, id=tag["id"])


def list_command(active_only: bool = False) -> None:
    """List tags and how many transactions carry each."""
    require_database()

    with reporting_errors():
        tags = list_tags(active_only)

    if not tags:
        console.print(f"[yellow]{message('NO_RECORDS_FOUND')}[/yellow]")
        return

    table = Table(title="Tags")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Transactions", justify="right")
    table.add_column("Active", justify="center")

    for tag in tags:
        table.add_row(str(tag["id"]), tag["name"], str(tag["usage"]), yes_no(tag["active"]))

    console.print(table)


def update_command(tag_id: int, name: str | None = None, active: bool | None = None) -> None:
    """Rename or (de)activate a tag."""
    require_database()

    changes: dict[str, Any] = {}
    if name is not None:
        changes["name"] = name
    if active is not None:
        changes["active"] = int(active)

    if not changes:
        fail("NOTHING_TO_UPDATE")

    with reporting_errors(LogOperation.UPDATE, LogCategory.TAG):
        tag = update_tag(tag_id, changes)

    success("UPDATED", entity=tag["name"], id=tag_id)


def delete_command(tag_id: int) -> None:
    """Delete a tag no transaction carries."""
    require_database()

    with reporting_errors(LogOperation.DELETE, LogCategory.TAG):
        delete_tag(tag_id)

    success("DELETED", entity="tag", id=tag_id)
