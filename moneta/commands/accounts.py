"""Account commands (add, list, show, update, delete)."""

from typing import Any

from rich.table import Table

from moneta.commands.common import (
    colored_money,
    console,
    dash,
    fail,
    message,
    parse_choice,
    reporting_errors,
    require_database,
    success,
    yes_no,
)
from moneta.config import get_profile
from moneta.domain.models import AccountType, LogCategory, LogOperation
from moneta.store.queries import add_account, delete_account, get_account, list_accounts, update_account


def add_command(
    name: str,
    institution: str | None = None,
    account_type: str = AccountType.OTHER.value,
    observation: str | None = None,
    balance: str = "0.00",
) -> None:
    """Create a bank account."""
    require_database()
    parsed_type = parse_choice(AccountType, account_type, "type")

    with reporting_errors(LogOperation.CREATE, LogCategory.ACCOUNT):
        account = add_account(name, institution, parsed_type, observation, balance)

    success("CREATED", entity=name, id=account["id"])


def list_command(active_only: bool = False) -> None:
    """List accounts with their balances."""
    require_database()

    with reporting_errors():
        accounts = list_accounts(active_only)

    if not accounts:
        console.print(f"[yellow]{message('NO_RECORDS_FOUND')}[/yellow]")
        return

    profile = get_profile()
    table = Table(title="Accounts")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Institution")
    table.add_column("Type", style="magenta")
    table.add_column("Balance", justify="right")
    table.add_column("Active", justify="center")

    for account in accounts:
        table.add_row(
            str(account["id"]),
            account["name"],
            dash(account["institution"]),
            account["type"],
            colored_money(account["balance"], profile),
            yes_no(account["active"]),
        )

    console.print(table)


def show_command(account_id: int) -> None:
    """Show one account."""
    require_database()

    with reporting_errors():
        account = get_account(account_id)

    if account is None:
        fail("ACCOUNT_NOT_FOUND", id=account_id)

    profile = get_profile()
    console.print(f"[bold cyan]{account['name']}[/bold cyan] [dim](ID {account['id']})[/dim]")
    console.print(f"  Institution: {dash(account['institution'])}")
    console.print(f"  Type: {account['type']}")
    console.print(f"  Balance: {colored_money(account['balance'], profile)}")
    console.print(f"  Active: {yes_no(account['active'])}")
    console.print(f"  Observation: {dash(account['observation'])}")


def update_command(
    account_id: int,
    name: str | None = None,
    institution: str | None = None,
    account_type: str | None = None,
    observation: str | None = None,
    balance: str | None = None,
    active: bool | None = None,
) -> None:
    """Update an account. Only the given options change."""
    require_database()

    changes: dict[str, Any] = {}
    if name is not None:
        changes["name"] = name
    if institution is not None:
        changes["institution"] = institution
    if account_type is not None:
        changes["type"] = parse_choice(AccountType, account_type, "type")
    if observation is not None:
        changes["observation"] = observation
    if balance is not None:
        changes["balance"] = balance
    if active is not None:
        changes["active"] = int(active)

    if not changes:
        fail("NOTHING_TO_UPDATE")

    with reporting_errors(LogOperation.UPDATE, LogCategory.ACCOUNT):
        account = update_account(account_id, changes)

    success("UPDATED", entity=account["name"], id=account_id)


def delete_command(account_id: int) -> None:
    """Delete an account no transaction references."""
    require_database()

    with reporting_errors(LogOperation.DELETE, LogCategory.ACCOUNT):
        delete_account(account_id)

    success("DELETED", entity="account", id=account_id)
