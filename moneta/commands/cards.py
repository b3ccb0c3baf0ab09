"""Credit card commands (add, list, show, update, delete)."""

from typing import Any

from rich.table import Table

from moneta.commands.common import (
    colored_money,
    console,
    dash,
    fail,
    format_money,
    message,
    parse_choice,
    reporting_errors,
    require_database,
    success,
    yes_no,
)
from moneta.config import get_profile
from moneta.domain.models import CardFlag, LogCategory, LogOperation
from moneta.store.queries import (
    add_credit_card,
    delete_credit_card,
    get_credit_card,
    list_credit_cards,
    update_credit_card,
)


def add_command(
    name: str,
    flag: str,
    credit_limit: str = "0.00",
    account_id: int | None = None,
    observation: str | None = None,
    balance: str = "0.00",
) -> None:
    """Create a credit card."""
    require_database()
    parsed_flag = parse_choice(CardFlag, flag, "flag")

    with reporting_errors(LogOperation.CREATE, LogCategory.CREDIT_CARD):
        card = add_credit_card(name, parsed_flag, credit_limit, account_id, observation, balance)

    success("CREATED", entity=name, id=card["id"])


def list_command(active_only: bool = False) -> None:
    """List credit cards with what is owed on each."""
    require_database()

    with reporting_errors():
        cards = list_credit_cards(active_only)

    if not cards:
        console.print(f"[yellow]{message('NO_RECORDS_FOUND')}[/yellow]")
        return

    profile = get_profile()
    table = Table(title="Credit cards")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Flag", style="magenta")
    table.add_column("Balance", justify="right")
    table.add_column("Limit", justify="right")
    table.add_column("Account", justify="right")
    table.add_column("Active", justify="center")

    for card in cards:
        table.add_row(
            str(card["id"]),
            card["name"],
            card["flag"],
            colored_money(card["balance"], profile),
            format_money(card["credit_limit"], profile),
            dash(card["account_id"]),
            yes_no(card["active"]),
        )

    console.print(table)


def show_command(card_id: int) -> None:
    """Show one credit card."""
    require_database()

    with reporting_errors():
        card = get_credit_card(card_id)

    if card is None:
        fail("CREDIT_CARD_NOT_FOUND", id=card_id)

    profile = get_profile()
    console.print(f"[bold cyan]{card['name']}[/bold cyan] [dim](ID {card['id']})[/dim]")
    console.print(f"  Flag: {card['flag']}")
    console.print(f"  Balance: {colored_money(card['balance'], profile)}")
    console.print(f"  Limit: {format_money(card['credit_limit'], profile)}")
    console.print(f"  Account: {dash(card['account_id'])}")
    console.print(f"  Active: {yes_no(card['active'])}")
    console.print(f"  Observation: {dash(card['observation'])}")


def update_command(
    card_id: int,
    name: str | None = None,
    flag: str | None = None,
    credit_limit: str | None = None,
    account_id: int | None = None,
    unlink_account: bool = False,
    observation: str | None = None,
    balance: str | None = None,
    active: bool | None = None,
) -> None:
    """Update a credit card. Only the given options change."""
    require_database()

    changes: dict[str, Any] = {}
    if name is not None:
        changes["name"] = name
    if flag is not None:
        changes["flag"] = parse_choice(CardFlag, flag, "flag")
    if credit_limit is not None:
        changes["credit_limit"] = credit_limit
    if unlink_account:
        changes["account_id"] = None
    elif account_id is not None:
        changes["account_id"] = account_id
    if observation is not None:
        changes["observation"] = observation
    if balance is not None:
        changes["balance"] = balance
    if active is not None:
        changes["active"] = int(active)

    if not changes:
        fail("NOTHING_TO_UPDATE")

    with reporting_errors(LogOperation.UPDATE, LogCategory.CREDIT_CARD):
        card = update_credit_card(card_id, changes)

    success("UPDATED", entity=card["name"], id=card_id)


def delete_command(card_id: int) -> None:
    """Delete a credit card no transaction references."""
    require_database()

    with reporting_errors(LogOperation.DELETE, LogCategory.CREDIT_CARD):
        delete_credit_card(card_id)

    success("DELETED", entity="credit card", id=card_id)
