"""Transaction commands (add, list, show, update, delete)."""

from typing import Any

from rich.table import Table

from moneta.commands.common import (
    console,
    dash,
    display_date,
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
from moneta.dates import month_range, normalize_date
from moneta.domain.models import LogCategory, LogOperation, Month, TransactionSource, TransactionType
from moneta.domain.monetary import increases_balance
from moneta.store.ledger import (
    count_transactions,
    create_transaction,
    delete_transaction,
    get_transaction,
    list_transactions,
    update_transaction,
)


def _parse_date(raw_date: str) -> str:
    try:
        return normalize_date(raw_date)
    except ValueError:
        fail("INVALID_DATE", value=raw_date)


def _parse_month(month: str) -> tuple[str, str, str]:
    try:
        return month_range(Month(month))
    except ValueError:
        fail("INVALID_DATE", value=month)


def _signed_display(txn: dict[str, Any], profile: dict[str, Any]) -> str:
    # Sign is the effect on the owner's balance, colour is spending vs. income
    amount = format_money(txn["value"], profile)
    sign = "+" if increases_balance(txn["transaction_type"], txn["transaction_source"]) else "-"
    color = "red" if txn["transaction_type"] == TransactionType.EXPENSE.value else "green"
    return f"[{color}]{sign}{amount}[/{color}]"


def _owner_label(txn: dict[str, Any]) -> str:
    if txn["transaction_source"] == TransactionSource.ACCOUNT.value:
        return f"account {txn['account_id']}"
    return f"card {txn['credit_card_id']}"


def _classification_label(txn: dict[str, Any]) -> str:
    parts = [str(txn[key]) for key in ("category_id", "subcategory_id") if txn[key] is not None]
    return " / ".join(parts) or "[dim]-[/dim]"


def add_command(
    value: str,
    date: str,
    transaction_type: str,
    source: str = TransactionSource.ACCOUNT.value,
    account_id: int | None = None,
    credit_card_id: int | None = None,
    category_id: int | None = None,
    subcategory_id: int | None = None,
    tags: list[int] | None = None,
    observation: str | None = None,
    total_months: int | None = None,
    recurring: bool = False,
    payment_day: int | None = None,
) -> None:
    """Record a transaction and update the balance of its account or card.

    Args:
        value: Amount; any sign is ignored, the type decides the direction.
        date: Transaction date (YYYY-MM-DD, DD/MM/YYYY, or other formats).
        transaction_type: income or expense.
        source: account or creditCard.
        account_id: Account id, required when source is account.
        credit_card_id: Card id, required when source is creditCard.
        category_id: Category id.
        subcategory_id: Subcategory id.
        tags: Tag ids.
        observation: Optional free text.
        total_months: Number of installments, if paid in installments.
        recurring: Whether the transaction repeats monthly.
        payment_day: Day of month a recurring transaction is due.
    """
    require_database()

    data: dict[str, Any] = {
        "value": value,
        "date": _parse_date(date),
        "transaction_type": parse_choice(TransactionType, transaction_type, "type"),
        "transaction_source": parse_choice(TransactionSource, source, "source"),
        "account_id": account_id,
        "credit_card_id": credit_card_id,
        "category_id": category_id,
        "subcategory_id": subcategory_id,
        "observation": observation,
        "is_installment": int(bool(total_months)),
        "total_months": total_months,
        "is_recurring": int(recurring),
        "payment_day": payment_day,
        "tags": tags or [],
    }

    with reporting_errors(LogOperation.CREATE, LogCategory.TRANSACTION):
        txn = create_transaction(data)

    profile = get_profile()
    success("CREATED", entity="transaction", id=txn["id"])
    console.print(f"  Date: {display_date(txn['date'], profile)}")
    console.print(f"  Amount: {_signed_display(txn, profile)}")
    console.print(f"  Source: {_owner_label(txn)}")


def list_command(
    account_id: int | None = None,
    credit_card_id: int | None = None,
    category_id: int | None = None,
    subcategory_id: int | None = None,
    tag_id: int | None = None,
    transaction_type: str | None = None,
    month: str | None = None,
    limit: int = 50,
    all: bool = False,
    oldest_first: bool = False,
) -> None:
    """List transactions, newest first."""
    require_database()

    filters: dict[str, Any] = {
        "account_id": account_id,
        "credit_card_id": credit_card_id,
        "category_id": category_id,
        "subcategory_id": subcategory_id,
        "tag_id": tag_id,
    }
    if transaction_type:
        filters["transaction_type"] = parse_choice(TransactionType, transaction_type, "type")

    title = "Transactions"
    if month:
        since, until, label = _parse_month(month)
        filters["since"] = since
        filters["until"] = until
        title = f"Transactions - {label}"

    with reporting_errors():
        transactions = list_transactions(filters, limit=None if all else limit, newest_first=not oldest_first)
        total = count_transactions(filters)

    if not transactions:
        console.print(f"[yellow]{message('NO_RECORDS_FOUND')}[/yellow]")
        return

    profile = get_profile()
    table = Table(title=f"{title} (showing {len(transactions)} of {total})")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Date", style="cyan", no_wrap=True)
    table.add_column("Amount", justify="right")
    table.add_column("Source", style="dim")
    table.add_column("Category", style="magenta")
    table.add_column("Tags")
    table.add_column("Observation")

    for txn in transactions:
        table.add_row(
            str(txn["id"]),
            display_date(txn["date"], profile),
            _signed_display(txn, profile),
            _owner_label(txn),
            _classification_label(txn),
            ", ".join(str(tag) for tag in txn["tags"]) or "[dim]-[/dim]",
            dash(txn["observation"]),
        )

    console.print(table)


def show_command(transaction_id: int) -> None:
    """Show one transaction."""
    require_database()

    with reporting_errors():
        txn = get_transaction(transaction_id)

    if txn is None:
        fail("TRANSACTION_NOT_FOUND", id=transaction_id)

    profile = get_profile()
    console.print(f"[bold cyan]Transaction {txn['id']}[/bold cyan]")
    console.print(f"  Date: {display_date(txn['date'], profile)}")
    console.print(f"  Amount: {_signed_display(txn, profile)}")
    console.print(f"  Type: {txn['transaction_type']}")
    console.print(f"  Source: {_owner_label(txn)}")
    console.print(f"  Category: {dash(txn['category_id'])}")
    console.print(f"  Subcategory: {dash(txn['subcategory_id'])}")
    console.print(f"  Tags: {', '.join(str(tag) for tag in txn['tags']) or '-'}")
    console.print(f"  Installments: {dash(txn['total_months'])}")
    console.print(f"  Recurring: {yes_no(txn['is_recurring'])}")
    console.print(f"  Payment day: {dash(txn['payment_day'])}")
    console.print(f"  Observation: {dash(txn['observation'])}")


def update_command(
    transaction_id: int,
    value: str | None = None,
    date: str | None = None,
    transaction_type: str | None = None,
    source: str | None = None,
    account_id: int | None = None,
    credit_card_id: int | None = None,
    category_id: int | None = None,
    subcategory_id: int | None = None,
    tags: list[int] | None = None,
    clear_tags: bool = False,
    observation: str | None = None,
    active: bool | None = None,
) -> None:
    """Update a transaction and rebalance the affected accounts and cards."""
    require_database()

    changes: dict[str, Any] = {}
    if value is not None:
        changes["value"] = value
    if date is not None:
        changes["date"] = _parse_date(date)
    if transaction_type is not None:
        changes["transaction_type"] = parse_choice(TransactionType, transaction_type, "type")
    if source is not None:
        changes["transaction_source"] = parse_choice(TransactionSource, source, "source")
    if account_id is not None:
        changes["account_id"] = account_id
    if credit_card_id is not None:
        changes["credit_card_id"] = credit_card_id
    if category_id is not None:
        changes["category_id"] = category_id
    if subcategory_id is not None:
        changes["subcategory_id"] = subcategory_id
    if clear_tags:
        changes["tags"] = []
    elif tags:
        changes["tags"] = tags
    if observation is not None:
        changes["observation"] = observation
    if active is not None:
        changes["active"] = int(active)

    if not changes:
        fail("NOTHING_TO_UPDATE")

    with reporting_errors(LogOperation.UPDATE, LogCategory.TRANSACTION):
        update_transaction(transaction_id, changes)

    success("UPDATED", entity="transaction", id=transaction_id)


def delete_command(transaction_id: int) -> None:
    """Delete a transaction and reverse its effect on the balance."""
    require_database()

    with reporting_errors(LogOperation.DELETE, LogCategory.TRANSACTION):
        delete_transaction(transaction_id)

    success("DELETED", entity="transaction", id=transaction_id)
