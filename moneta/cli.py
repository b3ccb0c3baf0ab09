"""CLI entry point for moneta."""

import typer

from moneta.commands import accounts as accounts_commands
from moneta.commands import cards as cards_commands
from moneta.commands import categories as categories_commands
from moneta.commands import profile as profile_commands
from moneta.commands import tags as tags_commands
from moneta.commands import transactions as transactions_commands
from moneta.commands.admin import backup_command, init_command, logs_command, purge_logs_command
from moneta.log import configure_logging

app = typer.Typer(
    name="moneta",
    help="Moneta - personal finance ledger for accounts, credit cards and budgets",
    add_completion=False,
)
accounts_app = typer.Typer(help="Manage bank accounts.", no_args_is_help=True)
cards_app = typer.Typer(help="Manage credit cards.", no_args_is_help=True)
categories_app = typer.Typer(help="Manage categories.", no_args_is_help=True)
subcategories_app = typer.Typer(help="Manage subcategories.", no_args_is_help=True)
tags_app = typer.Typer(help="Manage tags.", no_args_is_help=True)
transactions_app = typer.Typer(help="Record and review transactions.", no_args_is_help=True)
profile_app = typer.Typer(help="Show or change your profile settings.", no_args_is_help=True)

app.add_typer(accounts_app, name="accounts")
app.add_typer(cards_app, name="cards")
app.add_typer(categories_app, name="categories")
app.add_typer(subcategories_app, name="subcategories")
app.add_typer(tags_app, name="tags")
app.add_typer(transactions_app, name="transactions")
app.add_typer(profile_app, name="profile")


@app.callback()
def main(
    log_level: str = typer.Option(None, "--log-level", help="Diagnostic log level (DEBUG, INFO, WARNING, ...)"),
) -> None:
    """Moneta - personal finance ledger for accounts, credit cards and budgets."""
    configure_logging(log_level)


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing database and config"),
    migrate: bool = typer.Option(False, "--migrate", help="Update the database schema only"),
) -> None:
    """Initialize moneta database and configuration."""
    init_command(force, migrate)


@app.command(name="backup")
def backup(
    output_dir: str = typer.Option(None, "--output", "-o", help="Backup directory"),
) -> None:
    """Backup your database and configuration files."""
    backup_command(output_dir)


@app.command(name="logs")
def logs(
    limit: int = typer.Option(50, help="Maximum entries to show"),
    all: bool = typer.Option(False, "--all", "-a", help="Show every entry"),
    category: str = typer.Option(None, "--category", "-c", help="Only entries for this entity kind"),
    purge_before: str = typer.Option(None, "--purge-before", help="Delete entries created before this date"),
) -> None:
    """Show or purge the audit log."""
    if purge_before:
        purge_logs_command(purge_before)
        return
    logs_command(limit, all, category)


# Accounts


@accounts_app.command("add")
def accounts_add(
    name: str,
    institution: str = typer.Option(None, "--institution", "-i", help="Bank or institution"),
    account_type: str = typer.Option("other", "--type", "-t", help="Account type, e.g. checking or savings"),
    observation: str = typer.Option(None, "--observation", help="Free text"),
    balance: str = typer.Option("0.00", "--balance", "-b", help="Opening balance"),
) -> None:
    """Add a bank account."""
    accounts_commands.add_command(name, institution, account_type, observation, balance)


@accounts_app.command("list")
def accounts_list(
    active_only: bool = typer.Option(False, "--active", help="Only active accounts"),
) -> None:
    """List your accounts and balances."""
    accounts_commands.list_command(active_only)


@accounts_app.command("show")
def accounts_show(account_id: int) -> None:
    """Show one account."""
    accounts_commands.show_command(account_id)


@accounts_app.command("update")
def accounts_update(
    account_id: int,
    name: str = typer.Option(None, "--name", "-n"),
    institution: str = typer.Option(None, "--institution", "-i"),
    account_type: str = typer.Option(None, "--type", "-t"),
    observation: str = typer.Option(None, "--observation"),
    balance: str = typer.Option(None, "--balance", "-b", help="Overwrite the balance"),
    active: bool = typer.Option(None, "--active/--inactive"),
) -> None:
    """Update an account."""
    accounts_commands.update_command(account_id, name, institution, account_type, observation, balance, active)


@accounts_app.command("delete")
def accounts_delete(account_id: int) -> None:
    """Delete an account with no transactions."""
    accounts_commands.delete_command(account_id)


# Credit cards


@cards_app.command("add")
def cards_add(
    name: str,
    flag: str = typer.Option(..., "--flag", "-f", help="visa, mastercard, amex, elo, hipercard, discover, diners"),
    credit_limit: str = typer.Option("0.00", "--limit", "-l", help="Credit limit"),
    account_id: int = typer.Option(None, "--account", "-a", help="Account that pays the bill"),
    observation: str = typer.Option(None, "--observation"),
    balance: str = typer.Option("0.00", "--balance", "-b", help="Amount currently owed"),
) -> None:
    """Add a credit card."""
    cards_commands.add_command(name, flag, credit_limit, account_id, observation, balance)


@cards_app.command("list")
def cards_list(
    active_only: bool = typer.Option(False, "--active", help="Only active cards"),
) -> None:
    """List your credit cards."""
    cards_commands.list_command(active_only)


@cards_app.command("show")
def cards_show(card_id: int) -> None:
    """Show one credit card."""
    cards_commands.show_command(card_id)


@cards_app.command("update")
def cards_update(
    card_id: int,
    name: str = typer.Option(None, "--name", "-n"),
    flag: str = typer.Option(None, "--flag", "-f"),
    credit_limit: str = typer.Option(None, "--limit", "-l"),
    account_id: int = typer.Option(None, "--account", "-a"),
    unlink_account: bool = typer.Option(False, "--unlink-account", help="Detach the card from its account"),
    observation: str = typer.Option(None, "--observation"),
    balance: str = typer.Option(None, "--balance", "-b", help="Overwrite the balance"),
    active: bool = typer.Option(None, "--active/--inactive"),
) -> None:
    """Update a credit card."""
    cards_commands.update_command(
        card_id, name, flag, credit_limit, account_id, unlink_account, observation, balance, active
    )


@cards_app.command("delete")
def cards_delete(card_id: int) -> None:
    """Delete a credit card with no transactions."""
    cards_commands.delete_command(card_id)


# Categories


@categories_app.command("add")
def categories_add(
    name: str,
    category_type: str = typer.Option(..., "--type", "-t", help="income or expense"),
    color: str = typer.Option("purple", "--color", "-c"),
) -> None:
    """Add a category."""
    categories_commands.add_category_command(name, category_type, color)


@categories_app.command("list")
def categories_list(
    category_type: str = typer.Option(None, "--type", "-t", help="income or expense"),
    active_only: bool = typer.Option(False, "--active", help="Only active categories"),
) -> None:
    """List categories."""
    categories_commands.list_categories_command(category_type, active_only)


@categories_app.command("show")
def categories_show(category_id: int) -> None:
    """Show a category and its subcategories."""
    categories_commands.show_category_command(category_id)


@categories_app.command("update")
def categories_update(
    category_id: int,
    name: str = typer.Option(None, "--name", "-n"),
    category_type: str = typer.Option(None, "--type", "-t"),
    color: str = typer.Option(None, "--color", "-c"),
    active: bool = typer.Option(None, "--active/--inactive"),
) -> None:
    """Update a category."""
    categories_commands.update_category_command(category_id, name, category_type, color, active)


@categories_app.command("delete")
def categories_delete(category_id: int) -> None:
    """Delete a category and its subcategories."""
    categories_commands.delete_category_command(category_id)


# Subcategories


@subcategories_app.command("add")
def subcategories_add(
    name: str,
    category_id: int = typer.Option(..., "--category", "-c", help="Parent category id"),
) -> None:
    """Add a subcategory."""
    categories_commands.add_subcategory_command(name, category_id)


@subcategories_app.command("list")
def subcategories_list(
    category_id: int = typer.Option(None, "--category", "-c", help="Only this category"),
    active_only: bool = typer.Option(False, "--active", help="Only active subcategories"),
) -> None:
    """List subcategories."""
    categories_commands.list_subcategories_command(category_id, active_only)


@subcategories_app.command("update")
def subcategories_update(
    subcategory_id: int,
    name: str = typer.Option(None, "--name", "-n"),
    category_id: int = typer.Option(None, "--category", "-c", help="Move under this category"),
    active: bool = typer.Option(None, "--active/--inactive"),
) -> None:
    """Update a subcategory."""
    categories_commands.update_subcategory_command(subcategory_id, name, category_id, active)


@subcategories_app.command("delete")
def subcategories_delete(subcategory_id: int) -> None:
    """Delete a subcategory with no transactions."""
    categories_commands.delete_subcategory_command(subcategory_id)


# Tags


@tags_app.command("add")
def tags_add(name: str) -> None:
    """Add a tag."""
    tags_commands.add_command(name)


@tags_app.command("list")
def tags_list(
    active_only: bool = typer.Option(False, "--active", help="Only active tags"),
) -> None:
    """List tags and their usage."""
    tags_commands.list_command(active_only)


@tags_app.command("update")
def tags_update(
    tag_id: int,
    name: str = typer.Option(None, "--name", "-n"),
    active: bool = typer.Option(None, "--active/--inactive"),
) -> None:
    """Rename or (de)activate a tag."""
    tags_commands.update_command(tag_id, name, active)


@tags_app.command("delete")
def tags_delete(tag_id: int) -> None:
    """Delete a tag no transaction carries."""
    tags_commands.delete_command(tag_id)


# Transactions


@transactions_app.command("add")
def transactions_add(
    value: str,
    date: str,
    transaction_type: str = typer.Option(..., "--type", "-t", help="income or expense"),
    source: str = typer.Option("account", "--source", "-s", help="account or creditCard"),
    account_id: int = typer.Option(None, "--account", "-a"),
    credit_card_id: int = typer.Option(None, "--card"),
    category_id: int = typer.Option(None, "--category", "-c"),
    subcategory_id: int = typer.Option(None, "--subcategory"),
    tags: list[int] = typer.Option(None, "--tag", help="Tag id (repeatable)"),
    observation: str = typer.Option(None, "--observation", "-o"),
    total_months: int = typer.Option(None, "--installments", help="Number of monthly installments"),
    recurring: bool = typer.Option(False, "--recurring", help="Repeats every month"),
    payment_day: int = typer.Option(None, "--payment-day", min=1, max=31),
) -> None:
    """Record a transaction."""
    transactions_commands.add_command(
        value,
        date,
        transaction_type,
        source,
        account_id,
        credit_card_id,
        category_id,
        subcategory_id,
        tags,
        observation,
        total_months,
        recurring,
        payment_day,
    )


@transactions_app.command("list")
def transactions_list(
    account_id: int = typer.Option(None, "--account", "-a"),
    credit_card_id: int = typer.Option(None, "--card"),
    category_id: int = typer.Option(None, "--category", "-c"),
    subcategory_id: int = typer.Option(None, "--subcategory"),
    tag_id: int = typer.Option(None, "--tag"),
    transaction_type: str = typer.Option(None, "--type", "-t", help="income or expense"),
    month: str = typer.Option(None, "--month", help="Specific month (YYYY-MM)"),
    limit: int = typer.Option(50, help="Maximum transactions to show"),
    all: bool = typer.Option(False, "--all", help="Show all matching transactions"),
    oldest_first: bool = typer.Option(False, "--oldest-first", help="Oldest transactions first"),
) -> None:
    """List your transactions."""
    transactions_commands.list_command(
        account_id,
        credit_card_id,
        category_id,
        subcategory_id,
        tag_id,
        transaction_type,
        month,
        limit,
        all,
        oldest_first,
    )


@transactions_app.command("show")
def transactions_show(transaction_id: int) -> None:
    """Show one transaction."""
    transactions_commands.show_command(transaction_id)


@transactions_app.command("update")
def transactions_update(
    transaction_id: int,
    value: str = typer.Option(None, "--value", "-v"),
    date: str = typer.Option(None, "--date", "-d"),
    transaction_type: str = typer.Option(None, "--type", "-t"),
    source: str = typer.Option(None, "--source", "-s"),
    account_id: int = typer.Option(None, "--account", "-a"),
    credit_card_id: int = typer.Option(None, "--card"),
    category_id: int = typer.Option(None, "--category", "-c"),
    subcategory_id: int = typer.Option(None, "--subcategory"),
    tags: list[int] = typer.Option(None, "--tag", help="Replace tags (repeatable)"),
    clear_tags: bool = typer.Option(False, "--clear-tags", help="Remove all tags"),
    observation: str = typer.Option(None, "--observation", "-o"),
    active: bool = typer.Option(None, "--active/--inactive"),
) -> None:
    """Update a transaction and rebalance accounts and cards."""
    transactions_commands.update_command(
        transaction_id,
        value,
        date,
        transaction_type,
        source,
        account_id,
        credit_card_id,
        category_id,
        subcategory_id,
        tags,
        clear_tags,
        observation,
        active,
    )


@transactions_app.command("delete")
def transactions_delete(transaction_id: int) -> None:
    """Delete a transaction and reverse its balance effect."""
    transactions_commands.delete_command(transaction_id)


# Profile


@profile_app.command("show")
def profile_show() -> None:
    """Show your profile."""
    profile_commands.show_command()


@profile_app.command("update")
def profile_update(
    name: str = typer.Option(None, "--name", "-n"),
    language: str = typer.Option(None, "--language", "-l", help="pt-BR, en-US or es-ES (empty for automatic)"),
    currency: str = typer.Option(None, "--currency", help="ARS, COP, BRL, EUR or USD"),
    date_format: str = typer.Option(None, "--date-format", help="DD/MM/YYYY or MM/DD/YYYY"),
    hide_values: bool = typer.Option(None, "--hide-values/--show-values"),
) -> None:
    """Update your profile."""
    profile_commands.update_command(name, language, currency, date_format, hide_values)


if __name__ == "__main__":
    app()
