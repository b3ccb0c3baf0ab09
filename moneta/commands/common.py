"""Shared console helpers for commands: errors, amounts and dates."""

import sqlite3
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from typing import Any, NoReturn

from rich.console import Console

from moneta.config import get_language, get_profile
from moneta.dates import format_date
from moneta.domain.errors import InvalidMonetaryAmount, LedgerError
from moneta.domain.models import Currency, LogCategory, LogOperation, LogType
from moneta.i18n import translate
from moneta.log import get_logger
from moneta.store.queries import record_log
from moneta.store.schema import database_exists

console = Console()
logger = get_logger("commands")

CURRENCY_SYMBOLS = {
    Currency.ARS: "$",
    Currency.COP: "$",
    Currency.BRL: "R$",
    Currency.EUR: "€",
    Currency.USD: "US$",
}

HIDDEN_AMOUNT = "•••••"


def message(key: str, **params: Any) -> str:
    """Translate a resource key in the user's language."""
    return translate(key, get_language(), **params)


def fail(key: str, **params: Any) -> NoReturn:
    """Print a localized error and exit with status 1."""
    console.print(f"[red]{message(key, **params)}[/red]", style="bold")
    sys.exit(1)


def success(key: str, **params: Any) -> None:
    console.print(f"[green]✓[/green] {message(key, **params)}")


def require_database() -> None:
    """Exit with a hint when 'moneta init' has not been run."""
    if not database_exists():
        fail("DATABASE_NOT_FOUND")


def parse_choice(enum_type: type[Enum], value: str, field: str) -> Any:
    """Convert CLI text to an enum member, failing with the accepted choices."""
    try:
        return enum_type(value)
    except ValueError:
        choices = ", ".join(member.value for member in enum_type)
        fail("INVALID_OPTION", value=value, field=field, choices=choices)


@contextmanager
def reporting_errors(
    operation: LogOperation | None = None, category: LogCategory | None = None
) -> Iterator[None]:
    """Turn store errors into localized messages and exit status 1.

    When operation and category are given, a rejected operation (LedgerError)
    is also kept in the audit log as an alert.
    """
    try:
        yield
    except LedgerError as e:
        logger.debug("Rejected: %s %s", e.key, e.params)
        if operation is not None and category is not None:
            try:
                record_log(LogType.ALERT, operation, category, {"key": e.key, **e.params})
            except sqlite3.Error as log_error:
                logger.warning("Could not record alert: %s", log_error)
        fail(e.key, **e.params)
    except InvalidMonetaryAmount as e:
        fail("INVALID_MONETARY_AMOUNT", value=e.value)
    except sqlite3.Error as e:
        logger.debug("Database error", exc_info=True)
        fail("DATABASE_ERROR", error=e)


def format_money(value: str | None, profile: dict[str, Any] | None = None) -> str:
    """Render a stored amount with the profile currency, or a mask when values are hidden."""
    if profile is None:
        profile = get_profile()
    if profile.get("hide_values"):
        return HIDDEN_AMOUNT

    try:
        symbol = CURRENCY_SYMBOLS[Currency(profile.get("currency"))]
    except ValueError:
        symbol = ""
    amount = value or "0.00"
    if amount.startswith("-"):
        return f"-{symbol} {amount[1:]}".strip()
    return f"{symbol} {amount}".strip()


def colored_money(value: str | None, profile: dict[str, Any] | None = None) -> str:
    """Like format_money, red for negative amounts."""
    rendered = format_money(value, profile)
    if value and value.startswith("-") and rendered != HIDDEN_AMOUNT:
        return f"[red]{rendered}[/red]"
    return rendered


def display_date(iso_date: str, profile: dict[str, Any] | None = None) -> str:
    if profile is None:
        profile = get_profile()
    return format_date(iso_date, profile.get("date_format", "DD/MM/YYYY"))


def yes_no(flag: Any) -> str:
    return "✓" if flag else "[dim]-[/dim]"


def dash(value: Any) -> str:
    return "[dim]-[/dim]" if value is None or value == "" else str(value)
