"""Profile commands: show and update personal settings."""

import sys
from typing import Any

from moneta.commands.common import console, fail, parse_choice, success
from moneta.config import get_config_path, get_language, get_profile, update_profile
from moneta.domain.models import Currency, DateFormat
from moneta.i18n import resolve_language


def show_command() -> None:
    """Show the profile and the language messages are printed in."""
    profile = get_profile()

    console.print("[bold cyan]Profile[/bold cyan]")
    console.print(f"  Name: {profile['name'] or '[dim]-[/dim]'}")
    console.print(f"  Language: {profile['language'] or '[dim]auto[/dim]'} [dim](using {get_language().value})[/dim]")
    console.print(f"  Currency: {profile['currency']}")
    console.print(f"  Date format: {profile['date_format']}")
    console.print(f"  Hide values: {'yes' if profile['hide_values'] else 'no'}")
    console.print(f"[dim]Config: {get_config_path()}[/dim]")


def update_command(
    name: str | None = None,
    language: str | None = None,
    currency: str | None = None,
    date_format: str | None = None,
    hide_values: bool | None = None,
) -> None:
    """Update profile settings. Only the given options change."""
    changes: dict[str, Any] = {}
    if name is not None:
        changes["name"] = name
    if language is not None:
        # Store the supported tag the preference resolves to
        changes["language"] = resolve_language(language).value if language else ""
    if currency is not None:
        changes["currency"] = parse_choice(Currency, currency.upper(), "currency").value
    if date_format is not None:
        changes["date_format"] = parse_choice(DateFormat, date_format.upper(), "date format").value
    if hide_values is not None:
        changes["hide_values"] = hide_values

    if not changes:
        fail("NOTHING_TO_UPDATE")

    try:
        update_profile(changes)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)

    success("PROFILE_UPDATED")
