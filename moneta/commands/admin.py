"""Admin commands for init, backup and the audit log."""

import json
import shutil
import sqlite3
import sys
from datetime import datetime
from pathlib import Path

from rich.table import Table

from moneta.commands.common import console, fail, message, parse_choice, reporting_errors, require_database, success
from moneta.config import create_default_config, get_config_path
from moneta.dates import normalize_date
from moneta.domain.models import LogCategory
from moneta.store.queries import list_logs, purge_logs
from moneta.store.schema import get_db_path, get_xdg_data_home, init_database


def backup_command(
    output_dir: str | None = None,
) -> None:
    """Backup database and configuration files."""
    db_path = get_db_path()
    config_path = get_config_path()

    if not db_path.exists():
        console.print("[red]Database not found. Run 'moneta init' first.[/red]", style="bold")
        sys.exit(1)

    if output_dir:
        backup_dir = Path(output_dir).expanduser()
    else:
        backup_dir = get_xdg_data_home() / "moneta" / "backups"

    backup_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    db_backup = backup_dir / f"moneta_{timestamp}.db"
    config_backup = backup_dir / f"config_{timestamp}.toml"

    try:
        source = sqlite3.connect(db_path)
        target = sqlite3.connect(db_backup)
        try:
            source.backup(target)
        finally:
            target.close()
            source.close()
        console.print(f"[green]✓[/green] Database backed up to: {db_backup}")

        if config_path.exists():
            shutil.copy2(config_path, config_backup)
            console.print(f"[green]✓[/green] Config backed up to: {config_backup}")
        else:
            console.print("[dim]No config file to back up[/dim]")

        console.print("\n[green]Backup complete![/green]", style="bold")
        console.print(f"[dim]Backup directory: {backup_dir}[/dim]")

    except sqlite3.Error as e:
        console.print(f"[red]Backup failed: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Backup failed: {e}[/red]", style="bold")
        sys.exit(1)


def run_migration(db_path: Path) -> None:
    """Bring an existing database up to the current schema."""
    console.print(f"[cyan]Updating schema of {db_path}...[/cyan]")
    init_database(db_path)
    console.print("[green]✓[/green] Schema is up to date")


def run_full_init(db_path: Path, config_path: Path) -> None:
    """Initialize new database and config."""
    if db_path.exists():
        db_path.unlink()

    console.print(f"[cyan]Initializing database at {db_path}...[/cyan]")
    init_database(db_path)
    console.print("[green]✓[/green] Database initialized")

    console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
    create_default_config(config_path)
    console.print("[green]✓[/green] Config file created (permissions: 600)")

    console.print("\n[green]Initialization complete![/green]", style="bold")
    console.print(f"[dim]Database: {db_path}[/dim]")
    console.print(f"[dim]Config: {config_path}[/dim]")


def init_command(force: bool = False, migrate: bool = False) -> None:
    """Initialize moneta database and configuration."""
    db_path = get_db_path()
    config_path = get_config_path()

    db_exists = db_path.exists()
    config_exists = config_path.exists()

    try:
        if migrate:
            if not db_exists:
                console.print("[red]No database found to migrate[/red]", style="bold")
                console.print(f"[dim]Expected location: {db_path}[/dim]")
                sys.exit(1)
            run_migration(db_path)
            return

        if not force and (db_exists or config_exists):
            console.print("[red]Initialization failed:[/red]", style="bold")
            if db_exists:
                console.print(f"  Database already exists: {db_path}")
            if config_exists:
                console.print(f"  Config already exists: {config_path}")
            console.print("\n[yellow]Use 'moneta init --force' to overwrite[/yellow]")
            console.print("[yellow]Or 'moneta init --migrate' to update database schema only[/yellow]")
            sys.exit(1)

        run_full_init(db_path, config_path)

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)


def logs_command(limit: int = 50, all: bool = False, category: str | None = None) -> None:
    """List audit log entries, newest first."""
    require_database()
    parsed_category = parse_choice(LogCategory, category, "category") if category else None

    with reporting_errors():
        logs = list_logs(None if all else limit, parsed_category)

    if not logs:
        console.print(f"[yellow]{message('NO_RECORDS_FOUND')}[/yellow]")
        return

    table = Table(title=f"Audit log (showing {len(logs)})")
    table.add_column("When", style="cyan")
    table.add_column("Type")
    table.add_column("Operation", style="magenta")
    table.add_column("Category")
    table.add_column("Detail", overflow="fold")

    type_styles = {"success": "green", "alert": "yellow", "error": "red"}
    for entry in logs:
        style = type_styles.get(entry["type"], "white")
        table.add_row(
            entry["created_at"],
            f"[{style}]{entry['type']}[/{style}]",
            entry["operation"],
            entry["category"],
            json.dumps(entry["detail"], ensure_ascii=False),
        )

    console.print(table)


def purge_logs_command(before: str) -> None:
    """Delete audit log entries created before a date."""
    require_database()

    try:
        cutoff = normalize_date(before)
    except ValueError:
        fail("INVALID_DATE", value=before)

    with reporting_errors():
        count = purge_logs(cutoff)

    success("LOGS_PURGED", count=count)
