"""Database schema initialization and migrations."""

import os
import sqlite3
from pathlib import Path

TABLES = (
    """
    CREATE TABLE IF NOT EXISTS accounts (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        institution TEXT,
        type TEXT NOT NULL DEFAULT 'other',
        observation TEXT,
        balance TEXT NOT NULL DEFAULT '0.00',
        active INTEGER NOT NULL DEFAULT 1,
        created_at TEXT NOT NULL DEFAULT (datetime('now')),
        updated_at TEXT NOT NULL DEFAULT (datetime('now'))
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS credit_cards (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL UNIQUE,
        flag TEXT NOT NULL,
        observation TEXT,
        balance TEXT NOT NULL DEFAULT '0.00',
        credit_limit TEXT NOT NULL DEFAULT '0.00',
        account_id INTEGER REFERENCES accounts(id),
        active INTEGER NOT NULL DEFAULT 1,
        created_at TEXT NOT NULL DEFAULT (datetime('now')),
        updated_at TEXT NOT NULL DEFAULT (datetime('now'))
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS categories (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        type TEXT NOT NULL,
        color TEXT NOT NULL DEFAULT 'purple',
        active INTEGER NOT NULL DEFAULT 1,
        created_at TEXT NOT NULL DEFAULT (datetime('now')),
        updated_at TEXT NOT NULL DEFAULT (datetime('now'))
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS subcategories (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        category_id INTEGER NOT NULL REFERENCES categories(id) ON DELETE CASCADE,
        active INTEGER NOT NULL DEFAULT 1,
        created_at TEXT NOT NULL DEFAULT (datetime('now')),
        updated_at TEXT NOT NULL DEFAULT (datetime('now'))
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS tags (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL UNIQUE,
        active INTEGER NOT NULL DEFAULT 1,
        created_at TEXT NOT NULL DEFAULT (datetime('now')),
        updated_at TEXT NOT NULL DEFAULT (datetime('now'))
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS transactions (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        value TEXT NOT NULL,
        date TEXT NOT NULL,
        transaction_type TEXT NOT NULL,
        transaction_source TEXT NOT NULL,
        observation TEXT,
        is_installment INTEGER NOT NULL DEFAULT 0,
        total_months INTEGER,
        is_recurring INTEGER NOT NULL DEFAULT 0,
        payment_day INTEGER,
        active INTEGER NOT NULL DEFAULT 1,
        account_id INTEGER REFERENCES accounts(id),
        credit_card_id INTEGER REFERENCES credit_cards(id),
        category_id INTEGER REFERENCES categories(id),
        subcategory_id INTEGER REFERENCES subcategories(id),
        created_at TEXT NOT NULL DEFAULT (datetime('now')),
        updated_at TEXT NOT NULL DEFAULT (datetime('now'))
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS transaction_tags (
        transaction_id INTEGER NOT NULL REFERENCES transactions(id) ON DELETE CASCADE,
        tag_id INTEGER NOT NULL REFERENCES tags(id) ON DELETE CASCADE,
        PRIMARY KEY (transaction_id, tag_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS logs (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        type TEXT NOT NULL,
        operation TEXT NOT NULL DEFAULT 'create',
        category TEXT NOT NULL DEFAULT 'log',
        detail TEXT,
        created_at TEXT NOT NULL DEFAULT (datetime('now'))
    )
    """,
)

INDEXES = (
    "CREATE INDEX IF NOT EXISTS idx_txn_date ON transactions(date)",
    "CREATE INDEX IF NOT EXISTS idx_txn_account ON transactions(account_id)",
    "CREATE INDEX IF NOT EXISTS idx_txn_credit_card ON transactions(credit_card_id)",
    "CREATE INDEX IF NOT EXISTS idx_txn_category ON transactions(category_id)",
    "CREATE INDEX IF NOT EXISTS idx_txn_subcategory ON transactions(subcategory_id)",
    "CREATE INDEX IF NOT EXISTS idx_txn_tag_tag ON transaction_tags(tag_id)",
    "CREATE INDEX IF NOT EXISTS idx_subcategory_category ON subcategories(category_id)",
    "CREATE INDEX IF NOT EXISTS idx_log_created_at ON logs(created_at)",
)


def get_xdg_data_home() -> Path:
    """Get XDG data directory, with fallback to ~/.local/share."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


def get_db_path() -> Path:
    """Get the default database path (XDG compliant)."""
    return get_xdg_data_home() / "moneta" / "moneta.db"


def database_exists(db_path: Path | None = None) -> bool:
    """Check if the database file exists.

    Args:
        db_path: Path to check. If None, uses default location.

    Returns:
        True if database exists, False otherwise.
    """
    if db_path is None:
        db_path = get_db_path()
    return db_path.exists()


def init_database(db_path: Path | None = None) -> None:
    """Initialize the database with the required schema.

    Safe to run on an existing database: tables and indexes are only created
    when missing.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Raises:
        sqlite3.Error: If database initialization fails.
    """
    if db_path is None:
        db_path = get_db_path()

    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    try:
        for statement in TABLES:
            cursor.execute(statement)

        # Indexes after tables so every indexed column exists
        for statement in INDEXES:
            cursor.execute(statement)

        conn.commit()

    except sqlite3.Error:
        conn.rollback()
        raise
    finally:
        conn.close()
