"""Database query functions for accounts, credit cards, categories, tags and logs."""

import json
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from moneta.domain.audit import build_detail, should_persist
from moneta.domain.errors import LedgerError
from moneta.domain.models import (
    AccountType,
    CardFlag,
    CategoryColor,
    LogCategory,
    LogOperation,
    LogType,
    TransactionType,
)
from moneta.domain.monetary import format_amount, normalize_to_unsigned
from moneta.log import get_logger
from moneta.store.schema import get_db_path

logger = get_logger("store")

NOT_FOUND_KEYS = {
    "accounts": "ACCOUNT_NOT_FOUND",
    "credit_cards": "CREDIT_CARD_NOT_FOUND",
    "categories": "CATEGORY_NOT_FOUND",
    "subcategories": "SUBCATEGORY_NOT_FOUND",
    "tags": "TAG_NOT_FOUND",
    "transactions": "TRANSACTION_NOT_FOUND",
}

LOG_CATEGORIES = {
    "accounts": LogCategory.ACCOUNT,
    "credit_cards": LogCategory.CREDIT_CARD,
    "categories": LogCategory.CATEGORY,
    "subcategories": LogCategory.SUBCATEGORY,
    "tags": LogCategory.TAG,
    "transactions": LogCategory.TRANSACTION,
}

ACCOUNT_FIELDS = frozenset({"name", "institution", "type", "observation", "balance", "active"})
CREDIT_CARD_FIELDS = frozenset({"name", "flag", "observation", "balance", "credit_limit", "account_id", "active"})
CATEGORY_FIELDS = frozenset({"name", "type", "color", "active"})
SUBCATEGORY_FIELDS = frozenset({"name", "category_id", "active"})
TAG_FIELDS = frozenset({"name", "active"})


@contextmanager
def connect(db_path: Path | None = None) -> Iterator[sqlite3.Connection]:
    """Open a database connection with row factory and foreign keys enabled.

    The connection is closed on exit. Anything not committed is discarded.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Yields:
        Database connection with row_factory configured.
    """
    if db_path is None:
        db_path = get_db_path()
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
    finally:
        conn.close()


def fetch_row(conn: sqlite3.Connection, table: str, row_id: int) -> dict[str, Any] | None:
    """Fetch one row by id from a known table.

    Args:
        conn: Open connection.
        table: Table name; must be one of the entity tables.
        row_id: Row id.

    Returns:
        Row as a dictionary, or None if it doesn't exist.
    """
    if table not in NOT_FOUND_KEYS:
        raise ValueError(f"Unknown table: {table}")
    row = conn.execute(f"SELECT * FROM {table} WHERE id = ?", (row_id,)).fetchone()
    return dict(row) if row else None


def require_row(conn: sqlite3.Connection, table: str, row_id: int) -> dict[str, Any]:
    """Fetch one row by id, raising the table's not-found error if missing."""
    row = fetch_row(conn, table, row_id)
    if row is None:
        raise LedgerError(NOT_FOUND_KEYS[table], id=row_id)
    return row


def write_audit(
    conn: sqlite3.Connection,
    operation: LogOperation,
    category: LogCategory,
    before: dict[str, Any] | None,
    after: dict[str, Any] | None,
    log_type: LogType = LogType.SUCCESS,
) -> None:
    """Write an audit entry on an open connection, if the audit rules keep it.

    The caller commits.
    """
    detail = build_detail(before, after)
    if not should_persist(log_type, operation, detail):
        return
    subject = after or before or {}
    if "id" in subject:
        detail = {"id": subject["id"], **{field: change for field, change in detail.items() if field != "id"}}
    conn.execute(
        "INSERT INTO logs (type, operation, category, detail) VALUES (?, ?, ?, ?)",
        (
            LogType(log_type).value,
            LogOperation(operation).value,
            LogCategory(category).value,
            json.dumps(detail, default=str),
        ),
    )


def _clean_changes(changes: dict[str, Any], allowed: frozenset[str]) -> dict[str, Any]:
    unknown = set(changes) - allowed
    if unknown:
        raise ValueError(f"Unknown field(s): {', '.join(sorted(unknown))}")
    return dict(changes)


def _ensure_name_free(conn: sqlite3.Connection, table: str, name: str, exclude_id: int | None = None) -> None:
    row = conn.execute(
        f"SELECT id FROM {table} WHERE name = ? AND id != ?",
        (name, exclude_id if exclude_id is not None else -1),
    ).fetchone()
    if row:
        raise LedgerError("DATA_ALREADY_EXISTS", name=name)


def _ensure_unused(conn: sqlite3.Connection, where: str, params: tuple[Any, ...]) -> None:
    count = conn.execute(f"SELECT COUNT(*) FROM transactions WHERE {where}", params).fetchone()[0]
    if count:
        raise LedgerError("RESOURCE_IN_USE", count=count)


def _insert(conn: sqlite3.Connection, table: str, values: dict[str, Any]) -> dict[str, Any]:
    columns = ", ".join(values)
    placeholders = ", ".join("?" for _ in values)
    cursor = conn.execute(f"INSERT INTO {table} ({columns}) VALUES ({placeholders})", list(values.values()))
    created = require_row(conn, table, cursor.lastrowid)
    write_audit(conn, LogOperation.CREATE, LOG_CATEGORIES[table], None, created)
    return created


def _update(conn: sqlite3.Connection, table: str, row_id: int, changes: dict[str, Any]) -> dict[str, Any]:
    before = require_row(conn, table, row_id)
    if changes:
        assignments = ", ".join(f"{column} = ?" for column in changes)
        conn.execute(
            f"UPDATE {table} SET {assignments}, updated_at = datetime('now') WHERE id = ?",
            [*changes.values(), row_id],
        )
    after = require_row(conn, table, row_id)
    write_audit(conn, LogOperation.UPDATE, LOG_CATEGORIES[table], before, after)
    return after


def _delete(conn: sqlite3.Connection, table: str, row_id: int) -> None:
    before = require_row(conn, table, row_id)
    conn.execute(f"DELETE FROM {table} WHERE id = ?", (row_id,))
    write_audit(conn, LogOperation.DELETE, LOG_CATEGORIES[table], before, None)


def _list(conn: sqlite3.Connection, query: str, params: list[Any]) -> list[dict[str, Any]]:
    return [dict(row) for row in conn.execute(query, params).fetchall()]


# Accounts


def add_account(
    name: str,
    institution: str | None = None,
    account_type: AccountType = AccountType.OTHER,
    observation: str | None = None,
    balance: str = "0.00",
    db_path: Path | None = None,
) -> dict[str, Any]:
    """Create a bank account.

    Args:
        name: Account name.
        institution: Optional bank or institution name.
        account_type: Kind of account.
        observation: Optional free text.
        balance: Opening balance; may be negative.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        The created account.

    Raises:
        InvalidMonetaryAmount: If the balance is not a number.
        sqlite3.Error: If database operation fails.
    """
    values = {
        "name": name,
        "institution": institution,
        "type": AccountType(account_type).value,
        "observation": observation,
        "balance": format_amount(balance),
    }
    with connect(db_path) as conn:
        try:
            created = _insert(conn, "accounts", values)
            conn.commit()
            return created
        except sqlite3.Error:
            conn.rollback()
            raise


def get_account(account_id: int, db_path: Path | None = None) -> dict[str, Any] | None:
    """Get an account by id, or None if it doesn't exist."""
    with connect(db_path) as conn:
        return fetch_row(conn, "accounts", account_id)


def list_accounts(active_only: bool = False, db_path: Path | None = None) -> list[dict[str, Any]]:
    """List accounts ordered by name.

    Args:
        active_only: If True, skip deactivated accounts.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        List of account dictionaries.
    """
    query = "SELECT * FROM accounts"
    if active_only:
        query += " WHERE active = 1"
    query += " ORDER BY name COLLATE NOCASE, id"
    with connect(db_path) as conn:
        return _list(conn, query, [])


def update_account(account_id: int, changes: dict[str, Any], db_path: Path | None = None) -> dict[str, Any]:
    """Update account fields.

    Args:
        account_id: Account id.
        changes: Fields to overwrite (name, institution, type, observation, balance, active).
        db_path: Path to the database file. If None, uses default location.

    Returns:
        The updated account.

    Raises:
        LedgerError: ACCOUNT_NOT_FOUND.
        ValueError: If a field is unknown or a value is invalid.
    """
    changes = _clean_changes(changes, ACCOUNT_FIELDS)
    if "type" in changes:
        changes["type"] = AccountType(changes["type"]).value
    if "balance" in changes:
        changes["balance"] = format_amount(changes["balance"])

    with connect(db_path) as conn:
        try:
            updated = _update(conn, "accounts", account_id, changes)
            conn.commit()
            return updated
        except sqlite3.Error:
            conn.rollback()
            raise


def delete_account(account_id: int, db_path: Path | None = None) -> None:
    """Delete an account that no transaction references.

    Credit cards linked to the account are unlinked.

    Raises:
        LedgerError: ACCOUNT_NOT_FOUND or RESOURCE_IN_USE.
    """
    with connect(db_path) as conn:
        try:
            require_row(conn, "accounts", account_id)
            _ensure_unused(conn, "account_id = ?", (account_id,))
            conn.execute("UPDATE credit_cards SET account_id = NULL WHERE account_id = ?", (account_id,))
            _delete(conn, "accounts", account_id)
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise


# Credit cards


def _ensure_account_exists(conn: sqlite3.Connection, account_id: int | None) -> None:
    if account_id is not None:
        require_row(conn, "accounts", account_id)


def add_credit_card(
    name: str,
    flag: CardFlag,
    credit_limit: str = "0.00",
    account_id: int | None = None,
    observation: str | None = None,
    balance: str = "0.00",
    db_path: Path | None = None,
) -> dict[str, Any]:
    """Create a credit card.

    Args:
        name: Card name; unique.
        flag: Card network.
        credit_limit: Credit limit (unsigned).
        account_id: Optional account the card bill is paid from.
        observation: Optional free text.
        balance: Amount currently owed.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        The created credit card.

    Raises:
        LedgerError: DATA_ALREADY_EXISTS or ACCOUNT_NOT_FOUND.
        InvalidMonetaryAmount: If the limit or balance is invalid.
    """
    values = {
        "name": name,
        "flag": CardFlag(flag).value,
        "credit_limit": format_amount(normalize_to_unsigned(credit_limit)),
        "account_id": account_id,
        "observation": observation,
        "balance": format_amount(balance),
    }
    with connect(db_path) as conn:
        try:
            _ensure_name_free(conn, "credit_cards", name)
            _ensure_account_exists(conn, account_id)
            created = _insert(conn, "credit_cards", values)
            conn.commit()
            return created
        except sqlite3.Error:
            conn.rollback()
            raise


def get_credit_card(card_id: int, db_path: Path | None = None) -> dict[str, Any] | None:
    """Get a credit card by id, or None if it doesn't exist."""
    with connect(db_path) as conn:
        return fetch_row(conn, "credit_cards", card_id)


def list_credit_cards(active_only: bool = False, db_path: Path | None = None) -> list[dict[str, Any]]:
    """List credit cards ordered by name."""
    query = "SELECT * FROM credit_cards"
    if active_only:
        query += " WHERE active = 1"
    query += " ORDER BY name COLLATE NOCASE, id"
    with connect(db_path) as conn:
        return _list(conn, query, [])


def update_credit_card(card_id: int, changes: dict[str, Any], db_path: Path | None = None) -> dict[str, Any]:
    """Update credit card fields.

    Raises:
        LedgerError: CREDIT_CARD_NOT_FOUND, ACCOUNT_NOT_FOUND or DATA_ALREADY_EXISTS.
    """
    changes = _clean_changes(changes, CREDIT_CARD_FIELDS)
    if "flag" in changes:
        changes["flag"] = CardFlag(changes["flag"]).value
    if "credit_limit" in changes:
        changes["credit_limit"] = format_amount(normalize_to_unsigned(changes["credit_limit"]))
    if "balance" in changes:
        changes["balance"] = format_amount(changes["balance"])

    with connect(db_path) as conn:
        try:
            require_row(conn, "credit_cards", card_id)
            if "name" in changes:
                _ensure_name_free(conn, "credit_cards", changes["name"], exclude_id=card_id)
            if "account_id" in changes:
                _ensure_account_exists(conn, changes["account_id"])
            updated = _update(conn, "credit_cards", card_id, changes)
            conn.commit()
            return updated
        except sqlite3.Error:
            conn.rollback()
            raise


def delete_credit_card(card_id: int, db_path: Path | None = None) -> None:
    """Delete a credit card that no transaction references.

    Raises:
        LedgerError: CREDIT_CARD_NOT_FOUND or RESOURCE_IN_USE.
    """
    with connect(db_path) as conn:
        try:
            require_row(conn, "credit_cards", card_id)
            _ensure_unused(conn, "credit_card_id = ?", (card_id,))
            _delete(conn, "credit_cards", card_id)
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise


# Categories and subcategories


def add_category(
    name: str,
    category_type: TransactionType,
    color: CategoryColor = CategoryColor.PURPLE,
    db_path: Path | None = None,
) -> dict[str, Any]:
    """Create a category.

    Args:
        name: Category name.
        category_type: Whether it groups income or expenses.
        color: Display color.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        The created category.
    """
    values = {
        "name": name,
        "type": TransactionType(category_type).value,
        "color": CategoryColor(color).value,
    }
    with connect(db_path) as conn:
        try:
            created = _insert(conn, "categories", values)
            conn.commit()
            return created
        except sqlite3.Error:
            conn.rollback()
            raise


def get_category(category_id: int, db_path: Path | None = None) -> dict[str, Any] | None:
    """Get a category by id, or None if it doesn't exist."""
    with connect(db_path) as conn:
        return fetch_row(conn, "categories", category_id)


def list_categories(
    category_type: TransactionType | None = None, active_only: bool = False, db_path: Path | None = None
) -> list[dict[str, Any]]:
    """List categories ordered by name.

    Args:
        category_type: Optional income/expense filter.
        active_only: If True, skip deactivated categories.
        db_path: Path to the database file. If None, uses default location.
    """
    query = "SELECT * FROM categories WHERE 1 = 1"
    params: list[Any] = []
    if category_type is not None:
        query += " AND type = ?"
        params.append(TransactionType(category_type).value)
    if active_only:
        query += " AND active = 1"
    query += " ORDER BY name COLLATE NOCASE, id"
    with connect(db_path) as conn:
        return _list(conn, query, params)


def update_category(category_id: int, changes: dict[str, Any], db_path: Path | None = None) -> dict[str, Any]:
    """Update category fields.

    Raises:
        LedgerError: CATEGORY_NOT_FOUND.
    """
    changes = _clean_changes(changes, CATEGORY_FIELDS)
    if "type" in changes:
        changes["type"] = TransactionType(changes["type"]).value
    if "color" in changes:
        changes["color"] = CategoryColor(changes["color"]).value

    with connect(db_path) as conn:
        try:
            updated = _update(conn, "categories", category_id, changes)
            conn.commit()
            return updated
        except sqlite3.Error:
            conn.rollback()
            raise


def delete_category(category_id: int, db_path: Path | None = None) -> None:
    """Delete a category and its subcategories, if no transaction uses any of them.

    Raises:
        LedgerError: CATEGORY_NOT_FOUND or RESOURCE_IN_USE.
    """
    with connect(db_path) as conn:
        try:
            require_row(conn, "categories", category_id)
            _ensure_unused(
                conn,
                "category_id = ? OR subcategory_id IN (SELECT id FROM subcategories WHERE category_id = ?)",
                (category_id, category_id),
            )
            _delete(conn, "categories", category_id)
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise


def _ensure_active_category(conn: sqlite3.Connection, category_id: int) -> None:
    category = fetch_row(conn, "categories", category_id)
    if category is None or not category["active"]:
        raise LedgerError("CATEGORY_NOT_FOUND_OR_INACTIVE", id=category_id)


def add_subcategory(name: str, category_id: int, db_path: Path | None = None) -> dict[str, Any]:
    """Create a subcategory under an active category.

    Raises:
        LedgerError: CATEGORY_NOT_FOUND_OR_INACTIVE.
    """
    with connect(db_path) as conn:
        try:
            _ensure_active_category(conn, category_id)
            created = _insert(conn, "subcategories", {"name": name, "category_id": category_id})
            conn.commit()
            return created
        except sqlite3.Error:
            conn.rollback()
            raise


def get_subcategory(subcategory_id: int, db_path: Path | None = None) -> dict[str, Any] | None:
    """Get a subcategory by id, or None if it doesn't exist."""
    with connect(db_path) as conn:
        return fetch_row(conn, "subcategories", subcategory_id)


def list_subcategories(
    category_id: int | None = None, active_only: bool = False, db_path: Path | None = None
) -> list[dict[str, Any]]:
    """List subcategories with their category name."""
    query = (
        "SELECT s.*, c.name AS category_name FROM subcategories s "
        "JOIN categories c ON c.id = s.category_id WHERE 1 = 1"
    )
    params: list[Any] = []
    if category_id is not None:
        query += " AND s.category_id = ?"
        params.append(category_id)
    if active_only:
        query += " AND s.active = 1"
    query += " ORDER BY c.name COLLATE NOCASE, s.name COLLATE NOCASE, s.id"
    with connect(db_path) as conn:
        return _list(conn, query, params)


def update_subcategory(subcategory_id: int, changes: dict[str, Any], db_path: Path | None = None) -> dict[str, Any]:
    """Update subcategory fields. Moving it requires an active target category.

    Raises:
        LedgerError: SUBCATEGORY_NOT_FOUND or CATEGORY_NOT_FOUND_OR_INACTIVE.
    """
    changes = _clean_changes(changes, SUBCATEGORY_FIELDS)
    with connect(db_path) as conn:
        try:
            require_row(conn, "subcategories", subcategory_id)
            if "category_id" in changes:
                _ensure_active_category(conn, changes["category_id"])
            updated = _update(conn, "subcategories", subcategory_id, changes)
            conn.commit()
            return updated
        except sqlite3.Error:
            conn.rollback()
            raise


def delete_subcategory(subcategory_id: int, db_path: Path | None = None) -> None:
    """Delete a subcategory that no transaction references.

    Raises:
        LedgerError: SUBCATEGORY_NOT_FOUND or RESOURCE_IN_USE.
    """
    with connect(db_path) as conn:
        try:
            require_row(conn, "subcategories", subcategory_id)
            _ensure_unused(conn, "subcategory_id = ?", (subcategory_id,))
            _delete(conn, "subcategories", subcategory_id)
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise


# Tags


def add_tag(name: str, db_path: Path | None = None) -> dict[str, Any]:
    """Create a tag.

    Raises:
        LedgerError: DATA_ALREADY_EXISTS.
    """
    with connect(db_path) as conn:
        try:
            _ensure_name_free(conn, "tags", name)
            created = _insert(conn, "tags", {"name": name})
            conn.commit()
            return created
        except sqlite3.Error:
            conn.rollback()
            raise


def get_tag(tag_id: int, db_path: Path | None = None) -> dict[str, Any] | None:
    """Get a tag by id, or None if it doesn't exist."""
    with connect(db_path) as conn:
        return fetch_row(conn, "tags", tag_id)


def list_tags(active_only: bool = False, db_path: Path | None = None) -> list[dict[str, Any]]:
    """List tags ordered by name, with how many transactions carry each."""
    query = (
        "SELECT t.*, COUNT(tt.transaction_id) AS usage FROM tags t "
        "LEFT JOIN transaction_tags tt ON tt.tag_id = t.id"
    )
    if active_only:
        query += " WHERE t.active = 1"
    query += " GROUP BY t.id ORDER BY t.name COLLATE NOCASE, t.id"
    with connect(db_path) as conn:
        return _list(conn, query, [])


def update_tag(tag_id: int, changes: dict[str, Any], db_path: Path | None = None) -> dict[str, Any]:
    """Rename or (de)activate a tag.

    Raises:
        LedgerError: TAG_NOT_FOUND or DATA_ALREADY_EXISTS.
    """
    changes = _clean_changes(changes, TAG_FIELDS)
    with connect(db_path) as conn:
        try:
            require_row(conn, "tags", tag_id)
            if "name" in changes:
                _ensure_name_free(conn, "tags", changes["name"], exclude_id=tag_id)
            updated = _update(conn, "tags", tag_id, changes)
            conn.commit()
            return updated
        except sqlite3.Error:
            conn.rollback()
            raise


def delete_tag(tag_id: int, db_path: Path | None = None) -> None:
    """Delete a tag that no transaction carries.

    Raises:
        LedgerError: TAG_NOT_FOUND or RESOURCE_IN_USE.
    """
    with connect(db_path) as conn:
        try:
            require_row(conn, "tags", tag_id)
            _ensure_unused(conn, "id IN (SELECT transaction_id FROM transaction_tags WHERE tag_id = ?)", (tag_id,))
            _delete(conn, "tags", tag_id)
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise


# Audit log


def record_log(
    log_type: LogType,
    operation: LogOperation,
    category: LogCategory,
    detail: dict[str, Any],
    db_path: Path | None = None,
) -> bool:
    """Store a free-form audit entry (e.g. a rejected operation).

    Args:
        log_type: Severity of the entry.
        operation: Operation attempted.
        category: Entity kind involved.
        detail: JSON-serializable description.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        True if the entry was stored, False if the audit rules skipped it.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    if not should_persist(log_type, operation, detail):
        logger.debug("Skipped %s %s log for %s", log_type, operation, category)
        return False

    with connect(db_path) as conn:
        try:
            conn.execute(
                "INSERT INTO logs (type, operation, category, detail) VALUES (?, ?, ?, ?)",
                (
                    LogType(log_type).value,
                    LogOperation(operation).value,
                    LogCategory(category).value,
                    json.dumps(detail, default=str),
                ),
            )
            conn.commit()
            return True
        except sqlite3.Error:
            conn.rollback()
            raise


def list_logs(
    limit: int | None = 50, category: LogCategory | None = None, db_path: Path | None = None
) -> list[dict[str, Any]]:
    """List audit entries, newest first.

    Args:
        limit: Maximum entries to return. If None, returns all.
        category: Optional entity kind filter.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Log dictionaries with detail decoded from JSON.
    """
    query = "SELECT * FROM logs"
    params: list[Any] = []
    if category is not None:
        query += " WHERE category = ?"
        params.append(LogCategory(category).value)
    query += " ORDER BY created_at DESC, id DESC"
    if limit is not None:
        query += " LIMIT ?"
        params.append(limit)

    with connect(db_path) as conn:
        rows = _list(conn, query, params)

    for row in rows:
        row["detail"] = json.loads(row["detail"]) if row["detail"] else {}
    return rows


def purge_logs(before_date: str, db_path: Path | None = None) -> int:
    """Delete audit entries created before a date.

    Args:
        before_date: Cutoff date (YYYY-MM-DD); entries on that day are kept.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Number of entries deleted.
    """
    with connect(db_path) as conn:
        try:
            cursor = conn.execute("DELETE FROM logs WHERE created_at < ?", (before_date,))
            count = cursor.rowcount
            conn.commit()
            return count
        except sqlite3.Error:
            conn.rollback()
            raise
