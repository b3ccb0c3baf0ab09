"""Transaction persistence with incremental account and credit card balances.

Every create, update and delete runs inside one SQLite transaction opened
with BEGIN IMMEDIATE: the transaction row, its tags, the owner balance and the
audit entry are written together or not at all.
"""

import sqlite3
from pathlib import Path
from typing import Any

from moneta.domain.errors import BalanceInvariantViolation, InvalidMonetaryAmount, LedgerError
from moneta.domain.ledger import BalanceAdjustment, TransactionSnapshot, plan_create, plan_delete, plan_update
from moneta.domain.models import LogCategory, LogOperation, TransactionSource, TransactionType
from moneta.domain.monetary import apply_delta, format_amount, normalize_to_unsigned
from moneta.log import get_logger
from moneta.store.queries import connect, fetch_row, require_row, write_audit

logger = get_logger("ledger")

TRANSACTION_FIELDS = frozenset(
    {
        "value",
        "date",
        "transaction_type",
        "transaction_source",
        "observation",
        "is_installment",
        "total_months",
        "is_recurring",
        "payment_day",
        "active",
        "account_id",
        "credit_card_id",
        "category_id",
        "subcategory_id",
    }
)

FILTER_COLUMNS = frozenset(
    {
        "account_id",
        "credit_card_id",
        "category_id",
        "subcategory_id",
        "transaction_type",
        "transaction_source",
        "active",
    }
)

_BALANCE_TABLES = {
    TransactionSource.ACCOUNT: "accounts",
    TransactionSource.CREDIT_CARD: "credit_cards",
}

REJECTIONS = (LedgerError, InvalidMonetaryAmount, BalanceInvariantViolation)


def _log_rejection(operation: LogOperation, error: Exception) -> None:
    if isinstance(error, LedgerError):
        logger.warning("Transaction %s rejected: %s %s", operation.value, error.key, error.params)
    else:
        logger.warning("Transaction %s rejected: %s", operation.value, error)


def _normalize_fields(data: dict[str, Any]) -> dict[str, Any]:
    unknown = set(data) - TRANSACTION_FIELDS
    if unknown:
        raise ValueError(f"Unknown field(s): {', '.join(sorted(unknown))}")

    fields = dict(data)
    if "value" in fields:
        fields["value"] = format_amount(normalize_to_unsigned(fields["value"]))
    if "transaction_type" in fields:
        fields["transaction_type"] = TransactionType(fields["transaction_type"]).value
    if "transaction_source" in fields:
        fields["transaction_source"] = TransactionSource(fields["transaction_source"]).value
    return fields


def _normalize_tag_ids(tags: list[int] | None) -> list[int] | None:
    if tags is None:
        return None
    return list(dict.fromkeys(int(tag) for tag in tags))


def _validate_owner(conn: sqlite3.Connection, row: dict[str, Any]) -> None:
    if row["transaction_source"] == TransactionSource.ACCOUNT.value:
        account_id = row.get("account_id")
        if account_id is None or fetch_row(conn, "accounts", account_id) is None:
            raise LedgerError("ACCOUNT_NOT_FOUND", id=account_id)
    else:
        card_id = row.get("credit_card_id")
        if card_id is None or fetch_row(conn, "credit_cards", card_id) is None:
            raise LedgerError("CREDIT_CARD_NOT_FOUND", id=card_id)


def _validate_classification(
    conn: sqlite3.Connection, row: dict[str, Any], check_category: bool, check_subcategory: bool
) -> None:
    category_id = row.get("category_id")
    subcategory_id = row.get("subcategory_id")

    if not category_id and not subcategory_id:
        raise LedgerError("CATEGORY_OR_SUBCATEGORY_REQUIRED")

    if check_category and category_id:
        category = fetch_row(conn, "categories", category_id)
        if category is None or not category["active"]:
            raise LedgerError("CATEGORY_NOT_FOUND_OR_INACTIVE", id=category_id)

    if check_subcategory and subcategory_id:
        subcategory = fetch_row(conn, "subcategories", subcategory_id)
        if subcategory is None or not subcategory["active"]:
            raise LedgerError("SUBCATEGORY_NOT_FOUND_OR_INACTIVE", id=subcategory_id)


def _validate_tags(conn: sqlite3.Connection, tag_ids: list[int]) -> None:
    if not tag_ids:
        return
    placeholders = ", ".join("?" for _ in tag_ids)
    rows = conn.execute(f"SELECT id FROM tags WHERE active = 1 AND id IN ({placeholders})", tag_ids).fetchall()
    found = {row[0] for row in rows}
    missing = [tag_id for tag_id in tag_ids if tag_id not in found]
    if missing:
        raise LedgerError("TAG_NOT_FOUND", id=", ".join(str(tag_id) for tag_id in missing))


def _apply_adjustments(conn: sqlite3.Connection, adjustments: list[BalanceAdjustment]) -> None:
    for adjustment in adjustments:
        table = _BALANCE_TABLES[adjustment.target]
        owner = fetch_row(conn, table, adjustment.target_id)
        if owner is None:
            raise BalanceInvariantViolation(f"{adjustment.target.value} {adjustment.target_id} not found")

        new_balance = apply_delta(owner["balance"], adjustment.delta)
        conn.execute(
            f"UPDATE {table} SET balance = ?, updated_at = datetime('now') WHERE id = ?",
            (new_balance, adjustment.target_id),
        )
        logger.debug(
            "Applied %s to %s %s: %s -> %s",
            adjustment.delta,
            adjustment.target.value,
            adjustment.target_id,
            owner["balance"],
            new_balance,
        )


def _replace_tags(conn: sqlite3.Connection, transaction_id: int, tag_ids: list[int]) -> None:
    conn.execute("DELETE FROM transaction_tags WHERE transaction_id = ?", (transaction_id,))
    conn.executemany(
        "INSERT INTO transaction_tags (transaction_id, tag_id) VALUES (?, ?)",
        [(transaction_id, tag_id) for tag_id in tag_ids],
    )


def _tags_for(conn: sqlite3.Connection, transaction_ids: list[int]) -> dict[int, list[int]]:
    if not transaction_ids:
        return {}
    placeholders = ", ".join("?" for _ in transaction_ids)
    rows = conn.execute(
        f"SELECT transaction_id, tag_id FROM transaction_tags WHERE transaction_id IN ({placeholders}) ORDER BY tag_id",
        transaction_ids,
    ).fetchall()
    tags: dict[int, list[int]] = {}
    for transaction_id, tag_id in rows:
        tags.setdefault(transaction_id, []).append(tag_id)
    return tags


def _with_tags(conn: sqlite3.Connection, row: dict[str, Any]) -> dict[str, Any]:
    return {**row, "tags": _tags_for(conn, [row["id"]]).get(row["id"], [])}


def create_transaction(data: dict[str, Any], db_path: Path | None = None) -> dict[str, Any]:
    """Record a transaction and move its owner's balance.

    Args:
        data: Transaction fields. Required: value, date, transaction_type,
            transaction_source, and account_id or credit_card_id matching the
            source. Optional "tags" is a list of tag ids.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        The created transaction, with its tag ids under "tags".

    Raises:
        InvalidMonetaryAmount: If the value is not a valid amount.
        LedgerError: If an owner, category, subcategory or tag is missing.
        sqlite3.Error: If database operation fails.
    """
    data = dict(data)
    tag_ids = _normalize_tag_ids(data.pop("tags", None))

    with connect(db_path) as conn:
        try:
            fields = _normalize_fields(data)

            # Only the owner matching the source is kept
            if fields["transaction_source"] == TransactionSource.ACCOUNT.value:
                fields["credit_card_id"] = None
            else:
                fields["account_id"] = None

            conn.execute("BEGIN IMMEDIATE")
            _validate_owner(conn, fields)
            _validate_classification(conn, fields, check_category=True, check_subcategory=True)
            if tag_ids is not None:
                _validate_tags(conn, tag_ids)

            columns = ", ".join(fields)
            placeholders = ", ".join("?" for _ in fields)
            cursor = conn.execute(
                f"INSERT INTO transactions ({columns}) VALUES ({placeholders})", list(fields.values())
            )
            created = require_row(conn, "transactions", cursor.lastrowid)

            _apply_adjustments(conn, plan_create(TransactionSnapshot.from_row(created)))
            if tag_ids:
                _replace_tags(conn, created["id"], tag_ids)

            write_audit(conn, LogOperation.CREATE, LogCategory.TRANSACTION, None, created)
            result = _with_tags(conn, created)
            conn.commit()
            return result
        except REJECTIONS as e:
            conn.rollback()
            _log_rejection(LogOperation.CREATE, e)
            raise
        except Exception:
            conn.rollback()
            raise


def update_transaction(transaction_id: int, changes: dict[str, Any], db_path: Path | None = None) -> dict[str, Any]:
    """Change a transaction and move balances from the old version to the new one.

    Args:
        transaction_id: Transaction id.
        changes: Fields to overwrite. Switching transaction_source clears the
            other owner id. "tags", when present, replaces the tag set.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        The updated transaction, with its tag ids under "tags".

    Raises:
        InvalidMonetaryAmount: If the new value is not a valid amount.
        LedgerError: TRANSACTION_NOT_FOUND or a validation failure.
        sqlite3.Error: If database operation fails.
    """
    changes = dict(changes)
    tag_ids = _normalize_tag_ids(changes.pop("tags", None))

    with connect(db_path) as conn:
        try:
            changes = _normalize_fields(changes)

            conn.execute("BEGIN IMMEDIATE")
            current = require_row(conn, "transactions", transaction_id)

            merged = {**current, **changes}
            if merged["transaction_source"] == TransactionSource.ACCOUNT.value:
                merged["credit_card_id"] = None
            else:
                merged["account_id"] = None
            # Owner columns always come from the merged row, never straight from the caller
            for owner_column in ("account_id", "credit_card_id"):
                if owner_column in changes or merged[owner_column] != current[owner_column]:
                    changes[owner_column] = merged[owner_column]

            _validate_owner(conn, merged)
            _validate_classification(
                conn,
                merged,
                check_category="category_id" in changes,
                check_subcategory="subcategory_id" in changes,
            )
            if tag_ids is not None:
                _validate_tags(conn, tag_ids)

            if changes:
                assignments = ", ".join(f"{column} = ?" for column in changes)
                conn.execute(
                    f"UPDATE transactions SET {assignments}, updated_at = datetime('now') WHERE id = ?",
                    [*changes.values(), transaction_id],
                )
            updated = require_row(conn, "transactions", transaction_id)

            _apply_adjustments(
                conn,
                plan_update(TransactionSnapshot.from_row(current), TransactionSnapshot.from_row(updated)),
            )
            if tag_ids is not None:
                _replace_tags(conn, transaction_id, tag_ids)

            write_audit(conn, LogOperation.UPDATE, LogCategory.TRANSACTION, current, updated)
            result = _with_tags(conn, updated)
            conn.commit()
            return result
        except REJECTIONS as e:
            conn.rollback()
            _log_rejection(LogOperation.UPDATE, e)
            raise
        except Exception:
            conn.rollback()
            raise


def delete_transaction(transaction_id: int, db_path: Path | None = None) -> None:
    """Delete a transaction and reverse its effect on its owner's balance.

    Raises:
        LedgerError: TRANSACTION_NOT_FOUND.
        sqlite3.Error: If database operation fails.
    """
    with connect(db_path) as conn:
        try:
            conn.execute("BEGIN IMMEDIATE")
            existing = require_row(conn, "transactions", transaction_id)

            conn.execute("DELETE FROM transaction_tags WHERE transaction_id = ?", (transaction_id,))
            conn.execute("DELETE FROM transactions WHERE id = ?", (transaction_id,))
            _apply_adjustments(conn, plan_delete(TransactionSnapshot.from_row(existing)))

            write_audit(conn, LogOperation.DELETE, LogCategory.TRANSACTION, existing, None)
            conn.commit()
        except REJECTIONS as e:
            conn.rollback()
            _log_rejection(LogOperation.DELETE, e)
            raise
        except Exception:
            conn.rollback()
            raise


def get_transaction(transaction_id: int, db_path: Path | None = None) -> dict[str, Any] | None:
    """Get a transaction with its tag ids, or None if it doesn't exist."""
    with connect(db_path) as conn:
        row = fetch_row(conn, "transactions", transaction_id)
        return _with_tags(conn, row) if row else None


def _build_filters(filters: dict[str, Any] | None) -> tuple[str, list[Any]]:
    clauses: list[str] = []
    params: list[Any] = []

    for key, value in (filters or {}).items():
        if value is None:
            continue
        if key in FILTER_COLUMNS:
            values = value if isinstance(value, (list, tuple, set)) else [value]
            values = [v.value if hasattr(v, "value") else v for v in values]
            clauses.append(f"{key} IN ({', '.join('?' for _ in values)})")
            params.extend(values)
        elif key == "tag_id":
            clauses.append("id IN (SELECT transaction_id FROM transaction_tags WHERE tag_id = ?)")
            params.append(value)
        elif key == "since":
            clauses.append("date >= ?")
            params.append(value)
        elif key == "until":
            clauses.append("date < ?")
            params.append(value)
        else:
            raise ValueError(f"Unknown filter: {key}")

    where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
    return where, params


def list_transactions(
    filters: dict[str, Any] | None = None,
    limit: int | None = None,
    offset: int = 0,
    newest_first: bool = True,
    db_path: Path | None = None,
) -> list[dict[str, Any]]:
    """List transactions with their tag ids.

    Args:
        filters: Optional filters. Column filters (account_id, credit_card_id,
            category_id, subcategory_id, transaction_type, transaction_source,
            active) accept one value or a list. Also tag_id, since (inclusive
            YYYY-MM-DD) and until (exclusive).
        limit: Maximum number of transactions to return. If None, returns all.
        offset: Number of transactions to skip.
        newest_first: Order by date descending (default) or ascending.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        List of transaction dictionaries.

    Raises:
        ValueError: If a filter name is unknown.
    """
    where, params = _build_filters(filters)
    order = "DESC" if newest_first else "ASC"
    query = f"SELECT * FROM transactions{where} ORDER BY date {order}, id {order}"
    if limit is not None:
        query += " LIMIT ? OFFSET ?"
        params.extend([limit, offset])
    elif offset:
        query += " LIMIT -1 OFFSET ?"
        params.append(offset)

    with connect(db_path) as conn:
        rows = [dict(row) for row in conn.execute(query, params).fetchall()]
        tags = _tags_for(conn, [row["id"] for row in rows])

    for row in rows:
        row["tags"] = tags.get(row["id"], [])
    return rows


def count_transactions(filters: dict[str, Any] | None = None, db_path: Path | None = None) -> int:
    """Count transactions matching the same filters list_transactions accepts."""
    where, params = _build_filters(filters)
    with connect(db_path) as conn:
        return conn.execute(f"SELECT COUNT(*) FROM transactions{where}", params).fetchone()[0]
