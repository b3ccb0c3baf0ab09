"""Database store layer - provides persistence for the application.

This module re-exports all public database functions for easy importing.
"""

from moneta.store.ledger import (
    count_transactions,
    create_transaction,
    delete_transaction,
    get_transaction,
    list_transactions,
    update_transaction,
)
from moneta.store.queries import (
    add_account,
    add_category,
    add_credit_card,
    add_subcategory,
    add_tag,
    connect,
    delete_account,
    delete_category,
    delete_credit_card,
    delete_subcategory,
    delete_tag,
    get_account,
    get_category,
    get_credit_card,
    get_subcategory,
    get_tag,
    list_accounts,
    list_categories,
    list_credit_cards,
    list_logs,
    list_subcategories,
    list_tags,
    purge_logs,
    record_log,
    update_account,
    update_category,
    update_credit_card,
    update_subcategory,
    update_tag,
)
from moneta.store.schema import database_exists, get_db_path, init_database

__all__ = [
    # Schema
    "database_exists",
    "get_db_path",
    "init_database",
    # Entities
    "add_account",
    "add_category",
    "add_credit_card",
    "add_subcategory",
    "add_tag",
    "connect",
    "delete_account",
    "delete_category",
    "delete_credit_card",
    "delete_subcategory",
    "delete_tag",
    "get_account",
    "get_category",
    "get_credit_card",
    "get_subcategory",
    "get_tag",
    "list_accounts",
    "list_categories",
    "list_credit_cards",
    "list_subcategories",
    "list_tags",
    "update_account",
    "update_category",
    "update_credit_card",
    "update_subcategory",
    "update_tag",
    # Audit log
    "list_logs",
    "purge_logs",
    "record_log",
    # Transactions
    "count_transactions",
    "create_transaction",
    "delete_transaction",
    "get_transaction",
    "list_transactions",
    "update_transaction",
]
