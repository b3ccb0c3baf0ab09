"""Shared fixtures for store and command tests."""

from pathlib import Path
from typing import Any

import pytest

from moneta.domain.models import CardFlag, TransactionType
from moneta.store.queries import add_account, add_category, add_credit_card, add_subcategory, add_tag
from moneta.store.schema import init_database


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """A freshly initialized database."""
    path = tmp_path / "moneta.db"
    init_database(path)
    return path


@pytest.fixture
def ledger(db_path: Path) -> dict[str, Any]:
    """A database with one account, card, category, subcategory and tag."""
    account = add_account("Checking", "Bank", balance="1000.00", db_path=db_path)
    card = add_credit_card("Gold", CardFlag.VISA, credit_limit="5000", db_path=db_path)
    category = add_category("Food", TransactionType.EXPENSE, db_path=db_path)
    subcategory = add_subcategory("Groceries", category["id"], db_path=db_path)
    tag = add_tag("trip", db_path=db_path)
    return {
        "db_path": db_path,
        "account": account,
        "card": card,
        "category": category,
        "subcategory": subcategory,
        "tag": tag,
    }
