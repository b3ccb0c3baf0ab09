"""Tests for moneta.domain.ledger balance planning."""

import pytest

from moneta.domain.errors import BalanceInvariantViolation
from moneta.domain.ledger import BalanceAdjustment, TransactionSnapshot, plan_create, plan_delete, plan_update
from moneta.domain.models import TransactionSource, TransactionType


def account_txn(transaction_type: TransactionType, value: str, account_id: int = 1) -> TransactionSnapshot:
    return TransactionSnapshot(transaction_type, TransactionSource.ACCOUNT, value, account_id=account_id)


def card_txn(transaction_type: TransactionType, value: str, card_id: int = 1) -> TransactionSnapshot:
    return TransactionSnapshot(transaction_type, TransactionSource.CREDIT_CARD, value, credit_card_id=card_id)


class TestTransactionSnapshot:
    """Tests for TransactionSnapshot."""

    def test_from_row(self) -> None:
        """Should read the balance fields from a stored row."""
        row = {
            "id": 7,
            "value": "150.00",
            "transaction_type": "expense",
            "transaction_source": "creditCard",
            "account_id": None,
            "credit_card_id": 3,
            "observation": "ignored",
        }
        snapshot = TransactionSnapshot.from_row(row)

        assert snapshot.transaction_type == TransactionType.EXPENSE
        assert snapshot.transaction_source == TransactionSource.CREDIT_CARD
        assert snapshot.owner_id == 3
        assert snapshot.delta == "150.00"

    def test_owner_follows_source(self) -> None:
        """Should pick the account id for account transactions, even if a card id is set."""
        snapshot = TransactionSnapshot(
            TransactionType.INCOME, TransactionSource.ACCOUNT, "1.00", account_id=4, credit_card_id=9
        )

        assert snapshot.owner_id == 4


class TestPlanCreate:
    """Tests for plan_create."""

    def test_account_expense(self) -> None:
        """Should lower the account balance."""
        plan = plan_create(account_txn(TransactionType.EXPENSE, "150.00"))

        assert plan == [BalanceAdjustment(TransactionSource.ACCOUNT, 1, "-150.00")]

    def test_card_expense(self) -> None:
        """Should raise what is owed on the card."""
        plan = plan_create(card_txn(TransactionType.EXPENSE, "80.00", card_id=2))

        assert plan == [BalanceAdjustment(TransactionSource.CREDIT_CARD, 2, "80.00")]

    def test_zero_amount_plans_nothing(self) -> None:
        """Should skip zero deltas."""
        assert plan_create(account_txn(TransactionType.INCOME, "0.00")) == []

    def test_missing_owner_raises(self) -> None:
        """Should refuse an account transaction without an account."""
        snapshot = TransactionSnapshot(TransactionType.INCOME, TransactionSource.ACCOUNT, "10.00")

        with pytest.raises(BalanceInvariantViolation):
            plan_create(snapshot)

    def test_missing_card_raises(self) -> None:
        """Should refuse a card transaction without a card."""
        snapshot = TransactionSnapshot(TransactionType.EXPENSE, TransactionSource.CREDIT_CARD, "10.00", account_id=1)

        with pytest.raises(BalanceInvariantViolation):
            plan_create(snapshot)


class TestPlanDelete:
    """Tests for plan_delete."""

    def test_reverses_account_expense(self) -> None:
        """Deleting an expense should give the money back."""
        plan = plan_delete(account_txn(TransactionType.EXPENSE, "150.00"))

        assert plan == [BalanceAdjustment(TransactionSource.ACCOUNT, 1, "150.00")]

    def test_reverses_card_refund(self) -> None:
        """Deleting a card refund should raise what is owed again."""
        plan = plan_delete(card_txn(TransactionType.INCOME, "30.00"))

        assert plan == [BalanceAdjustment(TransactionSource.CREDIT_CARD, 1, "30.00")]


class TestPlanUpdate:
    """Tests for plan_update."""

    def test_value_change_applies_difference(self) -> None:
        """Same owner should get only the difference."""
        plan = plan_update(
            account_txn(TransactionType.EXPENSE, "100.00"),
            account_txn(TransactionType.EXPENSE, "80.00"),
        )

        assert plan == [BalanceAdjustment(TransactionSource.ACCOUNT, 1, "20.00")]

    def test_type_change_on_same_account(self) -> None:
        """Turning a 50.00 expense into income should move the balance by 100.00."""
        plan = plan_update(
            account_txn(TransactionType.EXPENSE, "50.00"),
            account_txn(TransactionType.INCOME, "50.00"),
        )

        assert plan == [BalanceAdjustment(TransactionSource.ACCOUNT, 1, "100.00")]

    def test_no_balance_change_plans_nothing(self) -> None:
        """Should plan nothing when the delta is unchanged."""
        txn = account_txn(TransactionType.EXPENSE, "42.00")

        assert plan_update(txn, txn) == []

    def test_precision_difference_is_not_a_change(self) -> None:
        """5 and 5.00 are the same amount."""
        plan = plan_update(
            account_txn(TransactionType.EXPENSE, "5"),
            account_txn(TransactionType.EXPENSE, "5.00"),
        )

        assert plan == []

    def test_move_between_accounts(self) -> None:
        """Should undo on the old account and apply on the new one."""
        plan = plan_update(
            account_txn(TransactionType.EXPENSE, "100.00", account_id=1),
            account_txn(TransactionType.EXPENSE, "100.00", account_id=2),
        )

        assert plan == [
            BalanceAdjustment(TransactionSource.ACCOUNT, 1, "100.00"),
            BalanceAdjustment(TransactionSource.ACCOUNT, 2, "-100.00"),
        ]

    def test_move_from_account_to_card(self) -> None:
        """Switching source should touch both resources."""
        plan = plan_update(
            account_txn(TransactionType.EXPENSE, "60.00", account_id=1),
            card_txn(TransactionType.EXPENSE, "60.00", card_id=1),
        )

        assert plan == [
            BalanceAdjustment(TransactionSource.ACCOUNT, 1, "60.00"),
            BalanceAdjustment(TransactionSource.CREDIT_CARD, 1, "60.00"),
        ]

    def test_same_id_different_source_is_a_move(self) -> None:
        """Account 1 and card 1 are different owners."""
        plan = plan_update(
            card_txn(TransactionType.INCOME, "10.00", card_id=1),
            account_txn(TransactionType.INCOME, "10.00", account_id=1),
        )

        assert len(plan) == 2
