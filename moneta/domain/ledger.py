"""Pure functions that plan balance adjustments for transaction changes.

This module contains the functional core for keeping balances consistent:
- No I/O operations (no database, no console, no files)
- No side effects
- Each plan is a list of BalanceAdjustment the store applies inside one
  database transaction

All deltas are signed MonetaryString values from moneta.domain.monetary.
"""

from dataclasses import dataclass
from typing import Any

from moneta.domain.errors import BalanceInvariantViolation
from moneta.domain.models import MonetaryString, TransactionSource, TransactionType
from moneta.domain.monetary import combine_deltas, invert, is_zero, signed_delta


@dataclass(frozen=True)
class TransactionSnapshot:
    """Balance-relevant fields of a transaction."""

    transaction_type: TransactionType
    transaction_source: TransactionSource
    value: str
    account_id: int | None = None
    credit_card_id: int | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "TransactionSnapshot":
        """Build a snapshot from a transaction row dictionary."""
        return cls(
            transaction_type=TransactionType(row["transaction_type"]),
            transaction_source=TransactionSource(row["transaction_source"]),
            value=str(row["value"]),
            account_id=row.get("account_id"),
            credit_card_id=row.get("credit_card_id"),
        )

    @property
    def owner_id(self) -> int | None:
        """Id of the account or credit card whose balance this transaction moves."""
        if self.transaction_source == TransactionSource.ACCOUNT:
            return self.account_id
        return self.credit_card_id

    @property
    def delta(self) -> MonetaryString:
        """Signed delta this transaction applies to its owner."""
        return signed_delta(self.transaction_type, self.transaction_source, self.value)


@dataclass(frozen=True)
class BalanceAdjustment:
    """One signed change to an account or credit card balance."""

    target: TransactionSource
    target_id: int
    delta: MonetaryString


def _owner(snapshot: TransactionSnapshot) -> tuple[TransactionSource, int]:
    owner_id = snapshot.owner_id
    if owner_id is None:
        if snapshot.transaction_source == TransactionSource.ACCOUNT:
            raise BalanceInvariantViolation("account_id required for an account transaction")
        raise BalanceInvariantViolation("credit_card_id required for a credit card transaction")
    return snapshot.transaction_source, owner_id


def _adjust(snapshot: TransactionSnapshot, delta: MonetaryString) -> list[BalanceAdjustment]:
    if is_zero(delta):
        return []
    target, target_id = _owner(snapshot)
    return [BalanceAdjustment(target=target, target_id=target_id, delta=delta)]


def plan_create(snapshot: TransactionSnapshot) -> list[BalanceAdjustment]:
    """Plan the adjustment for a newly recorded transaction.

    Args:
        snapshot: The created transaction.

    Returns:
        One adjustment, or none when the amount is zero.

    Raises:
        BalanceInvariantViolation: If the owner id for its source is missing.
        InvalidMonetaryAmount: If the value is not a valid amount.
    """
    return _adjust(snapshot, snapshot.delta)


def plan_delete(snapshot: TransactionSnapshot) -> list[BalanceAdjustment]:
    """Plan the adjustment that undoes a deleted transaction."""
    return _adjust(snapshot, invert(snapshot.delta))


def plan_update(current: TransactionSnapshot, updated: TransactionSnapshot) -> list[BalanceAdjustment]:
    """Plan the adjustments that move balances from one version of a transaction to another.

    When the transaction stays on the same account (or the same credit card)
    only the difference is applied. Otherwise the old delta is reversed on
    the old owner and the new delta is applied to the new owner.

    Args:
        current: Transaction as stored before the update.
        updated: Transaction after the update.

    Returns:
        Zero, one or two adjustments.

    Raises:
        BalanceInvariantViolation: If either version lacks its owner id.
    """
    current_delta = current.delta
    updated_delta = updated.delta

    if _owner(current) == _owner(updated):
        return _adjust(updated, combine_deltas(updated_delta, invert(current_delta)))

    return _adjust(current, invert(current_delta)) + _adjust(updated, updated_delta)
