"""Pure functions for monetary amounts and signed balance deltas.

This module contains the functional core for balance arithmetic:
- No I/O operations (no database, no console, no files)
- No side effects
- Amounts travel as decimal text (MonetaryString), never as floats

A transaction moves the balance of the account or credit card that owns it.
The direction depends on the (source, type) pair:

    account    + income  -> balance goes up
    account    + expense -> balance goes down
    creditCard + expense -> balance goes up (more is owed)
    creditCard + income  -> balance goes down (a refund reduces what is owed)
"""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from moneta.domain.errors import InvalidMonetaryAmount
from moneta.domain.models import MonetaryString, TransactionSource, TransactionType

UNSIGNED_AMOUNT = re.compile(r"\d+(\.\d{1,2})?", re.ASCII)

ZERO = MonetaryString("0.00")

_CENTS = Decimal("0.01")

_INCREASES_BALANCE: dict[tuple[TransactionSource, TransactionType], bool] = {
    (TransactionSource.ACCOUNT, TransactionType.INCOME): True,
    (TransactionSource.ACCOUNT, TransactionType.EXPENSE): False,
    (TransactionSource.CREDIT_CARD, TransactionType.EXPENSE): True,
    (TransactionSource.CREDIT_CARD, TransactionType.INCOME): False,
}


def normalize_to_unsigned(value: str | int | float | Decimal | None) -> MonetaryString:
    """Normalize a monetary input into an unsigned decimal string.

    Precision is kept as given: "5" stays "5" and "5.5" stays "5.5". Only a
    missing or blank value is rendered as "0.00".

    Args:
        value: Raw amount (text or number). A single leading sign is dropped.

    Returns:
        Unsigned monetary string.

    Raises:
        InvalidMonetaryAmount: If the sign-stripped text is not digits with at
            most two fractional digits.
    """
    if value is None:
        return ZERO

    trimmed = str(value).strip()
    if not trimmed:
        return ZERO

    unsigned = trimmed
    if unsigned[0] in "+-":
        unsigned = unsigned[1:]

    if not UNSIGNED_AMOUNT.fullmatch(unsigned):
        raise InvalidMonetaryAmount(value)

    return MonetaryString(unsigned)


def increases_balance(transaction_type: TransactionType, transaction_source: TransactionSource) -> bool:
    """Tell whether a transaction of this type and source raises its owner's balance.

    Args:
        transaction_type: Income or expense.
        transaction_source: Account or credit card.

    Returns:
        True if the balance goes up, False if it goes down.
    """
    return _INCREASES_BALANCE[(TransactionSource(transaction_source), TransactionType(transaction_type))]


def signed_delta(
    transaction_type: TransactionType,
    transaction_source: TransactionSource,
    value: str | int | float | Decimal | None,
) -> MonetaryString:
    """Build the signed balance delta for a transaction.

    Args:
        transaction_type: Income or expense.
        transaction_source: Account or credit card.
        value: Transaction amount; any sign on it is ignored.

    Returns:
        The unsigned amount when the balance increases, or the amount
        prefixed with "-" when it decreases.

    Raises:
        InvalidMonetaryAmount: If the value is not a valid amount.
    """
    amount = normalize_to_unsigned(value)
    if increases_balance(transaction_type, transaction_source):
        return amount
    return MonetaryString(f"-{amount}")


def invert(delta: MonetaryString) -> MonetaryString:
    """Flip the sign of a delta, used to undo a previously applied one."""
    if delta.startswith("-"):
        return MonetaryString(delta[1:])
    return MonetaryString(f"-{delta}")


def is_zero(delta: MonetaryString) -> bool:
    """Check whether a delta is economically zero.

    Sign, leading zeros and trailing fractional zeros do not matter:
    "-0.00", "0" and "00.0" are all zero.
    """
    unsigned = delta[1:] if delta[:1] in ("-", "+") else delta
    integer_part, _, decimal_part = unsigned.partition(".")
    return not integer_part.lstrip("0") and not decimal_part.replace("0", "")


def _to_decimal(value: str | int | float | Decimal | None) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        number = value
    else:
        text = str(value).strip()
        if not text:
            return Decimal("0")
        try:
            number = Decimal(text)
        except InvalidOperation as e:
            raise InvalidMonetaryAmount(value) from e
    if not number.is_finite():
        raise InvalidMonetaryAmount(value)
    return number


def format_amount(value: str | int | float | Decimal | None) -> MonetaryString:
    """Render a value with exactly two decimals, rounding half up.

    Args:
        value: Any decimal-convertible value, possibly signed.

    Returns:
        Text such as "12.50" or "-3.10". Zero is always "0.00", never "-0.00".

    Raises:
        InvalidMonetaryAmount: If the value is not a number.
    """
    rounded = _to_decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP)
    if rounded.is_zero():
        return ZERO
    return MonetaryString(f"{rounded:f}")


def apply_delta(balance: str | Decimal | None, delta: MonetaryString) -> MonetaryString:
    """Apply a signed delta to a stored balance.

    Args:
        balance: Current balance text (may be negative, e.g. an overdrawn account).
        delta: Signed delta to add.

    Returns:
        New balance with two decimals.
    """
    return format_amount(_to_decimal(balance) + _to_decimal(delta))


def combine_deltas(*deltas: MonetaryString) -> MonetaryString:
    """Sum signed deltas into one, rendered with two decimals."""
    total = sum((_to_decimal(delta) for delta in deltas), Decimal("0"))
    return format_amount(total)
