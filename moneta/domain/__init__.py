"""Domain models and types for moneta.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure
"""

from moneta.domain.errors import BalanceInvariantViolation, InvalidMonetaryAmount, LedgerError
from moneta.domain.models import MonetaryString, Month, TransactionSource, TransactionType

__all__ = [
    "BalanceInvariantViolation",
    "InvalidMonetaryAmount",
    "LedgerError",
    "MonetaryString",
    "Month",
    "TransactionSource",
    "TransactionType",
]
