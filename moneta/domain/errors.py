"""Exception types raised by the moneta core and store."""

from typing import Any


class InvalidMonetaryAmount(ValueError):
    """Raised when a value cannot be read as an unsigned decimal amount."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"Invalid monetary amount: {value!r}")


class BalanceInvariantViolation(RuntimeError):
    """Raised when a balance adjustment has no account or credit card to land on."""


class LedgerError(Exception):
    """A rejected operation, identified by a translatable resource key.

    Attributes:
        key: Resource key understood by moneta.i18n.translate.
        params: Values interpolated into the translated message.
    """

    def __init__(self, key: str, **params: Any) -> None:
        self.key = key
        self.params = params
        super().__init__(key)
