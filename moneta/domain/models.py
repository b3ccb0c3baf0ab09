"""Domain type definitions for moneta.

These NewTypes and enums are shared by every layer:
- MonetaryString: decimal text with up to two fractional digits, optionally
  prefixed with "-" when it is a signed balance delta
- Month: Month in YYYY-MM format
- TransactionType / TransactionSource: classify how a transaction moves a balance
"""

from enum import Enum
from typing import NewType

# Money travels as decimal text ("12.50", "-3.1") so no float ever touches it
MonetaryString = NewType("MonetaryString", str)

# Month is always in YYYY-MM format (e.g., "2025-01")
Month = NewType("Month", str)


class TransactionType(str, Enum):
    """Whether a transaction brings money in or takes it out."""

    INCOME = "income"
    EXPENSE = "expense"


class TransactionSource(str, Enum):
    """Which kind of resource owns a transaction's balance."""

    ACCOUNT = "account"
    CREDIT_CARD = "creditCard"


class AccountType(str, Enum):
    CHECKING = "checking"
    PAYROLL = "payroll"
    SAVINGS = "savings"
    INVESTMENT = "investment"
    LOAN = "loan"
    OTHER = "other"


class CardFlag(str, Enum):
    VISA = "visa"
    MASTERCARD = "mastercard"
    AMEX = "amex"
    ELO = "elo"
    HIPERCARD = "hipercard"
    DISCOVER = "discover"
    DINERS = "diners"


class CategoryColor(str, Enum):
    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    PURPLE = "purple"
    YELLOW = "yellow"
    ORANGE = "orange"
    PINK = "pink"
    GRAY = "gray"
    CYAN = "cyan"
    INDIGO = "indigo"


class Currency(str, Enum):
    ARS = "ARS"
    COP = "COP"
    BRL = "BRL"
    EUR = "EUR"
    USD = "USD"


class DateFormat(str, Enum):
    DAY_FIRST = "DD/MM/YYYY"
    MONTH_FIRST = "MM/DD/YYYY"


class LogType(str, Enum):
    ALERT = "alert"
    DEBUG = "debug"
    ERROR = "error"
    SUCCESS = "success"


class LogOperation(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class LogCategory(str, Enum):
    ACCOUNT = "account"
    CREDIT_CARD = "creditCard"
    CATEGORY = "category"
    SUBCATEGORY = "subcategory"
    TAG = "tag"
    TRANSACTION = "transaction"
    LOG = "log"
