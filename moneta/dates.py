"""Date utilities for moneta.

Pure functions for date parsing, range calculations and formatting.
"""

from datetime import datetime, timedelta

import pandas as pd

from moneta.domain.models import DateFormat, Month


def normalize_date(raw_date: str) -> str:
    """Normalize a user-entered date to ISO format (YYYY-MM-DD).

    Uses pandas.to_datetime so ISO, European and other common formats are
    accepted. Ambiguous dates are read day first.

    Args:
        raw_date: Raw date string.

    Returns:
        Normalized date in YYYY-MM-DD format.

    Raises:
        ValueError: If date cannot be parsed.
    """
    if not raw_date or not raw_date.strip():
        raise ValueError("Date is empty")
    try:
        parsed_date = pd.to_datetime(raw_date.strip(), dayfirst=True)
    except (ValueError, pd.errors.ParserError) as e:
        raise ValueError(f"Could not parse date '{raw_date}': {e}") from e
    if pd.isna(parsed_date):
        raise ValueError(f"Could not parse date '{raw_date}'")
    return parsed_date.strftime("%Y-%m-%d")


def format_date(iso_date: str, date_format: DateFormat | str) -> str:
    """Render an ISO date in the profile's display format.

    Args:
        iso_date: Date in YYYY-MM-DD format.
        date_format: DD/MM/YYYY or MM/DD/YYYY.

    Returns:
        Formatted date string.
    """
    dt = datetime.strptime(iso_date, "%Y-%m-%d")
    if DateFormat(date_format) == DateFormat.MONTH_FIRST:
        return dt.strftime("%m/%d/%Y")
    return dt.strftime("%d/%m/%Y")


def month_range(month: Month) -> tuple[str, str, str]:
    """Calculate date range and label for a month.

    Args:
        month: Month in YYYY-MM format.

    Returns:
        Tuple of (since_date, until_date, label) where:
        - since_date: First day of month (YYYY-MM-DD)
        - until_date: First day of next month (YYYY-MM-DD)
        - label: Human-readable month (e.g., "January 2025")
    """
    dt = datetime.strptime(month, "%Y-%m")
    since = dt.strftime("%Y-%m-01")
    next_month = (dt.replace(day=28) + timedelta(days=4)).replace(day=1)
    until = next_month.strftime("%Y-%m-%d")
    label = dt.strftime("%B %Y")
    return since, until, label
