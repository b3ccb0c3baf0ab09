"""Tests for moneta.dates pure functions."""

import pytest

from moneta.dates import format_date, month_range, normalize_date
from moneta.domain.models import DateFormat, Month


class TestNormalizeDate:
    """Tests for normalize_date."""

    def test_iso_date_unchanged(self) -> None:
        """Should keep ISO dates."""
        assert normalize_date("2025-03-14") == "2025-03-14"

    def test_day_first(self) -> None:
        """Should read ambiguous dates day first."""
        assert normalize_date("05/03/2025") == "2025-03-05"

    def test_unambiguous_european(self) -> None:
        """Should parse DD/MM/YYYY dates."""
        assert normalize_date("31/12/2024") == "2024-12-31"

    def test_strips_whitespace(self) -> None:
        """Should ignore surrounding whitespace."""
        assert normalize_date("  2025-03-14 ") == "2025-03-14"

    @pytest.mark.parametrize("raw", ["", "   ", "not a date", "2025-13-45"])
    def test_invalid_raises_valueerror(self, raw: str) -> None:
        """Should raise ValueError when the date cannot be read."""
        with pytest.raises(ValueError):
            normalize_date(raw)


class TestFormatDate:
    """Tests for format_date."""

    def test_day_first(self) -> None:
        """Should render DD/MM/YYYY."""
        assert format_date("2025-03-05", DateFormat.DAY_FIRST) == "05/03/2025"

    def test_month_first(self) -> None:
        """Should render MM/DD/YYYY."""
        assert format_date("2025-03-05", "MM/DD/YYYY") == "03/05/2025"


class TestMonthRange:
    """Tests for month_range."""

    def test_january_range(self) -> None:
        """Should calculate range for January."""
        since, until, label = month_range(Month("2025-01"))

        assert since == "2025-01-01"
        assert until == "2025-02-01"
        assert label == "January 2025"

    def test_december_range_crosses_year(self) -> None:
        """Should handle December (crosses year boundary)."""
        since, until, label = month_range(Month("2025-12"))

        assert since == "2025-12-01"
        assert until == "2026-01-01"
        assert label == "December 2025"

    def test_february_leap_year(self) -> None:
        """Should handle February in leap year."""
        since, until, _ = month_range(Month("2024-02"))

        assert since == "2024-02-01"
        assert until == "2024-03-01"

    def test_invalid_month_format_raises_valueerror(self) -> None:
        """Should raise ValueError for invalid month format."""
        with pytest.raises(ValueError):
            month_range(Month("invalid"))

    def test_invalid_month_number_raises_valueerror(self) -> None:
        """Should raise ValueError for invalid month number."""
        with pytest.raises(ValueError):
            month_range(Month("2025-13"))
