"""Tests for date and period utilities - pure functions, no fixtures needed.

Covers strict calendar date parsing, recurring due date clamping, period
keys and month navigation.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from freezegun import freeze_time
import pytest

from household_bills.utils import dt_utils, math_utils

# =============================================================================
# TEST: STRICT CALENDAR DATE PARSING
# =============================================================================


class TestParseCalendarDate:
    """Test parse_calendar_date strictness."""

    def test_valid_date(self) -> None:
        """A well-formed date parses to the same calendar day."""
        assert dt_utils.parse_calendar_date("2024-03-05") == date(2024, 3, 5)

    def test_leap_day_only_in_leap_years(self) -> None:
        """Feb 29 exists in 2024 but not in 2023."""
        assert dt_utils.parse_calendar_date("2024-02-29") == date(2024, 2, 29)
        assert dt_utils.parse_calendar_date("2023-02-29") is None

    @pytest.mark.parametrize(
        "value",
        [
            "2024-02-30",
            "2024-13-01",
            "2024-00-10",
            "2024-04-31",
            "2024-3-5",
            "24-03-05",
            "2024/03/05",
            "2024-03-05T00:00:00",
            "2024-03-05\n",
            " 2024-03-05",
            "２０２４-03-05",
            "",
        ],
    )
    def test_malformed_or_impossible_dates_rejected(self, value: str) -> None:
        """Anything that is not an exact, real YYYY-MM-DD date is None."""
        assert dt_utils.parse_calendar_date(value) is None

    @pytest.mark.parametrize("value", [None, 20240305, ["2024-03-05"]])
    def test_non_string_rejected(self, value: object) -> None:
        """Non-string input never raises."""
        assert dt_utils.parse_calendar_date(value) is None  # type: ignore[arg-type]


# =============================================================================
# TEST: RECURRING DUE DATE RESOLUTION
# =============================================================================


class TestResolveRecurringDueDate:
    """Test day-of-month clamping."""

    def test_day_inside_month_unchanged(self) -> None:
        """Day 15 resolves to the 15th."""
        assert dt_utils.resolve_recurring_due_date(2024, 3, 15) == date(2024, 3, 15)

    @pytest.mark.parametrize(
        ("year", "month", "expected"),
        [
            (2023, 2, date(2023, 2, 28)),
            (2024, 2, date(2024, 2, 29)),
            (2024, 4, date(2024, 4, 30)),
            (2024, 1, date(2024, 1, 31)),
        ],
    )
    def test_day_31_clamps_to_last_day(
        self, year: int, month: int, expected: date
    ) -> None:
        """Day 31 lands on the month's last day."""
        assert dt_utils.resolve_recurring_due_date(year, month, 31) == expected

    def test_low_day_clamps_to_first(self) -> None:
        """A day below 1 clamps up to the 1st."""
        assert dt_utils.resolve_recurring_due_date(2024, 3, 0) == date(2024, 3, 1)

    @pytest.mark.parametrize("day", [None, True, 1.5, "15"])
    def test_unusable_day_returns_none(self, day: object) -> None:
        """Missing or non-integer days have no due date."""
        assert dt_utils.resolve_recurring_due_date(2024, 3, day) is None  # type: ignore[arg-type]

    def test_invalid_month_returns_none(self) -> None:
        """Month 13 cannot form a date."""
        assert dt_utils.resolve_recurring_due_date(2024, 13, 1) is None


# =============================================================================
# TEST: PERIODS AND NAVIGATION
# =============================================================================


class TestPeriods:
    """Test YYYY-MM period helpers."""

    def test_period_key_zero_pads(self) -> None:
        """Month is always two digits."""
        assert dt_utils.period_key(2024, 4) == "2024-04"

    def test_period_of_date_and_datetime(self) -> None:
        """Dates and datetimes map to their own month."""
        assert dt_utils.period_of(date(2024, 12, 31)) == "2024-12"
        assert dt_utils.period_of(datetime(2024, 1, 1, 0, 5, tzinfo=UTC)) == "2024-01"

    def test_parse_period_valid(self) -> None:
        """A well-formed period parses to (year, month)."""
        assert dt_utils.parse_period("2024-03") == (2024, 3)

    @pytest.mark.parametrize("value", ["2024-13", "2024-00", "2024-3", "2024-03-01", "", None])
    def test_parse_period_invalid(self, value: str | None) -> None:
        """Malformed periods return None."""
        assert dt_utils.parse_period(value) is None

    def test_is_month_in_future(self) -> None:
        """Only strictly later months are in the future."""
        today = date(2024, 3, 10)
        assert dt_utils.is_month_in_future(2024, 4, today)
        assert dt_utils.is_month_in_future(2025, 1, today)
        assert not dt_utils.is_month_in_future(2024, 3, today)
        assert not dt_utils.is_month_in_future(2023, 12, today)

    @pytest.mark.parametrize(
        ("start", "delta", "expected"),
        [
            ((2024, 1), -1, (2023, 12)),
            ((2024, 12), 1, (2025, 1)),
            ((2024, 3), 0, (2024, 3)),
            ((2024, 3), 14, (2025, 5)),
        ],
    )
    def test_shift_month(
        self, start: tuple[int, int], delta: int, expected: tuple[int, int]
    ) -> None:
        """Navigation wraps across year boundaries."""
        assert dt_utils.shift_month(*start, delta) == expected

    def test_shift_month_out_of_range(self) -> None:
        """Leaving the supported year range returns None."""
        assert dt_utils.shift_month(9999, 12, 1) is None
        assert dt_utils.shift_month(2024, 13, 1) is None


# =============================================================================
# TEST: LOCAL CLOCK
# =============================================================================


class TestLocalClock:
    """Test the default clock and timezone configuration."""

    def test_start_of_day_keeps_wall_clock_date(self) -> None:
        """Time-of-day is dropped without timezone conversion."""
        value = datetime(2024, 3, 10, 23, 59, tzinfo=ZoneInfo("America/New_York"))
        assert dt_utils.start_of_day(value) == date(2024, 3, 10)

    @freeze_time("2024-04-06 02:00:00", tz_offset=0)
    def test_today_follows_default_timezone(
        self, restore_default_timezone: None
    ) -> None:
        """02:00 UTC on the 6th is still the 5th in New York."""
        assert dt_utils.dt_today_local() == date(2024, 4, 6)

        dt_utils.set_default_timezone(ZoneInfo("America/New_York"))
        assert dt_utils.get_default_timezone() == ZoneInfo("America/New_York")
        assert dt_utils.dt_today_local() == date(2024, 4, 5)


# =============================================================================
# TEST: AMOUNT HELPERS
# =============================================================================


class TestAmounts:
    """Test amount rounding, summation and formatting."""

    def test_sum_amounts_is_precise(self) -> None:
        """Ten dimes add up to exactly one."""
        assert math_utils.sum_amounts([0.1] * 10) == 1.0

    def test_sum_amounts_skips_non_finite(self) -> None:
        """NaN and infinity do not poison totals."""
        assert math_utils.sum_amounts([10.0, float("nan"), float("inf"), 2.5]) == 12.5

    @pytest.mark.parametrize("value", [True, "1", None, float("nan")])
    def test_is_finite_amount_rejects(self, value: object) -> None:
        """Bools, strings and NaN are not amounts."""
        assert not math_utils.is_finite_amount(value)

    def test_format_amount(self) -> None:
        """Labels always carry two decimals."""
        assert math_utils.format_amount(1200) == "$1200.00"
        assert math_utils.format_amount(9.5) == "$9.50"
