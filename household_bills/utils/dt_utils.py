# File: utils/dt_utils.py
"""Date and period utilities for household bills.

Pure Python date functions. Every function is total: malformed or
out-of-range input degrades to None (or False) instead of raising.
Uses standard library datetime/zoneinfo and dateutil.

Functions:
    - set_default_timezone / get_default_timezone: Configure "local" time
    - dt_now_local: Current datetime in local timezone (default clock)
    - dt_today_local: Today's date in local timezone
    - start_of_day: Normalize a datetime/date to its calendar day
    - days_in_month: Number of days in a (year, month)
    - parse_calendar_date: Strict YYYY-MM-DD parsing with round-trip check
    - resolve_recurring_due_date: Day-of-month → concrete date, clamped
    - period_key / period_of / parse_period: YYYY-MM settlement periods
    - is_month_in_future: Month/year comparison against today
    - shift_month: Month navigation for calendar views
"""

from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime
import logging
import re
from zoneinfo import ZoneInfo

# Third-party date utilities
from dateutil.relativedelta import relativedelta

# Module-level logger
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants
# ==============================================================================

# Default timezone - can be overridden by caller
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")

# Strict textual patterns
_CALENDAR_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII)
_PERIOD_PATTERN = re.compile(r"^(\d{4})-(\d{2})$", re.ASCII)

# Supported calendar year range (datetime.date limits)
MIN_YEAR = 1
MAX_YEAR = 9999


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the default timezone used to decide what "today" is.

    Call this once during setup with the household's timezone.

    Args:
        tz: ZoneInfo object representing the default timezone
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> ZoneInfo:
    """Get the current default timezone."""
    return DEFAULT_TIME_ZONE


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_now_local(tz: ZoneInfo | None = None) -> datetime:
    """Return the current datetime in local timezone (timezone-aware).

    This is the default clock. Engines never call it; managers receive it
    as an injectable `clock` so tests can pin "now".

    Args:
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.now(tz_info)


def dt_today_local(tz: ZoneInfo | None = None) -> date:
    """Return today's date in local timezone as a `datetime.date`.

    Example:
        datetime.date(2024, 4, 5)
    """
    return dt_now_local(tz).date()


def start_of_day(value: datetime | date) -> date:
    """Normalize to calendar-day granularity.

    Datetimes keep their own wall-clock date (no timezone conversion);
    time-of-day is discarded.
    """
    if isinstance(value, datetime):
        return value.date()
    return value


# ==============================================================================
# Calendar Dates
# ==============================================================================


def days_in_month(year: int, month: int) -> int | None:
    """Return the number of days in a month, or None for an invalid month."""
    if not _is_valid_year_month(year, month):
        return None
    return monthrange(year, month)[1]


def parse_calendar_date(value: str | None) -> date | None:
    """Parse a strict YYYY-MM-DD string into a `datetime.date`.

    The three integer parts are re-assembled into a date and the input is
    rejected when the result disagrees with it, so impossible dates such as
    "2024-02-30" return None rather than rolling over.

    Args:
        value: Date string to parse, or None

    Returns:
        datetime.date or None if the value is missing or malformed.

    Examples:
        parse_calendar_date("2024-03-05") → date(2024, 3, 5)
        parse_calendar_date("2024-02-30") → None
        parse_calendar_date("2024-3-5") → None
    """
    if not value or not isinstance(value, str):
        return None

    if not _CALENDAR_DATE_PATTERN.fullmatch(value):
        return None

    year, month, day = (int(part) for part in value.split("-"))
    last_day = days_in_month(year, month)
    if last_day is None or not 1 <= day <= last_day:
        return None

    parsed = date(year, month, day)
    if (parsed.year, parsed.month, parsed.day) != (year, month, day):
        return None
    return parsed


def resolve_recurring_due_date(
    year: int, month: int, day_of_month: int | None
) -> date | None:
    """Resolve a recurring day-of-month into a concrete date.

    The day is clamped into [1, last day of month], so a bill due on the
    31st lands on the 30th in April and on the 28th/29th in February.

    Args:
        year: Calendar year
        month: Calendar month (1-12)
        day_of_month: Anchor day (normally 1-31)

    Returns:
        The concrete due date, or None when the inputs cannot form a date.

    Examples:
        resolve_recurring_due_date(2024, 2, 31) → date(2024, 2, 29)
        resolve_recurring_due_date(2023, 2, 31) → date(2023, 2, 28)
    """
    if (
        day_of_month is None
        or isinstance(day_of_month, bool)
        or not isinstance(day_of_month, int)
    ):
        return None

    last_day = days_in_month(year, month)
    if last_day is None:
        return None

    clamped = min(max(day_of_month, 1), last_day)
    return date(year, month, clamped)


# ==============================================================================
# Settlement Periods (YYYY-MM)
# ==============================================================================


def period_key(year: int, month: int) -> str:
    """Format a (year, month) as a YYYY-MM settlement period."""
    return f"{year:04d}-{month:02d}"


def period_of(value: datetime | date) -> str:
    """Return the YYYY-MM settlement period containing a date."""
    return period_key(value.year, value.month)


def parse_period(value: str | None) -> tuple[int, int] | None:
    """Parse a YYYY-MM period into (year, month), or None if malformed."""
    if not value or not isinstance(value, str):
        return None

    match = _PERIOD_PATTERN.fullmatch(value)
    if not match:
        return None

    year, month = int(match.group(1)), int(match.group(2))
    if not _is_valid_year_month(year, month):
        return None
    return year, month


def is_month_in_future(view_year: int, view_month: int, today: date) -> bool:
    """Return True if (view_year, view_month) is strictly after today's month."""
    return (view_year, view_month) > (today.year, today.month)


def shift_month(year: int, month: int, delta: int) -> tuple[int, int] | None:
    """Move a (year, month) by `delta` months.

    Used for calendar previous/next navigation. Returns None if the
    starting month is invalid or the result leaves the supported range.

    Examples:
        shift_month(2024, 1, -1) → (2023, 12)
        shift_month(2024, 12, 1) → (2025, 1)
    """
    if not _is_valid_year_month(year, month):
        return None

    try:
        shifted = date(year, month, 1) + relativedelta(months=delta)
    except (OverflowError, ValueError):
        _LOGGER.debug("shift_month out of range: %s-%s %+d", year, month, delta)
        return None
    return shifted.year, shifted.month


# ==============================================================================
# Internal Helpers
# ==============================================================================


def _is_valid_year_month(year: int, month: int) -> bool:
    """Check year/month are integers within datetime.date's supported range."""
    for part in (year, month):
        if isinstance(part, bool) or not isinstance(part, int):
            return False
    return MIN_YEAR <= year <= MAX_YEAR and 1 <= month <= 12
