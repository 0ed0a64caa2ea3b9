"""Calendar Engine - Projects bills onto the days of a displayed month.

Produces a per-day event map for any (year, month), independent of the
month "today" falls in:

- Monthly bills yield exactly one event at their clamped day, with status
  derived against the DISPLAYED period. Future months are never overdue.
- One-time bills yield an event only when their due date is in the
  displayed month.
- Events on one day are ordered by due date, then by label.

Presentation truncates each day cell to a few visible events plus an
overflow count; the full list stays available for a day detail view.

ARCHITECTURE: Pure logic, no clock reads. See bill_engine.py for the
status rules shared with the dashboard.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
import calendar

from .. import const
from ..models import Bill, MonthlyBill
from ..type_defs import BadgeStatus, BillId
from ..utils.dt_utils import (
    days_in_month,
    parse_calendar_date,
    period_key,
    resolve_recurring_due_date,
    shift_month,
)
from ..utils.math_utils import format_amount
from .bill_engine import BillEngine

# =============================================================================
# RESULT STRUCTURES
# =============================================================================


@dataclass(frozen=True)
class CalendarEvent:
    """One bill occurrence on a calendar day.

    Attributes:
        bill_id: Source bill id
        day: Day of the displayed month (1-based)
        status: paid / overdue / unpaid for the displayed period
        amount: Bill amount
        name: Bill name
        label: "Name • $amount" display label, also the secondary sort key
        sort_key: Ordinal of the due date, primary sort key within a day
        bill: The snapshot the event was projected from (for toggling)
    """

    bill_id: BillId
    day: int
    status: BadgeStatus
    amount: float
    name: str
    label: str
    sort_key: int
    bill: Bill = field(compare=False, repr=False)


@dataclass(frozen=True)
class CalendarDay:
    """Events for one day cell, with display truncation."""

    day: int
    events: tuple[CalendarEvent, ...]
    max_visible: int = const.DEFAULT_CALENDAR_MAX_VISIBLE_EVENTS

    @property
    def visible_events(self) -> tuple[CalendarEvent, ...]:
        """Events shown inside the cell."""
        return self.events[: max(self.max_visible, 0)]

    @property
    def overflow_count(self) -> int:
        """Number of events hidden behind a "+N more" chip."""
        return max(len(self.events) - max(self.max_visible, 0), 0)


@dataclass(frozen=True)
class CalendarMonth:
    """A projected month: per-day events plus the Sunday-first grid."""

    year: int
    month: int
    period: str
    label: str
    days: dict[int, CalendarDay]
    weeks: list[list[int | None]]

    def events_for_day(self, day: int) -> tuple[CalendarEvent, ...]:
        """Return every event on a day (empty when none)."""
        calendar_day = self.days.get(day)
        return calendar_day.events if calendar_day else ()

    @property
    def weekday_labels(self) -> list[str]:
        """Column headings matching `weeks` (Sunday first)."""
        return list(const.CALENDAR_WEEKDAY_LABELS)

    @property
    def previous_month(self) -> tuple[int, int] | None:
        """(year, month) for "previous" navigation."""
        return shift_month(self.year, self.month, -1)

    @property
    def next_month(self) -> tuple[int, int] | None:
        """(year, month) for "next" navigation."""
        return shift_month(self.year, self.month, 1)


# =============================================================================
# CALENDAR ENGINE
# =============================================================================


class CalendarEngine:
    """Pure logic engine for the month grid projection.

    All methods are static - no instance state.
    """

    @staticmethod
    def event_label(name: str, amount: float) -> str:
        """Build the "Name • $12.50" label used for display and ordering."""
        return (
            f"{name}{const.CALENDAR_LABEL_SEPARATOR}"
            f"{format_amount(amount, const.DEFAULT_CURRENCY_SYMBOL)}"
        )

    @staticmethod
    def project_bill(
        bill: Bill, year: int, month: int, today: date
    ) -> CalendarEvent | None:
        """Project one bill into the displayed month.

        Returns:
            The event, or None when the bill has no occurrence that month.
        """
        if isinstance(bill, MonthlyBill):
            due_date = resolve_recurring_due_date(year, month, bill.day_of_month)
        else:
            due_date = parse_calendar_date(bill.due_date)
            if due_date is not None and (due_date.year, due_date.month) != (
                year,
                month,
            ):
                due_date = None

        if due_date is None:
            return None

        viewed_period = period_key(year, month)
        return CalendarEvent(
            bill_id=bill.id,
            day=due_date.day,
            status=BillEngine.badge(bill, viewed_period, today),
            amount=bill.amount,
            name=bill.name,
            label=CalendarEngine.event_label(bill.name, bill.amount),
            sort_key=due_date.toordinal(),
            bill=bill,
        )

    @staticmethod
    def events_by_day(
        bills: Iterable[Bill], year: int, month: int, today: date
    ) -> dict[int, list[CalendarEvent]]:
        """Group projected events per day, each day sorted.

        Args:
            bills: Bill snapshot
            year: Displayed year
            month: Displayed month (1-12)
            today: Current date, used only for overdue classification

        Returns:
            {day: [events]} with only days that have events. Empty for an
            invalid month.
        """
        if days_in_month(year, month) is None:
            return {}

        grouped: dict[int, list[CalendarEvent]] = {}
        for bill in bills:
            event = CalendarEngine.project_bill(bill, year, month, today)
            if event is None:
                continue
            grouped.setdefault(event.day, []).append(event)

        for day_events in grouped.values():
            day_events.sort(
                key=lambda event: (
                    event.sort_key,
                    BillEngine.collation_key(event.label),
                    event.label,
                    event.bill_id,
                )
            )
        return grouped

    @staticmethod
    def build_month_grid(year: int, month: int) -> list[list[int | None]]:
        """Return Sunday-first week rows with None for leading/trailing blanks.

        Example (February 2026 starts on a Sunday):
            [[1, 2, 3, 4, 5, 6, 7], ..., [22, 23, 24, 25, 26, 27, 28]]
        """
        if days_in_month(year, month) is None:
            return []
        month_calendar = calendar.Calendar(firstweekday=calendar.SUNDAY)
        return [
            [day or None for day in week]
            for week in month_calendar.monthdayscalendar(year, month)
        ]

    @staticmethod
    def month_label(year: int, month: int) -> str:
        """Return a "March 2024" style heading."""
        if days_in_month(year, month) is None:
            return ""
        return f"{calendar.month_name[month]} {year}"

    @staticmethod
    def project_month(
        bills: Iterable[Bill],
        year: int,
        month: int,
        today: date,
        *,
        max_visible: int = const.DEFAULT_CALENDAR_MAX_VISIBLE_EVENTS,
    ) -> CalendarMonth:
        """Project a full month for the grid view.

        Args:
            bills: Bill snapshot
            year: Displayed year
            month: Displayed month (1-12)
            today: Current date
            max_visible: Events shown per day cell before the overflow chip

        Returns:
            The projected month; empty (no period, days or weeks) when
            (year, month) is not a valid calendar month.
        """
        if days_in_month(year, month) is None:
            return CalendarMonth(
                year=year, month=month, period="", label="", days={}, weeks=[]
            )

        grouped = CalendarEngine.events_by_day(bills, year, month, today)
        days = {
            day: CalendarDay(day=day, events=tuple(events), max_visible=max_visible)
            for day, events in sorted(grouped.items())
        }
        return CalendarMonth(
            year=year,
            month=month,
            period=period_key(year, month),
            label=CalendarEngine.month_label(year, month),
            days=days,
            weeks=CalendarEngine.build_month_grid(year, month),
        )
