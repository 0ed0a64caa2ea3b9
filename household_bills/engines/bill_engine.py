"""Bill Engine - Pure logic for bill status, overdue and aggregation.

This engine provides stateless, pure Python functions for:
- Derived paid/unpaid status for a queried period
- Due date resolution for both bill variants
- Overdue classification and display badges
- Deterministic dashboard ordering
- Monthly summary totals

ARCHITECTURE: This is a pure logic engine. All functions are static
methods operating on passed-in snapshots, the queried period and "today".
Nothing here reads a clock. State belongs in the managers.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
import locale
import math

from .. import const
from ..models import Bill, MonthlyBill
from ..type_defs import BadgeStatus, BillStatus, PeriodKey
from ..utils.dt_utils import (
    is_month_in_future,
    parse_calendar_date,
    parse_period,
    resolve_recurring_due_date,
    start_of_day,
)
from ..utils.math_utils import round_amount, sum_amounts

# =============================================================================
# RESULT STRUCTURES
# =============================================================================


@dataclass(frozen=True)
class BillView:
    """One dashboard row: a bill plus everything derived for a period.

    Attributes:
        bill: The snapshot this row was derived from
        status: Derived paid/unpaid for the queried period
        overdue: Overdue flag against the queried period and today
        badge: Display classification (paid/overdue/unpaid)
        due_date: Resolved due date, None when it cannot be resolved
        due_text: Human readable due description
    """

    bill: Bill
    status: BillStatus
    overdue: bool
    badge: BadgeStatus
    due_date: date | None
    due_text: str


@dataclass(frozen=True)
class BillSummary:
    """Totals for the current period.

    `due_this_month_total`, `paid_this_month_total` and
    `remaining_this_month_total` only consider bills due in the current
    month. `overdue_total` spans all months. `unpaid_total` and `paid_total`
    cover every bill by derived status.
    """

    due_this_month_total: float = 0.0
    paid_this_month_total: float = 0.0
    remaining_this_month_total: float = 0.0
    overdue_total: float = 0.0
    overdue_count: int = 0
    unpaid_total: float = 0.0
    paid_total: float = 0.0


# =============================================================================
# BILL ENGINE
# =============================================================================


class BillEngine:
    """Pure logic engine for bill status, ordering and totals.

    All methods are static - no instance state.
    """

    # =========================================================================
    # STATUS
    # =========================================================================

    @staticmethod
    def derive_status(bill: Bill, period: PeriodKey) -> BillStatus:
        """Return the effective paid/unpaid state for a period.

        Monthly bills are paid only for the exact period stored in
        `paid_for_month` (string equality). One-time bills report their
        stored status unchanged.
        """
        if isinstance(bill, MonthlyBill):
            if bill.paid_for_month == period:
                return const.BILL_STATUS_PAID
            return const.BILL_STATUS_UNPAID
        return bill.status

    @staticmethod
    def is_paid(bill: Bill, period: PeriodKey) -> bool:
        """Return True if the bill is settled for the period."""
        return BillEngine.derive_status(bill, period) == const.BILL_STATUS_PAID

    @staticmethod
    def resolve_due_date(bill: Bill, period: PeriodKey) -> date | None:
        """Resolve the bill's concrete due date for a period.

        Monthly: the clamped day-of-month inside the period's month.
        One-time: the parsed `due_date`, independent of the period.

        Returns:
            The due date, or None for a missing/malformed date or period.
        """
        if isinstance(bill, MonthlyBill):
            year_month = parse_period(period)
            if year_month is None:
                return None
            return resolve_recurring_due_date(*year_month, bill.day_of_month)
        return parse_calendar_date(bill.due_date)

    # =========================================================================
    # OVERDUE
    # =========================================================================

    @staticmethod
    def is_overdue(bill: Bill, period: PeriodKey, today: date) -> bool:
        """Classify a bill as overdue for a period.

        Rules, in order:
            1. Paid for the period → never overdue
            2. Monthly bill viewed in a month after today's → not overdue
            3. No resolvable due date → not overdue
            4. Overdue iff due date is strictly before today (same day is not)

        Args:
            bill: Bill snapshot
            period: Queried YYYY-MM period
            today: Reference date (time-of-day is ignored)
        """
        if BillEngine.is_paid(bill, period):
            return False

        today = start_of_day(today)

        if isinstance(bill, MonthlyBill):
            year_month = parse_period(period)
            if year_month is not None and is_month_in_future(*year_month, today):
                return False

        due_date = BillEngine.resolve_due_date(bill, period)
        if due_date is None:
            return False

        return due_date < today

    @staticmethod
    def badge(bill: Bill, period: PeriodKey, today: date) -> BadgeStatus:
        """Return the display badge: paid, overdue or unpaid."""
        if BillEngine.is_paid(bill, period):
            return const.BADGE_PAID
        if BillEngine.is_overdue(bill, period, today):
            return const.BADGE_OVERDUE
        return const.BADGE_UNPAID

    @staticmethod
    def due_text(bill: Bill) -> str:
        """Describe when a bill is due.

        Examples:
            "Due day 15 of each month"
            "Due: 2024-03-05"
            "Due: No due date"
        """
        if isinstance(bill, MonthlyBill):
            day = (
                bill.day_of_month
                if bill.day_of_month is not None
                else const.DUE_TEXT_UNKNOWN_DAY
            )
            return const.DUE_TEXT_MONTHLY_FMT.format(day=day)
        return const.DUE_TEXT_ONE_TIME_FMT.format(
            due_date=bill.due_date or const.DUE_TEXT_NO_DUE_DATE
        )

    # =========================================================================
    # ORDERING
    # =========================================================================

    @staticmethod
    def collation_key(name: str) -> str:
        """Locale-aware, case-sensitive collation key for names."""
        try:
            return locale.strxfrm(name)
        except ValueError:
            # strxfrm rejects embedded NUL characters
            return name

    @staticmethod
    def sort_key(
        bill: Bill, period: PeriodKey
    ) -> tuple[int, float, str, str, str]:
        """Build the dashboard ordering key.

        Ascending order of:
            1. Unpaid (0) before paid (1)
            2. Resolved due date, unresolved last (+inf)
            3. Name by locale collation, then raw name
            4. Bill id, so the order is total
        """
        status_rank = 1 if BillEngine.is_paid(bill, period) else 0
        due_date = BillEngine.resolve_due_date(bill, period)
        due_rank = float(due_date.toordinal()) if due_date is not None else math.inf
        return (
            status_rank,
            due_rank,
            BillEngine.collation_key(bill.name),
            bill.name,
            bill.id,
        )

    @staticmethod
    def sort_bills(bills: Iterable[Bill], period: PeriodKey) -> list[Bill]:
        """Return bills in dashboard order for a period (stable sort)."""
        return sorted(bills, key=lambda bill: BillEngine.sort_key(bill, period))

    # =========================================================================
    # AGGREGATION
    # =========================================================================

    @staticmethod
    def is_due_in_month(bill: Bill, year: int, month: int) -> bool:
        """Return True if the bill counts as due in (year, month).

        Monthly bills are due every month, even when their stored day is
        corrupt. One-time bills only count in the month of their parsed due
        date.
        """
        if isinstance(bill, MonthlyBill):
            return True
        due_date = parse_calendar_date(bill.due_date)
        return due_date is not None and (due_date.year, due_date.month) == (year, month)

    @staticmethod
    def summarize(
        bills: Sequence[Bill], period: PeriodKey, today: date
    ) -> BillSummary:
        """Compute summary totals against the current period and today.

        Args:
            bills: Full bill snapshot
            period: Current YYYY-MM period
            today: Current date

        Returns:
            BillSummary with every total rounded to cents.
        """
        year_month = parse_period(period)

        due_this_month: list[float] = []
        paid_this_month: list[float] = []
        overdue: list[float] = []
        unpaid: list[float] = []
        paid: list[float] = []

        for bill in bills:
            is_paid = BillEngine.is_paid(bill, period)
            (paid if is_paid else unpaid).append(bill.amount)

            if year_month is not None and BillEngine.is_due_in_month(
                bill, *year_month
            ):
                due_this_month.append(bill.amount)
                if is_paid:
                    paid_this_month.append(bill.amount)

            if BillEngine.is_overdue(bill, period, today):
                overdue.append(bill.amount)

        due_total = sum_amounts(due_this_month)
        paid_this_month_total = sum_amounts(paid_this_month)

        return BillSummary(
            due_this_month_total=due_total,
            paid_this_month_total=paid_this_month_total,
            remaining_this_month_total=round_amount(
                max(0.0, due_total - paid_this_month_total)
            ),
            overdue_total=sum_amounts(overdue),
            overdue_count=len(overdue),
            unpaid_total=sum_amounts(unpaid),
            paid_total=sum_amounts(paid),
        )

    @staticmethod
    def build_view(
        bills: Iterable[Bill], period: PeriodKey, today: date
    ) -> list[BillView]:
        """Build sorted dashboard rows for a period."""
        return [
            BillView(
                bill=bill,
                status=BillEngine.derive_status(bill, period),
                overdue=BillEngine.is_overdue(bill, period, today),
                badge=BillEngine.badge(bill, period, today),
                due_date=BillEngine.resolve_due_date(bill, period),
                due_text=BillEngine.due_text(bill),
            )
            for bill in BillEngine.sort_bills(bills, period)
        ]
