"""Engine modules for household bills.

Contains pure computation engines:
- bill_engine: Derived status, overdue classification, ordering, totals
- calendar_engine: Per-day projection of bills onto a displayed month
"""

from .bill_engine import BillEngine, BillSummary, BillView
from .calendar_engine import CalendarDay, CalendarEngine, CalendarEvent, CalendarMonth

__all__ = [
    "BillEngine",
    "BillSummary",
    "BillView",
    "CalendarDay",
    "CalendarEngine",
    "CalendarEvent",
    "CalendarMonth",
]
