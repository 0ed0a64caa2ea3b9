"""Household bills core.

Tracks one-time and monthly bills for a household: derived paid status per
month, overdue classification, dashboard ordering and totals, calendar
projection, and once-per-period autopay settlement. Persistence lives
behind the BillStore protocol.
"""

from .data_builders import BillValidationError
from .managers import (
    AutopayManager,
    BillManager,
    BillNotFoundError,
    CancellationToken,
    Dashboard,
    NoActiveContextError,
)
from .models import Bill, MonthlyBill, OneTimeBill
from .store import BillStore

__all__ = [
    "AutopayManager",
    "Bill",
    "BillManager",
    "BillNotFoundError",
    "BillStore",
    "BillValidationError",
    "CancellationToken",
    "Dashboard",
    "MonthlyBill",
    "NoActiveContextError",
    "OneTimeBill",
]
