"""Test helpers for household bills.

Usage:
    from tests.helpers import FakeBillStore, fixed_clock, raw_monthly, raw_one_time
"""

from .builders import fixed_clock, raw_monthly, raw_one_time
from .constants import CONTEXT_A, CONTEXT_B, CURRENT_PERIOD, TODAY
from .fake_store import FakeBillStore, StoreWriteError

__all__ = [
    "CONTEXT_A",
    "CONTEXT_B",
    "CURRENT_PERIOD",
    "TODAY",
    "FakeBillStore",
    "StoreWriteError",
    "fixed_clock",
    "raw_monthly",
    "raw_one_time",
]
