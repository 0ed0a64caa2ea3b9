"""Manager modules for household bills.

Managers orchestrate workflows and coordinate between engines.
They are stateful, event-aware, and talk to the external store.
"""

from .autopay_manager import AutopayAction, AutopayKey, AutopayManager, AutopayState
from .base_manager import BaseManager, CancellationToken
from .bill_manager import (
    BillManager,
    BillNotFoundError,
    Dashboard,
    NoActiveContextError,
)

__all__ = [
    "AutopayAction",
    "AutopayKey",
    "AutopayManager",
    "AutopayState",
    "BaseManager",
    "BillManager",
    "BillNotFoundError",
    "CancellationToken",
    "Dashboard",
    "NoActiveContextError",
]
