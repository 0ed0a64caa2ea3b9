"""Type definitions for raw bill data exchanged with the external store.

Raw documents arrive as plain dicts keyed by the store's camelCase field
names (const.DATA_BILL_*). They are described here with TypedDict for static
analysis only; nothing here is enforced at runtime. data_builders.py is the
single place that turns these dicts into the typed models in models.py.

IMPORTANT: This file must NOT import from managers or engines.
Only import from typing.
"""

from typing import Literal, NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

BillId = str  # Opaque store identifier
ContextId = str  # Household / family identifier
ISODate = str  # ISO 8601 date string (no time) "2024-03-05"
PeriodKey = str  # Settlement period "2024-03"

BillStatus = Literal["paid", "unpaid"]
BadgeStatus = Literal["paid", "overdue", "unpaid"]


# =============================================================================
# Raw Store Documents
# =============================================================================


class RawBillData(TypedDict, total=False):
    """A bill document as pushed by the store's feed.

    Every field is optional and may carry the wrong type; see
    data_builders.normalize_bill() for the coercion rules.
    """

    id: str
    name: str
    amount: float
    recurrence: str | None
    dueDate: str | None
    status: str
    dayOfMonth: int | None
    paidForMonth: str | None
    autopay: bool
    category: str | None
    accountLast4: str | None


class CreateBillPayload(TypedDict):
    """Validated payload forwarded to BillStore.create_bill()."""

    name: str
    amount: float
    status: BillStatus
    autopay: bool
    recurrence: str | None
    dueDate: str | None
    dayOfMonth: int | None
    paidForMonth: str | None
    category: NotRequired[str]
    accountLast4: NotRequired[str]


class OneTimePaidStateMutation(TypedDict):
    """Mutation shape for one-time bills."""

    status: BillStatus


class MonthlyPaidStateMutation(TypedDict):
    """Mutation shape for monthly bills."""

    paidForMonth: PeriodKey | None


PaidStateMutation = OneTimePaidStateMutation | MonthlyPaidStateMutation
