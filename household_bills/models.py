"""Bill record models.

A bill is a tagged union of two immutable variants:

- OneTimeBill: settled once, carries an optional due date and a stored status.
- MonthlyBill: recurs on a day of month, settled per YYYY-MM period.

Each variant only carries the fields that are meaningful for it, so a
monthly bill has no `status` to misread and a one-time bill has no
`paid_for_month`. Instances are snapshots; the store owns the records.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from . import const
from .type_defs import BillId, BillStatus, ISODate, PeriodKey


@dataclass(frozen=True, kw_only=True)
class BaseBill:
    """Fields shared by both bill variants.

    Attributes:
        id: Opaque store identifier
        name: Display name
        amount: Amount in currency units
        autopay: Settle automatically once the due date arrives
        category: Descriptive only
        account_last4: Masked account reference, descriptive only
    """

    recurrence: ClassVar[str]

    id: BillId
    name: str
    amount: float
    autopay: bool = const.DEFAULT_AUTOPAY
    category: str | None = None
    account_last4: str | None = None

    @property
    def is_monthly(self) -> bool:
        """Return True for recurring monthly bills."""
        return self.recurrence == const.RECURRENCE_MONTHLY


@dataclass(frozen=True, kw_only=True)
class OneTimeBill(BaseBill):
    """A bill settled once, optionally with a due date."""

    recurrence: ClassVar[str] = const.RECURRENCE_ONE_TIME

    due_date: ISODate | None = None
    status: BillStatus = const.BILL_STATUS_UNPAID


@dataclass(frozen=True, kw_only=True)
class MonthlyBill(BaseBill):
    """A bill due every month on `day_of_month`.

    `paid_for_month` names the single period the bill is settled for.
    `day_of_month` is None only when a stored record carried a corrupt
    value; such a bill has no resolvable due date.
    """

    recurrence: ClassVar[str] = const.RECURRENCE_MONTHLY

    day_of_month: int | None = const.DEFAULT_DAY_OF_MONTH
    paid_for_month: PeriodKey | None = None


Bill = OneTimeBill | MonthlyBill
