"""Autopay Manager - settles autopay bills once their due date arrives.

Autopay is opportunistic: every time the bill feed delivers a snapshot,
the manager scans it and requests a settlement for each autopay bill that
is unpaid for the current period and due today or earlier.

Idempotency:
    Each attempt is keyed by (bill_id, period), where period is the current
    YYYY-MM for monthly bills and the literal due date for one-time bills.
    A key moves Unprocessed → ProcessedThisSession when its mutation is
    issued, whether or not the store accepts it, so a failing write is
    never retried within the session. Re-scanning an unchanged snapshot is
    therefore a no-op, and scan order does not matter.

The processed-key set lives in AutopayState and is cleared by reset()
whenever the active household context changes.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, NamedTuple

from .. import const
from ..data_builders import build_paid_state_mutation
from ..engines.bill_engine import BillEngine
from ..models import Bill, MonthlyBill
from ..type_defs import BillId, ContextId, PaidStateMutation, PeriodKey
from ..utils.dt_utils import dt_now_local, period_of
from .base_manager import BaseManager, CancellationToken

if TYPE_CHECKING:
    from ..store import BillStore, Clock


class AutopayKey(NamedTuple):
    """Idempotency key: one autopay attempt per bill per settlement period."""

    bill_id: BillId
    period: str


@dataclass(frozen=True)
class AutopayAction:
    """A planned settlement for one eligible bill."""

    bill: Bill
    key: AutopayKey
    mutation: PaidStateMutation


@dataclass
class AutopayState:
    """Per-session autopay bookkeeping.

    Attributes:
        context_id: Household whose bills the processed keys belong to
        processed: Keys already attempted this session

    Reset trigger: AutopayManager.reset() on every household context change.
    """

    context_id: ContextId | None = None
    processed: set[AutopayKey] = field(default_factory=set)

    def is_processed(self, key: AutopayKey) -> bool:
        """Return True if the key was already attempted this session."""
        return key in self.processed

    def mark_processed(self, key: AutopayKey) -> None:
        """Record an attempt for the key."""
        self.processed.add(key)

    def clear(self, context_id: ContextId | None) -> None:
        """Forget every processed key and bind to a new context."""
        self.processed.clear()
        self.context_id = context_id


class AutopayManager(BaseManager):
    """Issues at most one autopay mutation per (bill, period) per session."""

    def __init__(self, store: BillStore, *, clock: Clock = dt_now_local) -> None:
        """Initialize AutopayManager.

        Args:
            store: External bill store collaborator
            clock: Time source used to decide "today"
        """
        super().__init__(store, clock=clock)
        self.state = AutopayState()

    # =========================================================================
    # Planning (pure)
    # =========================================================================

    @staticmethod
    def autopay_key(bill: Bill, period: PeriodKey) -> AutopayKey:
        """Build the idempotency key for a bill in the current period."""
        if isinstance(bill, MonthlyBill):
            return AutopayKey(bill.id, period)
        return AutopayKey(bill.id, bill.due_date or "")

    @staticmethod
    def is_eligible(bill: Bill, period: PeriodKey, today: date) -> bool:
        """Return True if the bill should be auto-settled now.

        Eligible when autopay is on, the bill is unpaid for the current
        period, and its resolved due date is today or earlier.
        """
        if not bill.autopay:
            return False
        if BillEngine.is_paid(bill, period):
            return False
        due_date = BillEngine.resolve_due_date(bill, period)
        return due_date is not None and due_date <= today

    def plan(self, bills: Iterable[Bill], today: date) -> list[AutopayAction]:
        """Plan settlements for every eligible, not yet processed bill.

        Args:
            bills: Current snapshot
            today: Current date

        Returns:
            One AutopayAction per eligible bill whose key is unprocessed.
        """
        period = period_of(today)
        actions: list[AutopayAction] = []
        planned: set[AutopayKey] = set()
        for bill in bills:
            if not self.is_eligible(bill, period, today):
                continue
            key = self.autopay_key(bill, period)
            if self.state.is_processed(key) or key in planned:
                continue
            planned.add(key)
            actions.append(
                AutopayAction(
                    bill=bill,
                    key=key,
                    mutation=build_paid_state_mutation(bill, paid=True, period=period),
                )
            )
        return actions

    # =========================================================================
    # Execution
    # =========================================================================

    def reset(self, context_id: ContextId | None) -> None:
        """Clear processed keys for a new household context."""
        const.LOGGER.debug(
            "Autopay state reset: %s -> %s (%d keys dropped)",
            self.state.context_id,
            context_id,
            len(self.state.processed),
        )
        self.state.clear(context_id)

    async def async_scan(
        self,
        context_id: ContextId,
        bills: Iterable[Bill],
        token: CancellationToken | None = None,
    ) -> list[AutopayAction]:
        """Scan a snapshot and issue settlement mutations.

        Each key is marked processed BEFORE its mutation is awaited, so an
        overlapping pass over the same snapshot cannot issue it again.
        Mutation failures are logged and swallowed; the key stays processed.

        Args:
            context_id: Household the snapshot belongs to
            bills: Snapshot to scan
            token: Cancellation token of the subscription that produced it

        Returns:
            Actions that were attempted in this pass.
        """
        if context_id != self.state.context_id:
            const.LOGGER.debug(
                "Skipping autopay scan for inactive context %s (active: %s)",
                context_id,
                self.state.context_id,
            )
            return []

        today = self.today()
        attempted: list[AutopayAction] = []

        for action in self.plan(bills, today):
            superseded = context_id != self.state.context_id
            if superseded or (token is not None and token.is_cancelled):
                const.LOGGER.debug(
                    "Autopay pass for %s cancelled; %d action(s) skipped",
                    context_id,
                    len(attempted),
                )
                break
            if self.state.is_processed(action.key):
                continue

            self.state.mark_processed(action.key)
            attempted.append(action)
            const.LOGGER.info(
                "Autopay: settling bill '%s' (%s) for %s",
                action.bill.name,
                action.bill.id,
                action.key.period,
            )

            outcome = const.AUTOPAY_OUTCOME_SUCCESS
            try:
                await self.store.set_bill_paid_state(
                    context_id, action.bill.id, action.mutation
                )
            except Exception as err:  # noqa: BLE001
                outcome = const.AUTOPAY_OUTCOME_FAILED
                const.LOGGER.warning(
                    "Autopay mutation failed for bill '%s' (%s), period %s: %s",
                    action.bill.name,
                    action.bill.id,
                    action.key.period,
                    err,
                )

            self.emit(
                const.EVENT_AUTOPAY_ATTEMPTED,
                context_id=context_id,
                bill_id=action.bill.id,
                period=action.key.period,
                outcome=outcome,
            )

        return attempted

    async def async_shutdown(self) -> None:
        """Drop session state."""
        self.reset(None)
