"""Bill Manager - session orchestration for one active household.

Wires the external feed to the engines and the autopay manager:

    store.subscribe(context) ──► _on_snapshot ──► normalize ──► latest bills
                                                    │
                                                    ├──► EVENT_BILLS_UPDATED listeners
                                                    └──► AutopayManager.async_scan (fire-and-forget)

Views (dashboard rows, summary totals, calendar month) are computed on
demand from the latest snapshot. Switching household disposes the old
subscription, cancels its token and resets autopay state before the new
subscription starts.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING, Any

from .. import const
from ..data_builders import (
    BillValidationError,
    build_bill_input,
    build_paid_state_mutation,
    normalize_bills,
)
from ..engines.bill_engine import BillEngine, BillSummary, BillView
from ..engines.calendar_engine import CalendarEngine, CalendarMonth
from ..models import Bill
from ..type_defs import BillId, BillStatus, ContextId, PeriodKey
from ..utils.dt_utils import dt_now_local, parse_period
from .autopay_manager import AutopayManager
from .base_manager import BaseManager, CancellationToken

if TYPE_CHECKING:
    from ..store import BillStore, Clock, Unsubscribe


# ==============================================================================
# EXCEPTIONS
# ==============================================================================


class BillNotFoundError(Exception):
    """Raised when a bill id is not in the current snapshot.

    Attributes:
        bill_id: The id that was looked up
    """

    def __init__(self, bill_id: BillId) -> None:
        """Initialize BillNotFoundError."""
        self.bill_id = bill_id
        super().__init__(const.ERROR_BILL_NOT_FOUND_FMT.format(bill_id))


class NoActiveContextError(Exception):
    """Raised when a mutation is requested with no household active."""

    def __init__(self) -> None:
        """Initialize NoActiveContextError."""
        super().__init__(const.ERROR_NO_ACTIVE_CONTEXT)


# ==============================================================================
# VIEWS
# ==============================================================================


@dataclass(frozen=True)
class Dashboard:
    """Summary tab view for the current period."""

    period: PeriodKey
    rows: list[BillView]
    summary: BillSummary


# ==============================================================================
# BILL MANAGER
# ==============================================================================


class BillManager(BaseManager):
    """Owns the feed subscription and derived views for one household."""

    def __init__(
        self,
        store: BillStore,
        *,
        clock: Clock = dt_now_local,
        max_visible_events: int = const.DEFAULT_CALENDAR_MAX_VISIBLE_EVENTS,
    ) -> None:
        """Initialize BillManager.

        Args:
            store: External bill store collaborator
            clock: Time source; shared with the autopay manager
            max_visible_events: Events per calendar day cell before overflow
        """
        super().__init__(store, clock=clock)
        self.autopay = AutopayManager(store, clock=clock)
        self._max_visible_events = max_visible_events

        self._context_id: ContextId | None = None
        self._unsubscribe: Unsubscribe | None = None
        self._token: CancellationToken | None = None
        self._bills: list[Bill] = []
        self._autopay_tasks: set[asyncio.Task[Any]] = set()

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def context_id(self) -> ContextId | None:
        """Active household id, or None."""
        return self._context_id

    @property
    def bills(self) -> list[Bill]:
        """Latest normalized snapshot, in feed order."""
        return list(self._bills)

    # =========================================================================
    # Subscription lifecycle
    # =========================================================================

    async def async_set_context(self, context_id: ContextId | None) -> None:
        """Switch the active household.

        Disposes the previous subscription, cancels its in-flight autopay
        passes and clears processed autopay keys, then subscribes to the new
        household's feed. Passing None just tears down.
        """
        if context_id == self._context_id and (
            context_id is None or self._unsubscribe is not None
        ):
            return

        previous = self._context_id
        self._teardown_subscription()
        self._context_id = context_id
        self._bills = []
        self.autopay.reset(context_id)
        self.emit(
            const.EVENT_CONTEXT_CHANGED, previous=previous, context_id=context_id
        )

        if context_id is None:
            return

        token = CancellationToken(context_id)
        self._token = token
        const.LOGGER.debug("Subscribing to bills for household %s", context_id)
        self._unsubscribe = self.store.subscribe(
            context_id, partial(self._on_snapshot, context_id, token)
        )

    def _teardown_subscription(self) -> None:
        """Dispose the current feed observer and cancel its token."""
        if self._token is not None:
            self._token.cancel()
            self._token = None
        if self._unsubscribe is not None:
            unsubscribe, self._unsubscribe = self._unsubscribe, None
            unsubscribe()

    def _on_snapshot(
        self,
        context_id: ContextId,
        token: CancellationToken,
        raw_bills: Sequence[Mapping[str, Any]],
    ) -> None:
        """Handle a full snapshot from the feed."""
        if token.is_cancelled:
            const.LOGGER.debug(
                "Ignoring snapshot for superseded household %s", context_id
            )
            return

        self._bills = normalize_bills(raw_bills)
        const.LOGGER.debug(
            "Received %d bill(s) for household %s", len(self._bills), context_id
        )
        self.emit(
            const.EVENT_BILLS_UPDATED, context_id=context_id, count=len(self._bills)
        )
        self._schedule_autopay(context_id, token, self._bills)

    def _schedule_autopay(
        self, context_id: ContextId, token: CancellationToken, bills: list[Bill]
    ) -> None:
        """Start an autopay pass without waiting for it."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            const.LOGGER.warning(
                "No running event loop; autopay pass for %s skipped", context_id
            )
            return

        task = loop.create_task(self.autopay.async_scan(context_id, bills, token))
        self._autopay_tasks.add(task)
        task.add_done_callback(self._autopay_tasks.discard)

    async def async_wait_for_autopay(self) -> None:
        """Wait until every in-flight autopay pass has finished."""
        while self._autopay_tasks:
            await asyncio.gather(*list(self._autopay_tasks))

    async def async_shutdown(self) -> None:
        """Tear down the subscription and stop further autopay writes."""
        await self.async_set_context(None)
        await self.autopay.async_shutdown()

    # =========================================================================
    # Views
    # =========================================================================

    def get_bill(self, bill_id: BillId) -> Bill:
        """Return a bill from the latest snapshot.

        Raises:
            BillNotFoundError: If the id is not in the snapshot
        """
        for bill in self._bills:
            if bill.id == bill_id:
                return bill
        raise BillNotFoundError(bill_id)

    def get_dashboard(self) -> Dashboard:
        """Build the sorted rows and summary totals for the current period."""
        today = self.today()
        period = self.current_period()
        return Dashboard(
            period=period,
            rows=BillEngine.build_view(self._bills, period, today),
            summary=BillEngine.summarize(self._bills, period, today),
        )

    def get_calendar(
        self, year: int | None = None, month: int | None = None
    ) -> CalendarMonth:
        """Project the latest snapshot onto a month (defaults to this month)."""
        today = self.today()
        return CalendarEngine.project_month(
            self._bills,
            year if year is not None else today.year,
            month if month is not None else today.month,
            today,
            max_visible=self._max_visible_events,
        )

    # =========================================================================
    # Mutations
    # =========================================================================

    def _require_context(self) -> ContextId:
        if self._context_id is None:
            raise NoActiveContextError
        return self._context_id

    async def async_toggle_paid(
        self, bill_id: BillId, viewed_period: PeriodKey | None = None
    ) -> BillStatus:
        """Flip a bill's derived status for the viewed period.

        The dashboard toggles against the current period; the calendar
        passes the month it is displaying. Monthly bills are settled or
        reopened for exactly that period; one-time bills flip `status`.
        Store errors propagate to the caller.

        Returns:
            The status that was requested.

        Raises:
            NoActiveContextError: If no household is active
            BillNotFoundError: If the bill is not in the current snapshot
            BillValidationError: If viewed_period is not a YYYY-MM period
        """
        context_id = self._require_context()
        bill = self.get_bill(bill_id)

        period = viewed_period or self.current_period()
        if parse_period(period) is None:
            raise BillValidationError(
                field=const.FIELD_PERIOD,
                message=const.ERROR_PERIOD_INVALID_FMT.format(period),
            )

        mark_paid = not BillEngine.is_paid(bill, period)
        mutation = build_paid_state_mutation(bill, paid=mark_paid, period=period)
        const.LOGGER.debug(
            "Toggling bill '%s' (%s) for %s: %s", bill.name, bill.id, period, mutation
        )
        await self.store.set_bill_paid_state(context_id, bill.id, mutation)
        return const.BILL_STATUS_PAID if mark_paid else const.BILL_STATUS_UNPAID

    async def async_create_bill(self, user_input: Mapping[str, Any]) -> BillId | None:
        """Validate input and forward it to the store.

        Raises:
            NoActiveContextError: If no household is active
            BillValidationError: If the input is invalid (store not called)
        """
        context_id = self._require_context()
        payload = build_bill_input(user_input)
        const.LOGGER.debug("Creating bill '%s' in %s", payload["name"], context_id)
        return await self.store.create_bill(context_id, payload)

    def add_listener(
        self, callback: Callable[[dict[str, Any]], None]
    ) -> Callable[[], None]:
        """Register a view-change observer; returns its disposer."""
        return self.listen(const.EVENT_BILLS_UPDATED, callback)
