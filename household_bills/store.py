# File: store.py
"""Contracts for the external collaborators the core talks to.

The core never decides how bills are persisted. It consumes a push-based
feed and a small mutation interface, both described here as a Protocol,
plus an injectable clock. Any backend (document database, REST client,
in-memory fake) that satisfies BillStore can drive the managers.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from .type_defs import BillId, ContextId, CreateBillPayload, PaidStateMutation

# Feed callback: receives the FULL current snapshot of raw bill documents
SnapshotCallback = Callable[[Sequence[Mapping[str, Any]]], None]

# Disposer returned by subscribe()
Unsubscribe = Callable[[], None]

# Replaceable time source
Clock = Callable[[], datetime]


@runtime_checkable
class BillStore(Protocol):
    """Bill storage collaborator.

    subscribe() must deliver complete, self-consistent snapshots (never
    deltas) every time anything in the household's bill list changes.
    """

    def subscribe(
        self, context_id: ContextId, on_change: SnapshotCallback
    ) -> Unsubscribe:
        """Register a feed observer and return its disposer."""

    async def create_bill(
        self, context_id: ContextId, payload: CreateBillPayload
    ) -> BillId | None:
        """Persist a new, already validated bill."""

    async def set_bill_paid_state(
        self,
        context_id: ContextId,
        bill_id: BillId,
        mutation: PaidStateMutation,
    ) -> None:
        """Apply a paid-state mutation ({status} or {paidForMonth})."""
