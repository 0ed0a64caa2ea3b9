"""Base manager class for household bill managers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import dt_now_local, period_of, start_of_day

if TYPE_CHECKING:
    from ..store import BillStore, Clock


class CancellationToken:
    """Cooperative cancellation flag scoped to one feed subscription.

    Passes spawned for a subscription check the token before each store
    mutation and stop once it is cancelled (context switch or teardown).
    """

    __slots__ = ("_cancelled", "label")

    def __init__(self, label: str | None = None) -> None:
        """Initialize an active token.

        Args:
            label: Optional name for log messages (usually the context id)
        """
        self.label = label
        self._cancelled = False

    def cancel(self) -> None:
        """Cancel the token. Idempotent."""
        self._cancelled = True

    @property
    def is_cancelled(self) -> bool:
        """Return True once cancel() was called."""
        return self._cancelled

    def __repr__(self) -> str:
        """Return a debug representation."""
        state = "cancelled" if self._cancelled else "active"
        return f"CancellationToken({self.label!r}, {state})"


class BaseManager(ABC):
    """Base class for household bill managers with scoped event support.

    Provides:
    - The store collaborator and an injectable clock
    - Instance-scoped event emitting (emit)
    - Instance-scoped event listening returning a disposer (listen)

    Subclasses must implement:
    - async_shutdown(): Stop work tied to the manager's lifetime
    """

    def __init__(self, store: BillStore, *, clock: Clock = dt_now_local) -> None:
        """Initialize manager.

        Args:
            store: External bill store collaborator
            clock: Time source; tests inject a fixed instant
        """
        self.store = store
        self._clock = clock
        self._listeners: dict[str, list[Callable[[dict[str, Any]], None]]] = {}

    # =========================================================================
    # Time
    # =========================================================================

    def now(self) -> datetime:
        """Return the current instant from the injected clock."""
        return self._clock()

    def today(self) -> date:
        """Return today's calendar date from the injected clock."""
        return start_of_day(self._clock())

    def current_period(self) -> str:
        """Return the current YYYY-MM settlement period."""
        return period_of(self.today())

    # =========================================================================
    # Events
    # =========================================================================

    def emit(self, event: str, **payload: Any) -> None:
        """Emit an instance-scoped event to registered listeners.

        Listener failures are logged and do not interrupt other listeners.

        Example:
            self.emit(
                const.EVENT_AUTOPAY_ATTEMPTED,
                bill_id=bill_id,
                period="2024-04",
                outcome=const.AUTOPAY_OUTCOME_SUCCESS,
            )
        """
        const.LOGGER.debug(
            "Emitting event '%s' from %s with payload keys: %s",
            event,
            self.__class__.__name__,
            list(payload.keys()),
        )
        for callback in list(self._listeners.get(event, [])):
            try:
                callback(payload)
            except Exception:
                const.LOGGER.exception(
                    "Listener %r failed handling event '%s'", callback, event
                )

    def listen(
        self, event: str, callback: Callable[[dict[str, Any]], None]
    ) -> Callable[[], None]:
        """Subscribe to an instance-scoped event.

        Args:
            event: EVENT_* constant to listen for
            callback: Called with the payload dict

        Returns:
            Disposer that removes the listener (safe to call twice).
        """
        callbacks = self._listeners.setdefault(event, [])
        callbacks.append(callback)
        const.LOGGER.debug(
            "Manager %s listening to event '%s'", self.__class__.__name__, event
        )

        def _remove() -> None:
            if callback in callbacks:
                callbacks.remove(callback)

        return _remove

    @abstractmethod
    async def async_shutdown(self) -> None:
        """Stop all work tied to this manager's lifetime."""
