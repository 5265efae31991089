"""Event bus for pub/sub communication."""

import logging
from collections import defaultdict
from typing import Callable, TypeVar

from gavel.events.types import AuctionEvent

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=AuctionEvent)
EventHandler = Callable[[AuctionEvent], None]


class EventBus:
    """
    Synchronous pub/sub bus between the auction core and its observers.

    The engine and sequencer emit events without knowing who listens:
    the auction log, the API's websocket push, the CLI printer.

    Delivery is in subscription order. A handler that raises is logged
    and skipped; the remaining handlers still receive the event and the
    emitter never sees the exception.

    Example:
        bus = EventBus()

        def on_sold(event: PlayerSoldEvent):
            print(f"{event.player.name} sold to {event.team.name}")

        bus.subscribe(PlayerSoldEvent, on_sold)
    """

    def __init__(self) -> None:
        self._handlers: dict[type[AuctionEvent], list[EventHandler]] = defaultdict(list)
        self._global_handlers: list[EventHandler] = []

    def subscribe(
        self,
        event_type: type[T],
        handler: Callable[[T], None],
    ) -> None:
        """Register a handler for a specific event type."""
        self._handlers[event_type].append(handler)

    def subscribe_all(self, handler: EventHandler) -> None:
        """Register a handler for all events."""
        self._global_handlers.append(handler)

    def unsubscribe(
        self,
        event_type: type[T],
        handler: Callable[[T], None],
    ) -> None:
        """Remove a handler for a specific event type."""
        if handler in self._handlers[event_type]:
            self._handlers[event_type].remove(handler)

    def unsubscribe_all(self, handler: EventHandler) -> None:
        """Remove a global handler."""
        if handler in self._global_handlers:
            self._global_handlers.remove(handler)

    def emit(self, event: AuctionEvent) -> None:
        """
        Deliver an event to every registered handler.

        Handlers for the specific event type are called first,
        then global handlers that receive all events.

        Args:
            event: The event to emit
        """
        # Copy so handlers may unsubscribe while being called
        handlers = list(self._handlers[type(event)]) + list(self._global_handlers)
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception(
                    f"Event handler {getattr(handler, '__qualname__', handler)!s} "
                    f"failed on {type(event).__name__}"
                )

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()
        self._global_handlers.clear()

    def handler_count(self, event_type: type[AuctionEvent] | None = None) -> int:
        """
        Get the number of registered handlers.

        Args:
            event_type: If provided, count handlers for this type only.
                       If None, count all handlers including global.
        """
        if event_type is None:
            total = sum(len(handlers) for handlers in self._handlers.values())
            return total + len(self._global_handlers)
        return len(self._handlers[event_type])
