"""Synchronous event bus connecting the engine to whatever renders it.

Handlers subscribe to an event class and receive instances of that class
and of its subclasses, so subscribing to :class:`Event` observes every
notification. Handlers run inline, in subscription order, inside the
engine operation that published the event.

Event Handler Contract:
    Handlers MUST be synchronous. A handler that needs async work should
    schedule it with ``asyncio.create_task()``.
"""

import asyncio
from typing import Callable, Type, TypeVar

from mentionkit.logger import get_logger

from .types import Event

logger = get_logger("events.bus")

T = TypeVar("T", bound=Event)

EventHandler = Callable[[Event], None]
Unsubscribe = Callable[[], None]


class EventBus:
    """Type-routed publish/subscribe hub.

    Example:
        ```python
        bus = EventBus()
        stop = bus.subscribe(MenuOpened, lambda e: render(e.items))
        ...
        stop()
        ```

    Not thread-safe; engine and handlers share one event loop.
    """

    def __init__(self):
        self._handlers: dict[Type[Event], list[EventHandler]] = {}

    def subscribe(self, event_type: Type[T], handler: Callable[[T], None]) -> Unsubscribe:
        """
        Register ``handler`` for ``event_type`` and its subclasses.

        Subscribing the same handler twice has no effect.

        Returns:
            A callable removing the subscription

        Raises:
            TypeError: If handler is a coroutine function
        """
        if asyncio.iscoroutinefunction(handler):
            raise TypeError(
                f"Event handler {getattr(handler, '__name__', handler)!r} is async; "
                f"subscribe a synchronous function that schedules the coroutine instead"
            )

        handlers = self._handlers.setdefault(event_type, [])
        if handler not in handlers:
            handlers.append(handler)  # type: ignore[arg-type]
            logger.debug(f"Subscribed handler to {event_type.__name__}")

        return lambda: self.unsubscribe(event_type, handler)

    def unsubscribe(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        """Remove a subscription. Unknown handlers are ignored."""
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)  # type: ignore[arg-type]
            logger.debug(f"Unsubscribed handler from {event_type.__name__}")

    def publish(self, event: Event) -> None:
        """
        Deliver ``event`` to every matching handler.

        Handlers of the concrete class run first, then those of its base
        classes. A failing handler is logged and does not stop delivery.
        """
        handlers = self._matching_handlers(type(event))
        if not handlers:
            return

        logger.debug(f"Publishing {type(event).__name__} to {len(handlers)} handler(s)")
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception(f"Event handler failed for {type(event).__name__}")

    def _matching_handlers(self, event_type: Type[Event]) -> list[EventHandler]:
        matched: list[EventHandler] = []
        for cls in event_type.__mro__:
            for handler in self._handlers.get(cls, ()):
                if handler not in matched:
                    matched.append(handler)
            if cls is Event:
                break
        return matched

    def clear(self) -> None:
        self._handlers.clear()

    def has_subscribers(self, event_type: Type[Event]) -> bool:
        """True when publishing ``event_type`` would reach at least one handler."""
        return bool(self._matching_handlers(event_type))
