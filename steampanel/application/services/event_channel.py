"""Event channel — a typed publish point with symmetric subscribe/unsubscribe."""

import logging
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

EventT = TypeVar("EventT")
EventHandler = Callable[[EventT], None]


class EventChannel(Generic[EventT]):
    """Synchronous observer list owned by one publisher.

    Subscribing the same handler twice, or unsubscribing one that is not
    registered, is a no-op. A failing handler is logged and does not stop
    delivery to the remaining handlers.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._handlers: list[EventHandler] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    def subscribe(self, handler: EventHandler) -> None:
        if handler not in self._handlers:
            self._handlers.append(handler)

    def unsubscribe(self, handler: EventHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    def publish(self, event: EventT) -> None:
        for handler in tuple(self._handlers):
            try:
                handler(event)
            except Exception:
                logger.exception("Subscriber %r on %s failed", handler, self._name)
