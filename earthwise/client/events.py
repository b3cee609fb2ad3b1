import logging
from collections import defaultdict
from typing import Any, Callable

logger = logging.getLogger(__name__)

# Broadcast carrying the new token balance as its detail
BALANCE_UPDATE = "balanceUpdate"

EventHandler = Callable[[Any], None]


class EventBus:
    """
    Named broadcast signals with a detail payload.

    Any component holding the bus may publish; handlers run synchronously
    in subscription order. A failing handler is logged and does not stop
    delivery to the others.
    """

    def __init__(self):
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, name: str, handler: EventHandler) -> Callable[[], None]:
        """Register handler; returns a callable that removes it again"""
        self._handlers[name].append(handler)

        def unsubscribe() -> None:
            handlers = self._handlers.get(name, [])
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def publish(self, name: str, detail: Any = None) -> int:
        """Deliver detail to every handler of name; returns how many ran"""
        handlers = list(self._handlers.get(name, []))
        for handler in handlers:
            try:
                handler(detail)
            except Exception:
                logger.exception("Handler for %s event failed", name)
        return len(handlers)

    def handler_count(self, name: str) -> int:
        return len(self._handlers.get(name, []))
