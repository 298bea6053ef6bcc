"""In-process publish/subscribe bus.

Views that need to react to state changes subscribe here instead of polling
the persisted store. One bus is shared by every view of a process and handed
around explicitly; listeners run synchronously, in subscription order, on the
publishing call.
"""

from collections.abc import Callable
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

Listener = Callable[[Any], None]


class EventBus:
    def __init__(self) -> None:
        self._listeners: list[tuple[type | None, Listener]] = []

    def subscribe(self, listener: Listener, event_type: type | None = None) -> Callable[[], None]:
        """Register ``listener`` and return a callable that unregisters it.

        With ``event_type`` set, only instances of that type are delivered.
        """
        entry = (event_type, listener)
        self._listeners.append(entry)

        def unsubscribe() -> None:
            if entry in self._listeners:
                self._listeners.remove(entry)

        return unsubscribe

    def publish(self, event: Any) -> None:
        # Snapshot so listeners may unsubscribe while being notified
        for event_type, listener in list(self._listeners):
            if event_type is not None and not isinstance(event, event_type):
                continue
            try:
                listener(event)
            except Exception:
                # Listener failures never reach the publisher
                logger.exception(
                    "Event listener failed",
                    event_type=type(event).__name__,
                    listener=getattr(listener, "__qualname__", repr(listener)),
                )

    @property
    def listener_count(self) -> int:
        return len(self._listeners)
