from __future__ import annotations

import logging
from typing import Any, Dict, List

from .types import CacheEvent, EventName, Listener

_logger = logging.getLogger(__name__)


class EventEmitter:
    """Synchronous publish/subscribe with one ordered listener list per event.

    Listeners run in registration order before ``publish`` returns. A listener
    that raises aborts delivery and the exception reaches the publisher.
    """

    def __init__(self) -> None:
        self._listeners: Dict[CacheEvent, List[Listener]] = {event: [] for event in CacheEvent}

    def subscribe(self, event: EventName, listener: Listener) -> None:
        if not callable(listener):
            raise TypeError("listener must be callable")
        self._listeners[CacheEvent(event)].append(listener)

    def unsubscribe(self, event: EventName, listener: Listener) -> bool:
        listeners = self._listeners[CacheEvent(event)]
        try:
            listeners.remove(listener)
        except ValueError:
            _logger.debug("Listener %r was not subscribed to %s", listener, event)
            return False
        return True

    def listeners(self, event: EventName) -> List[Listener]:
        return list(self._listeners[CacheEvent(event)])

    def publish(self, event: CacheEvent, *payload: Any) -> int:
        # Snapshot so (un)subscribing during delivery does not affect this round
        delivered = 0
        for listener in tuple(self._listeners[event]):
            listener(*payload)
            delivered += 1
        return delivered
