from .emitter import EventEmitter
from .types import CacheEvent, EventName, Listener

__all__ = [
    "CacheEvent",
    "EventEmitter",
    "EventName",
    "Listener",
]
