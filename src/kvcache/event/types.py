from __future__ import annotations

import enum
import typing as t


class CacheEvent(str, enum.Enum):
    SET = "set"
    DEL = "del"
    EXPIRED = "expired"
    FLUSH = "flush"
    FLUSH_STATS = "flush_stats"


# set/del/expired listeners receive (key, value); flush/flush_stats receive nothing
Listener = t.Callable[..., None]
EventName = t.Union[CacheEvent, str]

__all__ = [
    "CacheEvent",
    "EventName",
    "Listener",
]
