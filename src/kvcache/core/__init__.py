"""Core module for cache models, errors and the background sweep."""

from .errors import (
    ERROR_MESSAGES,
    CacheError,
    CacheFullError,
    ErrorCode,
    InvalidKeyTypeError,
    InvalidTtlTypeError,
    KeyNotFoundError,
    KeysNotArrayError,
)
from .models import CacheEntry, CacheStats, Key, ValueSetItem
from .sweeper import AsyncioScheduler, ScheduledCall, Scheduler, Sweeper, now_ms

__all__ = [
    # Models
    "CacheEntry",
    "CacheStats",
    "Key",
    "ValueSetItem",
    # Errors
    "CacheError",
    "CacheFullError",
    "ErrorCode",
    "ERROR_MESSAGES",
    "InvalidKeyTypeError",
    "InvalidTtlTypeError",
    "KeyNotFoundError",
    "KeysNotArrayError",
    # Scheduling
    "AsyncioScheduler",
    "ScheduledCall",
    "Scheduler",
    "Sweeper",
    "now_ms",
]
