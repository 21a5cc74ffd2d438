"""kvcache

An in-process key/value cache with per-entry TTL, statistics and synchronous
notifications, plus the deep-copy utility it uses to keep stored values
independent from the caller's references.

This package is self-contained and does not import non-stdlib dependencies.
"""

from .cache import TTLCache, create_cache, estimate_size
from .clone import CloneOptions, ValueKind, clone, clone_prototype, is_instant, is_pattern, is_sequence, pattern_flags
from .core import (
    AsyncioScheduler,
    CacheEntry,
    CacheError,
    CacheFullError,
    CacheStats,
    ErrorCode,
    InvalidKeyTypeError,
    InvalidTtlTypeError,
    KeyNotFoundError,
    KeysNotArrayError,
    Scheduler,
    ValueSetItem,
)
from .event import CacheEvent, EventEmitter
from .utils import CacheConfig

__all__ = [
    "TTLCache",
    "create_cache",
    "estimate_size",
    "CacheConfig",
    "CacheEntry",
    "CacheStats",
    "ValueSetItem",
    "CacheEvent",
    "EventEmitter",
    "Scheduler",
    "AsyncioScheduler",
    "CacheError",
    "CacheFullError",
    "ErrorCode",
    "InvalidKeyTypeError",
    "InvalidTtlTypeError",
    "KeyNotFoundError",
    "KeysNotArrayError",
    "clone",
    "clone_prototype",
    "CloneOptions",
    "ValueKind",
    "is_instant",
    "is_pattern",
    "is_sequence",
    "pattern_flags",
]

__version__ = "0.1.0"
