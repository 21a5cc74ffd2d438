from __future__ import annotations

import array
import inspect
import json
import typing as t
from collections.abc import Mapping

from kvcache.clone import is_deferred, is_sequence
from kvcache.utils.config import CacheConfig

# fixed cost of numbers and booleans
SCALAR_SIZE = 8


def serialize(value: t.Any) -> str:
    """Compact JSON text used for ``force_string`` storage and sizing."""
    return json.dumps(value, separators=(",", ":"), default=str)


def key_size(key_str: str) -> int:
    return len(key_str)


def estimate_size(value: t.Any, config: CacheConfig) -> int:
    """Approximate byte cost of ``value`` for the cache statistics.

    Never raises; values it cannot size count as 0.
    """
    if isinstance(value, str):
        return len(value)
    if config.force_string:
        try:
            return len(serialize(value))
        except (TypeError, ValueError, RecursionError):
            # circular or too deeply nested structures
            return 0
    if is_sequence(value):
        return config.array_value_size * len(value)
    if isinstance(value, (bool, int, float)):
        return SCALAR_SIZE
    if is_deferred(value) or inspect.isawaitable(value):
        # the eventual result cannot be sized synchronously
        return config.promise_value_size
    if isinstance(value, (bytes, bytearray, memoryview, array.array)):
        return memoryview(value).nbytes
    if isinstance(value, Mapping):
        return config.object_value_size * len(value)
    state = getattr(value, "__dict__", None)
    if isinstance(state, dict) and not callable(value):
        return config.object_value_size * len(state)
    return 0
