from __future__ import annotations

import array
import asyncio
import concurrent.futures
import datetime
import enum
import numbers
import re
import types
import typing as t
from collections.abc import MutableMapping, MutableSequence, MutableSet


class ValueKind(enum.Enum):
    NULL = "null"
    PRIMITIVE = "primitive"
    MAP = "map"
    SET = "set"
    DEFERRED = "deferred"
    SEQUENCE = "sequence"
    PATTERN = "pattern"
    INSTANT = "instant"
    BUFFER = "buffer"
    ERROR = "error"
    OBJECT = "object"


# Immutable leaf values; copying returns the same object. Callables are
# leaves as well, see classify().
_ATOMIC_TYPES: t.Tuple[type, ...] = (
    str,
    bytes,
    numbers.Number,
    enum.Enum,
    range,
    slice,
    types.ModuleType,
    types.CodeType,
    property,
)

_BUFFER_TYPES: t.Tuple[type, ...] = (bytearray, array.array)

# Flag letters in the order Python prints inline flags.
_FLAG_LETTERS: t.Tuple[t.Tuple[str, int], ...] = (
    ("a", re.ASCII),
    ("i", re.IGNORECASE),
    ("L", re.LOCALE),
    ("m", re.MULTILINE),
    ("s", re.DOTALL),
    ("u", re.UNICODE),
    ("x", re.VERBOSE),
)


def is_sequence(value: t.Any) -> bool:
    return isinstance(value, (MutableSequence, tuple)) and not isinstance(value, _BUFFER_TYPES)


def is_instant(value: t.Any) -> bool:
    return isinstance(value, datetime.date)


def is_pattern(value: t.Any) -> bool:
    return isinstance(value, re.Pattern)


def is_deferred(value: t.Any) -> bool:
    return asyncio.isfuture(value) or isinstance(value, concurrent.futures.Future)


def pattern_flags(pattern: re.Pattern) -> str:
    """Serialize the active flags of a compiled pattern, e.g. ``"imu"``."""
    return "".join(letter for letter, flag in _FLAG_LETTERS if pattern.flags & flag)


def has_instance_state(value: t.Any) -> bool:
    return hasattr(value, "__dict__") or bool(slot_names(type(value)))


def slot_names(cls: type) -> t.List[str]:
    names: t.List[str] = []
    for klass in cls.__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name in ("__dict__", "__weakref__"):
                continue
            if name.startswith("__") and not name.endswith("__"):
                name = f"_{klass.__name__.lstrip('_')}{name}"
            if name not in names:
                names.append(name)
    return names


def classify(value: t.Any) -> ValueKind:
    """Map a value onto the closed set of kinds the isolator dispatches on.

    First match wins; the order matters for types that satisfy several
    checks (a ``defaultdict`` is a map, never a generic object).
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, _ATOMIC_TYPES) or callable(value):
        return ValueKind.PRIMITIVE
    if isinstance(value, MutableMapping):
        return ValueKind.MAP
    if isinstance(value, (MutableSet, frozenset)):
        return ValueKind.SET
    if is_deferred(value):
        return ValueKind.DEFERRED
    if is_sequence(value):
        return ValueKind.SEQUENCE
    if is_pattern(value):
        return ValueKind.PATTERN
    if is_instant(value):
        return ValueKind.INSTANT
    if isinstance(value, _BUFFER_TYPES):
        return ValueKind.BUFFER
    if isinstance(value, BaseException):
        return ValueKind.ERROR
    if has_instance_state(value):
        return ValueKind.OBJECT
    # opaque: C-level objects and sentinels without instance state
    return ValueKind.PRIMITIVE
