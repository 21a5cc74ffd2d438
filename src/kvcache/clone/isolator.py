from __future__ import annotations

import asyncio
import collections
import concurrent.futures
import datetime
import inspect
import logging
import math
import re
import types
import typing as t
from collections.abc import Mapping
from dataclasses import dataclass

from .kinds import ValueKind, classify, slot_names

_logger = logging.getLogger(__name__)


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


UNSET: t.Any = _Unset()

_OPTION_ALIASES = {"includeNonEnumerable": "include_non_enumerable"}


@dataclass
class CloneOptions:
    circular: bool = True
    depth: float = math.inf
    prototype: t.Any = UNSET
    include_non_enumerable: bool = False


def clone(
    value: t.Any,
    circular: t.Union[bool, CloneOptions, t.Mapping[str, t.Any]] = True,
    depth: t.Optional[float] = math.inf,
    prototype: t.Any = UNSET,
    include_non_enumerable: bool = False,
) -> t.Any:
    """Deep copy ``value`` so that the copy shares no mutable state with it.

    The options can be passed positionally or as a single ``CloneOptions``
    (or a mapping with the same keys) in place of ``circular``.

    :param circular: track visited containers so shared and self references
        resolve to their copies. With ``False`` a cyclic graph recurses until
        ``RecursionError``.
    :param depth: levels to copy. Below the cutoff the original objects are
        returned as-is, so the copy is only independent down to that level.
    :param prototype: class used for copied generic objects instead of the
        source class. An instance works too: attribute reads on the copy then
        fall through to it. ``None`` produces a plain ``SimpleNamespace``.
    :param include_non_enumerable: also copy dunder-named instance attributes,
        which are otherwise left behind.
    """
    if isinstance(circular, CloneOptions):
        options = circular
    elif isinstance(circular, Mapping):
        options = CloneOptions(**{_OPTION_ALIASES.get(k, k): v for k, v in circular.items()})
    else:
        options = CloneOptions(circular, depth, prototype, include_non_enumerable)
    if options.circular is None:
        options.circular = True
    if options.depth is None:
        options.depth = math.inf
    return _Isolator(options).copy(value, options.depth)


class Derived:
    """Empty object whose attribute reads fall through to ``parent``.

    Writes land on the derived object and shadow the parent's values.
    """

    def __init__(self, parent: t.Any) -> None:
        object.__setattr__(self, "_parent", parent)

    def __getattr__(self, name: str) -> t.Any:
        if name == "_parent":
            raise AttributeError(name)
        return getattr(self._parent, name)

    def __repr__(self) -> str:
        return f"Derived({self._parent!r})"


def clone_prototype(parent: t.Any) -> t.Any:
    """Flat override layer over ``parent`` without copying any of its fields.

    Use for overriding settings on flat configuration objects; nested values
    are shared with the parent.
    """
    if parent is None:
        return None
    if isinstance(parent, Mapping):
        return collections.ChainMap({}, parent)
    return Derived(parent)


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def _empty_like(value: t.Any) -> t.Any:
    cls = type(value)
    if isinstance(value, collections.defaultdict):
        return cls(value.default_factory)
    if isinstance(value, collections.deque):
        return cls(maxlen=value.maxlen)
    try:
        return cls()
    except TypeError:
        # subclasses with required constructor arguments
        return cls.__new__(cls)


def _instantiate(cls: type, source: t.Any = None) -> t.Any:
    getnewargs = getattr(source, "__getnewargs__", None)
    args = getnewargs() if getnewargs is not None else ()
    return cls.__new__(cls, *args)


def _instance_fields(source: t.Any) -> t.Iterator[t.Tuple[str, t.Any]]:
    state = getattr(source, "__dict__", None)
    if isinstance(state, dict):
        for name, item in list(state.items()):
            if isinstance(name, str):
                yield name, item
    for name in slot_names(type(source)):
        try:
            yield name, getattr(source, name)
        except AttributeError:
            # unset slot
            continue


def _is_read_only(cls: type, name: str) -> bool:
    attr = inspect.getattr_static(cls, name, None)
    return isinstance(attr, property) and attr.fset is None


class _Isolator:
    """Single copy operation; the visited table lives as long as the copy."""

    _handlers: t.ClassVar[t.Dict[ValueKind, str]] = {
        ValueKind.MAP: "_copy_map",
        ValueKind.SET: "_copy_set",
        ValueKind.DEFERRED: "_copy_deferred",
        ValueKind.SEQUENCE: "_copy_sequence",
        ValueKind.PATTERN: "_copy_pattern",
        ValueKind.INSTANT: "_copy_instant",
        ValueKind.BUFFER: "_copy_buffer",
        ValueKind.ERROR: "_copy_error",
        ValueKind.OBJECT: "_copy_object",
    }

    def __init__(self, options: CloneOptions) -> None:
        self._circular = bool(options.circular)
        self._prototype = options.prototype
        self._include_hidden = bool(options.include_non_enumerable)
        # id(source) -> (source, copy); holding the source keeps its id stable
        self._visited: t.Dict[int, t.Tuple[t.Any, t.Any]] = {}

    def copy(self, value: t.Any, depth: float) -> t.Any:
        kind = classify(value)
        if kind is ValueKind.NULL:
            return None
        if kind is ValueKind.PRIMITIVE:
            return value
        if depth == 0:
            return value
        if self._circular:
            seen = self._visited.get(id(value))
            if seen is not None:
                return seen[1]
        return getattr(self, self._handlers[kind])(value, depth)

    def _remember(self, source: t.Any, copied: t.Any) -> None:
        if self._circular:
            self._visited[id(source)] = (source, copied)

    def _lookup(self, source: t.Any) -> t.Any:
        seen = self._visited.get(id(source)) if self._circular else None
        return seen[1] if seen is not None else UNSET

    def _copy_map(self, value: t.Any, depth: float) -> t.Any:
        copied = _empty_like(value)
        self._remember(value, copied)
        for key, item in list(value.items()):
            copied[self.copy(key, depth - 1)] = self.copy(item, depth - 1)
        self._copy_fields(value, copied, depth)
        return copied

    def _copy_set(self, value: t.Any, depth: float) -> t.Any:
        if isinstance(value, frozenset):
            members = [self.copy(member, depth - 1) for member in value]
            # a member may have led back here through a mutable container
            seen = self._lookup(value)
            if seen is not UNSET:
                return seen
            copied = type(value)(members)
            self._remember(value, copied)
            return copied
        copied = _empty_like(value)
        self._remember(value, copied)
        for member in list(value):
            copied.add(self.copy(member, depth - 1))
        self._copy_fields(value, copied, depth)
        return copied

    def _copy_deferred(self, value: t.Any, depth: float) -> t.Any:
        """Chain a new future onto ``value``.

        The copy settles when the source does, carrying a copy of its result
        or exception. It never blocks and cannot be used to cancel the
        source; a cancelled source cancels the copy.
        """
        if asyncio.isfuture(value):
            copied = value.get_loop().create_future()
        else:
            copied = concurrent.futures.Future()
        self._remember(value, copied)

        def _relay(source: t.Any) -> None:
            if copied.done():
                return
            if source.cancelled():
                copied.cancel()
                return
            try:
                error = source.exception()
                if error is not None:
                    copied.set_exception(self.copy(error, depth - 1))
                else:
                    copied.set_result(self.copy(source.result(), depth - 1))
            except Exception as exc:
                copied.set_exception(exc)

        value.add_done_callback(_relay)
        return copied

    def _copy_sequence(self, value: t.Any, depth: float) -> t.Any:
        if isinstance(value, tuple):
            items = [self.copy(item, depth - 1) for item in value]
            seen = self._lookup(value)
            if seen is not UNSET:
                return seen
            cls = type(value)
            copied = cls._make(items) if hasattr(value, "_fields") else cls(items)
            self._remember(value, copied)
            return copied
        copied = _empty_like(value)
        self._remember(value, copied)
        for item in list(value):
            copied.append(self.copy(item, depth - 1))
        self._copy_fields(value, copied, depth)
        return copied

    def _copy_pattern(self, value: re.Pattern, depth: float) -> re.Pattern:
        # Compiled patterns are immutable and hold no match position, and
        # re's compile cache may hand back the very same object.
        copied = re.compile(value.pattern, value.flags)
        self._remember(value, copied)
        return copied

    def _copy_instant(self, value: datetime.date, depth: float) -> datetime.date:
        cls = type(value)
        if isinstance(value, datetime.datetime):
            copied = cls(
                value.year,
                value.month,
                value.day,
                value.hour,
                value.minute,
                value.second,
                value.microsecond,
                value.tzinfo,
                fold=value.fold,
            )
        else:
            copied = cls(value.year, value.month, value.day)
        self._remember(value, copied)
        self._copy_fields(value, copied, depth)
        return copied

    def _copy_buffer(self, value: t.Any, depth: float) -> t.Any:
        if isinstance(value, bytearray):
            return type(value)(value)
        return type(value)(value.typecode, value)

    def _copy_error(self, value: BaseException, depth: float) -> BaseException:
        # Shallow: args, traceback and exception chain stay shared with the
        # original; only instance attributes are copied.
        cls = type(value)
        copied = cls.__new__(cls, *value.args)
        copied.args = value.args
        copied.__traceback__ = value.__traceback__
        copied.__cause__ = value.__cause__
        copied.__context__ = value.__context__
        copied.__suppress_context__ = value.__suppress_context__
        self._remember(value, copied)
        self._copy_fields(value, copied, depth)
        return copied

    def _copy_object(self, value: t.Any, depth: float) -> t.Any:
        prototype = self._prototype
        if prototype is UNSET:
            copied = _instantiate(type(value), value)
        elif prototype is None:
            copied = types.SimpleNamespace()
        elif isinstance(prototype, type):
            copied = _instantiate(prototype)
        else:
            copied = Derived(prototype)
        self._remember(value, copied)
        self._copy_fields(value, copied, depth)
        return copied

    def _copy_fields(self, source: t.Any, copied: t.Any, depth: float) -> None:
        hidden: t.List[t.Tuple[str, t.Any]] = []
        for name, item in _instance_fields(source):
            if _is_dunder(name):
                hidden.append((name, item))
                continue
            self._assign(source, copied, name, item, depth)
        if self._include_hidden:
            for name, item in hidden:
                self._assign(source, copied, name, item, depth)

    def _assign(self, source: t.Any, copied: t.Any, name: str, item: t.Any, depth: float) -> None:
        if _is_read_only(type(copied), name):
            return
        try:
            object.__setattr__(copied, name, self.copy(item, depth - 1))
        except (AttributeError, TypeError) as exc:
            _logger.debug("Skipping attribute %r while cloning %s: %s", name, type(source).__name__, exc)
