from __future__ import annotations

import dataclasses
import logging
import numbers
import typing as t
from collections.abc import Mapping

from kvcache.clone import clone
from kvcache.core.errors import (
    CacheFullError,
    InvalidKeyTypeError,
    InvalidTtlTypeError,
    KeyNotFoundError,
    KeysNotArrayError,
)
from kvcache.core.models import CacheEntry, CacheStats, Key, ValueSetItem
from kvcache.core.sweeper import Scheduler, Sweeper, now_ms
from kvcache.event import CacheEvent, EventEmitter, EventName, Listener
from kvcache.monitoring.metrics import kvcache_expired_total, kvcache_operations_total
from kvcache.utils.config import CacheConfig

from .sizing import estimate_size, key_size, serialize

_logger = logging.getLogger(__name__)

_MISSING = object()


def _is_number(value: t.Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


class TTLCache:
    """In-process key/value cache with per-entry TTL.

    Keys are ``str`` or ``int`` and are stored under their string form.
    With ``use_clones`` values are deep copied on the way in and out, so
    callers never share mutable state with the cache. Every mutation updates
    the stats and notifies listeners synchronously.

    Expired entries count as absent on every read. Unless
    ``delete_on_expire`` is off they are removed when a read or the periodic
    sweep finds them.
    """

    def __init__(
        self,
        config: t.Optional[CacheConfig] = None,
        *,
        scheduler: t.Optional[Scheduler] = None,
        clock: t.Optional[t.Callable[[], float]] = None,
        **options: t.Any,
    ) -> None:
        self._config = (config or CacheConfig()).merged(**options)
        if self._config.enable_legacy_callbacks:
            _logger.warning("enable_legacy_callbacks is reserved and has no effect")
        self._data: t.Dict[str, CacheEntry] = {}
        self._stats = CacheStats()
        self._events = EventEmitter()
        self._clock = clock or now_ms
        self._sweeper = Sweeper(self._check_data, self._config.check_period, scheduler)
        self._sweeper.start()

    @property
    def config(self) -> CacheConfig:
        return self._config

    # notifications

    def on(self, event: EventName, listener: Listener) -> None:
        self._events.subscribe(event, listener)

    def off(self, event: EventName, listener: Listener) -> bool:
        return self._events.unsubscribe(event, listener)

    # reads

    def get(self, key: Key) -> t.Any:
        """Return the value for ``key`` or ``None`` when missing or expired."""
        kvcache_operations_total.inc(op="get")
        value = self._lookup(self._validate_key(key))
        return None if value is _MISSING else value

    def get_or_raise(self, key: Key) -> t.Any:
        kvcache_operations_total.inc(op="get_or_raise")
        key_str = self._validate_key(key)
        value = self._lookup(key_str)
        if value is _MISSING:
            raise KeyNotFoundError({"key": key_str})
        return value

    def mget(self, keys: t.Sequence[Key]) -> t.Dict[str, t.Any]:
        """Return the found entries among ``keys``; misses are left out."""
        kvcache_operations_total.inc(op="mget")
        if not isinstance(keys, (list, tuple)):
            raise KeysNotArrayError({"type": type(keys).__name__})
        result: t.Dict[str, t.Any] = {}
        for key in keys:
            key_str = self._validate_key(key)
            value = self._lookup(key_str)
            if value is not _MISSING:
                result[key_str] = value
        return result

    def has(self, key: Key) -> bool:
        kvcache_operations_total.inc(op="has")
        key_str = self._validate_key(key)
        entry = self._data.get(key_str)
        return entry is not None and self._check(key_str, entry)

    def keys(self) -> t.List[str]:
        # includes expired entries that have not been removed yet
        return list(self._data)

    def get_ttl(self, key: Key) -> t.Optional[float]:
        """Absolute expiry in epoch ms, 0 for never, ``None`` if missing or expired."""
        kvcache_operations_total.inc(op="get_ttl")
        if not key:
            return None
        key_str = self._validate_key(key)
        entry = self._data.get(key_str)
        if entry is not None and self._check(key_str, entry):
            return entry.expires_at
        return None

    def get_stats(self) -> CacheStats:
        return dataclasses.replace(self._stats)

    # writes

    def set(self, key: Key, value: t.Any, ttl: t.Optional[t.Union[float, str]] = None) -> bool:
        """Store ``value`` under ``key`` for ``ttl`` seconds (0 = forever).

        Without ``ttl`` the configured ``std_ttl`` applies. Raises
        ``CacheFullError`` once ``max_keys`` is reached, even when ``key``
        already exists.
        """
        kvcache_operations_total.inc(op="set")
        max_keys = self._config.max_keys
        if max_keys >= 0 and self._stats.key_count >= max_keys:
            raise CacheFullError({"max_keys": max_keys})

        stored = value
        if self._config.force_string and not isinstance(value, str):
            stored = serialize(value)

        if isinstance(ttl, str):
            ttl = int(ttl, 10)

        key_str = self._validate_key(key)

        existing = self._data.get(key_str)
        if existing is not None:
            self._stats.approx_value_size = max(
                0, self._stats.approx_value_size - estimate_size(existing.value, self._config)
            )

        self._data[key_str] = self._wrap(stored, ttl)
        self._stats.approx_value_size += estimate_size(stored, self._config)

        if existing is None:
            self._stats.approx_key_size += key_size(key_str)
            self._stats.key_count += 1

        self._events.publish(CacheEvent.SET, key, value)
        return True

    def mset(self, items: t.Iterable[t.Union[ValueSetItem, t.Mapping[str, t.Any]]]) -> bool:
        """Set several entries; nothing is written if any item is invalid."""
        kvcache_operations_total.inc(op="mset")
        prepared = [self._unpack_item(item) for item in items]
        for key, _value, ttl in prepared:
            if ttl is not None and not _is_number(ttl):
                raise InvalidTtlTypeError({"type": type(ttl).__name__})
            self._validate_key(key)

        for key, value, ttl in prepared:
            self.set(key, value, ttl)
        return True

    def fetch(self, key: Key, value: t.Any, ttl: t.Optional[float] = None) -> t.Any:
        """Return the cached value, computing and storing it on a miss.

        A callable ``value`` is only called on a miss.
        """
        if self.has(key):
            return self.get(key)
        result = value() if callable(value) else value
        self.set(key, result, ttl)
        return result

    def delete(self, keys: t.Union[Key, t.Sequence[Key]]) -> int:
        """Remove one key or a list of keys; returns how many existed."""
        kvcache_operations_total.inc(op="delete")
        key_list = keys if isinstance(keys, (list, tuple)) else [keys]
        deleted = 0
        for key in key_list:
            key_str = self._validate_key(key)
            entry = self._data.get(key_str)
            if entry is None:
                continue
            stats = self._stats
            stats.approx_value_size = max(0, stats.approx_value_size - estimate_size(entry.value, self._config))
            stats.approx_key_size = max(0, stats.approx_key_size - key_size(key_str))
            stats.key_count = max(0, stats.key_count - 1)
            deleted += 1

            del self._data[key_str]
            self._events.publish(CacheEvent.DEL, key, entry.value)
        return deleted

    def take(self, key: Key) -> t.Any:
        """Get and delete ``key``; useful for single-use values such as OTPs."""
        kvcache_operations_total.inc(op="take")
        key_str = self._validate_key(key)
        value = self._lookup(key_str)
        if value is _MISSING:
            return None
        self.delete(key)
        return value

    def ttl(self, key: Key, ttl: t.Optional[float] = None) -> bool:
        """Reset the lifetime of ``key``.

        ``ttl`` = 0 keeps the entry forever, a negative ``ttl`` deletes it and
        no ``ttl`` applies ``std_ttl``. Returns ``False`` if the key is missing
        or expired.
        """
        kvcache_operations_total.inc(op="ttl")
        if not key:
            return False
        key_str = self._validate_key(key)
        ttl_value = self._config.std_ttl if ttl is None else ttl

        entry = self._data.get(key_str)
        if entry is None or not self._check(key_str, entry):
            return False
        if ttl_value < 0:
            self.delete(key)
        else:
            self._data[key_str] = self._wrap(entry.value, ttl_value, as_clone=False)
        return True

    def flush_all(self, start_period: bool = True) -> None:
        """Drop every entry, reset the stats and restart the sweep."""
        kvcache_operations_total.inc(op="flush_all")
        self._data = {}
        self._stats = CacheStats()
        self._sweeper.stop()
        self._sweeper.start(repeat=start_period)
        self._events.publish(CacheEvent.FLUSH)

    def flush_stats(self) -> None:
        kvcache_operations_total.inc(op="flush_stats")
        self._stats = CacheStats()
        self._events.publish(CacheEvent.FLUSH_STATS)

    def close(self) -> None:
        """Cancel the periodic sweep; stored entries are kept."""
        self._sweeper.stop()

    # internals

    def _lookup(self, key_str: str) -> t.Any:
        entry = self._data.get(key_str)
        if entry is not None and self._check(key_str, entry):
            self._stats.hits += 1
            return self._unwrap(entry)
        self._stats.misses += 1
        return _MISSING

    def _check_data(self) -> int:
        expired = 0
        for key_str, entry in list(self._data.items()):
            # a listener may have removed or replaced it during this pass
            if self._data.get(key_str) is not entry:
                continue
            if not self._check(key_str, entry):
                expired += 1
        return expired

    def _check(self, key_str: str, entry: CacheEntry) -> bool:
        if entry.expires_at == 0 or entry.expires_at >= self._clock():
            return True
        if self._config.delete_on_expire:
            self.delete(key_str)
        kvcache_expired_total.inc()
        self._events.publish(CacheEvent.EXPIRED, key_str, self._unwrap(entry))
        return False

    def _validate_key(self, key: t.Any) -> str:
        if isinstance(key, bool) or not isinstance(key, (str, int)):
            raise InvalidKeyTypeError({"type": type(key).__name__})
        return str(key)

    def _unpack_item(self, item: t.Any) -> t.Tuple[t.Any, t.Any, t.Any]:
        if isinstance(item, ValueSetItem):
            return item.key, item.value, item.ttl
        if isinstance(item, Mapping):
            value = item["val"] if "val" in item else item.get("value")
            return item.get("key"), value, item.get("ttl")
        raise TypeError(f"mset items must be ValueSetItem or mappings, got {type(item).__name__}")

    def _expires_at(self, ttl: t.Optional[float]) -> float:
        if ttl is None:
            ttl = self._config.std_ttl
        if ttl == 0:
            return 0
        return self._clock() + ttl * 1000

    def _wrap(self, value: t.Any, ttl: t.Optional[float], as_clone: bool = True) -> CacheEntry:
        if as_clone and self._config.use_clones:
            value = clone(value)
        return CacheEntry(expires_at=self._expires_at(ttl), value=value)

    def _unwrap(self, entry: CacheEntry) -> t.Any:
        if self._config.use_clones:
            return clone(entry.value)
        return entry.value


def create_cache(config: t.Optional[CacheConfig] = None, **options: t.Any) -> TTLCache:
    """Build a cache owned by the caller; there is no shared default instance."""
    return TTLCache(config, **options)
