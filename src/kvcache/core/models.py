from __future__ import annotations

import typing as t
from dataclasses import asdict, dataclass

Key = t.Union[str, int]


@dataclass
class CacheEntry:
    """Stored value plus its absolute expiry in epoch milliseconds (0 = never)."""

    expires_at: float
    value: t.Any


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    key_count: int = 0
    approx_key_size: int = 0
    approx_value_size: int = 0

    def as_dict(self) -> t.Dict[str, int]:
        return asdict(self)


@dataclass
class ValueSetItem:
    key: Key
    value: t.Any
    ttl: t.Optional[float] = None
