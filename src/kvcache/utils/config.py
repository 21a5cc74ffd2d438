from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict

# camelCase option names accepted alongside the field names
_OPTION_ALIASES: Dict[str, str] = {
    "forceString": "force_string",
    "objectValueSize": "object_value_size",
    "promiseValueSize": "promise_value_size",
    "arrayValueSize": "array_value_size",
    "stdTTL": "std_ttl",
    "checkPeriod": "check_period",
    "useClones": "use_clones",
    "deleteOnExpire": "delete_on_expire",
    "enableLegacyCallbacks": "enable_legacy_callbacks",
    "maxKeys": "max_keys",
}


@dataclass(frozen=True)
class CacheConfig:
    force_string: bool = False
    object_value_size: int = 80
    promise_value_size: int = 80
    array_value_size: int = 40
    std_ttl: float = 0  # seconds, 0 = never expires
    check_period: float = 600  # seconds, 0 = no periodic sweep
    use_clones: bool = True
    delete_on_expire: bool = True
    enable_legacy_callbacks: bool = False  # reserved, no behavior attached
    max_keys: int = -1  # -1 = unbounded

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CacheConfig":
        return cls(**normalize_options(data))

    def merged(self, **options: Any) -> "CacheConfig":
        """Return a copy with the given options applied on top."""
        if not options:
            return self
        return dataclasses.replace(self, **normalize_options(options))


def normalize_options(data: Dict[str, Any]) -> Dict[str, Any]:
    return {_OPTION_ALIASES.get(key, key): value for key, value in data.items()}
