from .sizing import estimate_size, key_size, serialize
from .ttl_cache import TTLCache, create_cache

__all__ = [
    "TTLCache",
    "create_cache",
    "estimate_size",
    "key_size",
    "serialize",
]
