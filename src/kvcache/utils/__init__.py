"""Utility module for cache configuration."""

from .config import CacheConfig, normalize_options

__all__ = [
    "CacheConfig",
    "normalize_options",
]
