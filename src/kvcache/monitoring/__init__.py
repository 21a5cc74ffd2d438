from .metrics import (
    Counter,
    Histogram,
    kvcache_expired_total,
    kvcache_operations_total,
    kvcache_sweep_duration_seconds,
)

__all__ = [
    "Counter",
    "Histogram",
    "kvcache_operations_total",
    "kvcache_expired_total",
    "kvcache_sweep_duration_seconds",
]
