from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

Labels = Tuple[Tuple[str, Any], ...]


def _label_key(labels: Dict[str, Any]) -> Labels:
    return tuple(sorted(labels.items()))


@dataclass
class Counter:
    name: str
    help: str
    values: Dict[Labels, float] = field(default_factory=dict)

    def inc(self, value: float = 1.0, **labels: Any) -> None:
        key = _label_key(labels)
        self.values[key] = self.values.get(key, 0.0) + value

    def get(self, **labels: Any) -> float:
        return self.values.get(_label_key(labels), 0.0)

    def reset(self) -> None:
        self.values.clear()


@dataclass
class Histogram:
    name: str
    help: str
    buckets: List[float]
    counts: Dict[Labels, List[int]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # observations above the largest bucket land in +Inf
        if not self.buckets or self.buckets[-1] != math.inf:
            self.buckets = list(self.buckets) + [math.inf]

    def observe(self, val: float, **labels: Any) -> None:
        key = _label_key(labels)
        if key not in self.counts:
            self.counts[key] = [0 for _ in self.buckets]
        for i, b in enumerate(self.buckets):
            if val <= b:
                self.counts[key][i] += 1
                break

    def count(self, **labels: Any) -> int:
        return sum(self.counts.get(_label_key(labels), []))

    def reset(self) -> None:
        self.counts.clear()


# Predefined metrics
kvcache_operations_total = Counter("kvcache_operations_total", "Cache operations by name")
kvcache_expired_total = Counter("kvcache_expired_total", "Entries found expired by reads or sweeps")
kvcache_sweep_duration_seconds = Histogram(
    "kvcache_sweep_duration_seconds",
    "Duration of a full expiry sweep",
    buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5],
)
