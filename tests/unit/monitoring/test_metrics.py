"""Unit tests for in-memory metrics."""

import math

from kvcache.cache import TTLCache
from kvcache.monitoring.metrics import Counter, Histogram, kvcache_expired_total, kvcache_operations_total


class TestCounter:
    """Test Counter."""

    def test_inc_by_labels(self):
        """Test values are tracked per label set."""
        counter = Counter("ops", "operations")

        counter.inc(op="get")
        counter.inc(2, op="get")
        counter.inc(op="set")

        assert counter.get(op="get") == 3
        assert counter.get(op="set") == 1
        assert counter.get(op="delete") == 0

    def test_reset(self):
        """Test reset clears all values."""
        counter = Counter("ops", "operations")
        counter.inc()

        counter.reset()

        assert counter.get() == 0


class TestHistogram:
    """Test Histogram."""

    def test_observe_buckets(self):
        """Test observations land in the first fitting bucket."""
        histogram = Histogram("latency", "latency", buckets=[0.1, 1.0])

        histogram.observe(0.05)
        histogram.observe(0.5)
        histogram.observe(5.0)

        assert histogram.buckets == [0.1, 1.0, math.inf]
        assert histogram.counts[()] == [1, 1, 1]
        assert histogram.count() == 3


class TestCacheMetrics:
    """Test the cache feeds the predefined metrics."""

    def test_operations_and_expiry_are_counted(self, clock, scheduler):
        """Test cache operations bump the process-wide counters."""
        before_get = kvcache_operations_total.get(op="get")
        before_expired = kvcache_expired_total.get()
        cache = TTLCache(check_period=0, clock=clock, scheduler=scheduler)

        cache.set("k", "v", 1)
        clock.advance(2)
        cache.get("k")

        assert kvcache_operations_total.get(op="get") == before_get + 1
        assert kvcache_expired_total.get() == before_expired + 1
