"""Unit tests for data models."""

from dataclasses import asdict

from kvcache.core.models import CacheEntry, CacheStats, ValueSetItem


class TestCacheStats:
    """Test CacheStats dataclass."""

    def test_defaults_are_zero(self):
        """Test a fresh stats object has all counters at zero."""
        stats = CacheStats()

        assert stats.as_dict() == {
            "hits": 0,
            "misses": 0,
            "key_count": 0,
            "approx_key_size": 0,
            "approx_value_size": 0,
        }

    def test_equality(self):
        """Test stats compare by value."""
        assert CacheStats(hits=1) == CacheStats(hits=1)
        assert CacheStats(hits=1) != CacheStats(misses=1)


class TestCacheEntry:
    """Test CacheEntry dataclass."""

    def test_fields(self):
        """Test entry keeps expiry and value."""
        entry = CacheEntry(expires_at=0, value={"a": 1})

        assert asdict(entry) == {"expires_at": 0, "value": {"a": 1}}


class TestValueSetItem:
    """Test ValueSetItem dataclass."""

    def test_ttl_defaults_to_none(self):
        """Test ttl is optional."""
        item = ValueSetItem("key", "value")

        assert item.ttl is None
        assert item.key == "key"
