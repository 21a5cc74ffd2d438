"""Unit tests for the background sweep."""

import asyncio

import pytest

from kvcache.cache import TTLCache
from kvcache.core.sweeper import AsyncioScheduler, Sweeper
from kvcache.event import CacheEvent


class TestSweeper:
    """Test Sweeper scheduling."""

    def test_runs_immediately_and_schedules(self, scheduler):
        """Test start sweeps once and schedules the next pass."""
        passes = []
        sweeper = Sweeper(lambda: passes.append(1) or 0, 5, scheduler)

        sweeper.start()

        assert passes == [1]
        assert len(scheduler.pending) == 1
        assert scheduler.pending[0].delay == 5

    def test_reschedules_after_each_pass(self, scheduler):
        """Test every pass schedules the following one."""
        passes = []
        sweeper = Sweeper(lambda: passes.append(1) or 0, 5, scheduler)
        sweeper.start()

        scheduler.fire()
        scheduler.fire()

        assert len(passes) == 3
        assert len(scheduler.pending) == 1
        assert sweeper.scheduled is True

    def test_zero_period_disables_repetition(self, scheduler):
        """Test a period of 0 only runs the immediate pass."""
        passes = []
        sweeper = Sweeper(lambda: passes.append(1) or 0, 0, scheduler)

        sweeper.start()

        assert passes == [1]
        assert scheduler.calls == []
        assert sweeper.scheduled is False

    def test_stop_cancels_pending_pass(self, scheduler):
        """Test stop cancels the scheduled callback."""
        sweeper = Sweeper(lambda: 0, 5, scheduler)
        sweeper.start()

        sweeper.stop()

        assert scheduler.pending == []
        assert sweeper.scheduled is False

    def test_start_without_repeat(self, scheduler):
        """Test repeat=False runs once without scheduling."""
        sweeper = Sweeper(lambda: 0, 5, scheduler)

        sweeper.start(repeat=False)

        assert scheduler.calls == []


class TestAsyncioScheduler:
    """Test the asyncio-backed scheduler."""

    def test_without_running_loop_schedules_nothing(self):
        """Test no handle is returned outside an event loop."""
        assert AsyncioScheduler().call_later(1, lambda: None) is None

    @pytest.mark.asyncio
    async def test_schedules_on_running_loop(self):
        """Test the callback runs on the running loop."""
        fired = asyncio.Event()

        handle = AsyncioScheduler().call_later(0.01, fired.set)

        assert handle is not None
        await asyncio.wait_for(fired.wait(), timeout=1)

    @pytest.mark.asyncio
    async def test_cancel(self):
        """Test a cancelled handle never fires."""
        fired = []

        handle = AsyncioScheduler().call_later(0.01, lambda: fired.append(1))
        handle.cancel()
        await asyncio.sleep(0.05)

        assert fired == []


class TestCacheSweep:
    """Test the sweep as driven by TTLCache."""

    def test_periodic_sweep_removes_expired(self, clock, scheduler, recorder):
        """Test a sweep pass evicts expired entries without any read."""
        cache = TTLCache(check_period=10, clock=clock, scheduler=scheduler)
        cache.on(CacheEvent.EXPIRED, recorder)
        cache.set("short", "value", 1)
        cache.set("long", "value", 100)

        clock.advance(11)
        scheduler.fire()

        assert cache.keys() == ["long"]
        assert recorder.calls == [("short", "value")]
        assert cache.get_stats().key_count == 1
        cache.close()

    def test_sweep_without_delete_keeps_entries(self, clock, scheduler, recorder):
        """Test a sweep with delete_on_expire off only notifies."""
        cache = TTLCache(check_period=10, delete_on_expire=False, clock=clock, scheduler=scheduler)
        cache.on(CacheEvent.EXPIRED, recorder)
        cache.set("short", "value", 1)

        clock.advance(11)
        scheduler.fire()

        assert cache.keys() == ["short"]
        assert recorder.calls == [("short", "value")]
        cache.close()

    def test_close_cancels_sweep(self, clock, scheduler):
        """Test close cancels the schedule and keeps the data."""
        cache = TTLCache(check_period=10, clock=clock, scheduler=scheduler)
        cache.set("key", "value", 0)

        cache.close()

        assert scheduler.pending == []
        assert cache.get("key") == "value"

    def test_flush_all_restarts_schedule(self, clock, scheduler):
        """Test flush_all replaces the pending sweep with a new one."""
        cache = TTLCache(check_period=10, clock=clock, scheduler=scheduler)
        first = scheduler.pending[0]

        cache.flush_all()

        assert first.cancelled is True
        assert len(scheduler.pending) == 1
        assert scheduler.pending[0] is not first
        cache.close()

    def test_flush_all_without_period(self, clock, scheduler):
        """Test flush_all(start_period=False) leaves nothing scheduled."""
        cache = TTLCache(check_period=10, clock=clock, scheduler=scheduler)

        cache.flush_all(start_period=False)

        assert scheduler.pending == []

    def test_listener_deleting_during_sweep(self, clock, scheduler):
        """Test entries removed by a listener mid-sweep are skipped."""
        cache = TTLCache(check_period=10, clock=clock, scheduler=scheduler)
        expired = []

        def on_expired(key, value):
            expired.append(key)
            cache.delete("b")

        cache.on("expired", on_expired)
        cache.set("a", 1, 1)
        cache.set("b", 2, 1)

        clock.advance(5)
        scheduler.fire()

        assert expired == ["a"]
        assert cache.keys() == []
        cache.close()
