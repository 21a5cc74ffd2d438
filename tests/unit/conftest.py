"""Shared fixtures and fakes for unit tests."""

from __future__ import annotations

import typing as t

import pytest

from kvcache.cache import TTLCache
from kvcache.core.sweeper import Scheduler


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: float = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds * 1000


class FakeHandle:
    def __init__(self, scheduler: "ManualScheduler", delay: float, callback: t.Callable[[], None]) -> None:
        self.scheduler = scheduler
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler(Scheduler):
    """Records scheduled callbacks; tests fire them explicitly."""

    def __init__(self) -> None:
        self.calls: t.List[FakeHandle] = []

    def call_later(self, delay_seconds: float, callback: t.Callable[[], None]) -> FakeHandle:
        handle = FakeHandle(self, delay_seconds, callback)
        self.calls.append(handle)
        return handle

    @property
    def pending(self) -> t.List[FakeHandle]:
        return [h for h in self.calls if not h.cancelled]

    def fire(self) -> int:
        """Run the callbacks pending right now; returns how many ran."""
        ready = self.pending
        for handle in ready:
            handle.cancelled = True
            handle.callback()
        return len(ready)


class Recorder:
    """Listener that keeps every call it receives."""

    def __init__(self) -> None:
        self.calls: t.List[t.Tuple[t.Any, ...]] = []

    def __call__(self, *args: t.Any) -> None:
        self.calls.append(args)

    @property
    def call_count(self) -> int:
        return len(self.calls)


@pytest.fixture
def clock():
    """Controllable clock starting at a fixed epoch."""
    return FakeClock()


@pytest.fixture
def scheduler():
    """Manual scheduler for driving the periodic sweep."""
    return ManualScheduler()


@pytest.fixture
def recorder():
    """Recording notification listener."""
    return Recorder()


@pytest.fixture
def cache(clock, scheduler):
    """Cache with a 60s default TTL, no periodic sweep and a fake clock."""
    instance = TTLCache(std_ttl=60, check_period=0, clock=clock, scheduler=scheduler)
    yield instance
    instance.close()


@pytest.fixture
def make_cache(clock, scheduler):
    """Factory for caches sharing the fake clock and scheduler."""
    created: t.List[TTLCache] = []

    def _make(**options: t.Any) -> TTLCache:
        options.setdefault("check_period", 0)
        instance = TTLCache(clock=clock, scheduler=scheduler, **options)
        created.append(instance)
        return instance

    yield _make
    for instance in created:
        instance.close()
