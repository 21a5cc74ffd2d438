from __future__ import annotations

import asyncio
import logging
import time
import typing as t
from abc import ABC, abstractmethod

from kvcache.monitoring.metrics import kvcache_sweep_duration_seconds

_logger = logging.getLogger(__name__)


def now_ms() -> int:
    """Wall clock in epoch milliseconds."""
    return int(time.time() * 1000)


class ScheduledCall(t.Protocol):
    def cancel(self) -> t.Any:  # pragma: no cover - interface
        ...


class Scheduler(ABC):
    @abstractmethod
    def call_later(
        self, delay_seconds: float, callback: t.Callable[[], None]
    ) -> t.Optional[ScheduledCall]:  # pragma: no cover - interface
        """Run ``callback`` once after the delay; ``None`` if it cannot be scheduled."""
        raise NotImplementedError


class AsyncioScheduler(Scheduler):
    """Schedules on an asyncio loop, by default the one running at call time.

    Outside a running loop nothing is scheduled and expiry stays lazy.
    """

    def __init__(self, loop: t.Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def call_later(self, delay_seconds: float, callback: t.Callable[[], None]) -> t.Optional[ScheduledCall]:
        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                _logger.debug("No running event loop; periodic sweep not scheduled")
                return None
        if loop.is_closed():
            _logger.debug("Event loop is closed; periodic sweep not scheduled")
            return None
        return loop.call_later(delay_seconds, callback)


class Sweeper:
    """Runs an expiry pass now and then again every ``period_seconds``.

    A period of 0 disables the repetition; the immediate pass still runs.
    """

    def __init__(
        self,
        sweep: t.Callable[[], int],
        period_seconds: float,
        scheduler: t.Optional[Scheduler] = None,
    ) -> None:
        self._sweep = sweep
        self._period = period_seconds
        self._scheduler = scheduler or AsyncioScheduler()
        self._handle: t.Optional[ScheduledCall] = None
        self._repeat = True

    @property
    def scheduled(self) -> bool:
        return self._handle is not None

    def start(self, repeat: bool = True) -> int:
        self._repeat = repeat
        return self._run()

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _run(self) -> int:
        self._handle = None
        started = time.perf_counter()
        expired = self._sweep()
        kvcache_sweep_duration_seconds.observe(time.perf_counter() - started)
        if expired:
            _logger.debug("Sweep found %d expired entries", expired)
        if self._repeat and self._period and self._period > 0:
            self._handle = self._scheduler.call_later(self._period, self._run)
        return expired
