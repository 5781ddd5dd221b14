"""SamplerLoop — perpetual background task feeding the SnapshotStore.

Cadence:
  1. Warm-up: one full refresh, then ``WARMUP_DELAY``. psutil has nothing to
     diff against on the first CPU read, so nothing is published here.
  2. Steady state: wake every ``TICK_INTERVAL`` and, once ``REFRESH_INTERVAL``
     has elapsed since the last full refresh, refresh CPU, memory and the
     tracked process, build a Snapshot and publish it.

The short tick keeps the loop responsive to the stop event; the long interval
keeps CPU refreshes at a rate psutil can report meaningfully.

Failure policy
--------------
- A counter that cannot be read is replaced by 0 for that cycle only.
- A failed process lookup zeroes both process metrics for that cycle.
- A publish that cannot get the lock is skipped; the next cycle retries.
- Anything else raised inside a cycle is logged and the loop carries on.
"""

from __future__ import annotations

import asyncio
import os
import time
from collections.abc import Callable
from typing import TypeVar

import structlog

from resmon.models.snapshot import ProcessCounters, Snapshot
from resmon.sysstat.errors import CounterUnavailable
from resmon.sysstat.provider import PsutilProvider, Provider
from resmon.sysstat.store import SnapshotStore

logger = structlog.get_logger().bind(component="sysstat.sampler")

WARMUP_DELAY = 0.2
TICK_INTERVAL = 0.2
REFRESH_INTERVAL = 2.0

T = TypeVar("T")


class SamplerLoop:
    """Owns the provider handle and publishes one Snapshot per refresh interval.

    Args:
        store: Shared store to publish into. The sampler is its only writer.
        provider: OS-information provider. Defaults to ``PsutilProvider()``.
        pid: Process to report on. Defaults to the current process.
        stop_event: Optional cancellation signal, checked every tick.
        clock: Monotonic clock in seconds; injectable for tests.
    """

    def __init__(
        self,
        store: SnapshotStore,
        provider: Provider | None = None,
        *,
        pid: int | None = None,
        stop_event: asyncio.Event | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.store = store
        self.provider = provider or PsutilProvider()
        self.pid = pid if pid is not None else os.getpid()
        self.stop_event = stop_event
        self._clock = clock
        self.cycles = 0
        self.published = 0

    async def run(self) -> None:
        """Run until the stop event is set (or forever without one)."""
        last_update = self._clock()
        self.provider.track(self.pid)
        self._warm_up()
        logger.info("sampler_started", pid=self.pid, refresh_interval=REFRESH_INTERVAL)

        if await self._wait(WARMUP_DELAY):
            logger.info("sampler_stopped", cycles=self.cycles)
            return

        while True:
            if self._clock() - last_update >= REFRESH_INTERVAL:
                try:
                    self.sample_and_publish()
                except Exception as e:
                    logger.error("sampler_cycle_failed", error=str(e), exc_info=True)
                last_update = self._clock()

            if await self._wait(TICK_INTERVAL):
                break

        logger.info("sampler_stopped", cycles=self.cycles)

    def sample(self) -> Snapshot:
        """Refresh every counter once and derive a Snapshot from that pass."""
        self._guard("cpu", self.provider.refresh_cpu, None)
        self._guard("memory", self.provider.refresh_memory, None)
        self._guard("processes", self.provider.refresh_processes, None)

        process: ProcessCounters | None = self._guard(
            "process", lambda: self.provider.process(self.pid), None
        )
        if process is None:
            logger.debug("process_lookup_failed", pid=self.pid)

        return Snapshot.from_counters(
            core_usages=self._guard("core_usages", self.provider.core_usages, []),
            memory_used=self._guard("memory_used", self.provider.memory_used, 0),
            memory_total=self._guard("memory_total", self.provider.memory_total, 0),
            process=process,
        )

    def sample_and_publish(self) -> bool:
        snapshot = self.sample()
        self.cycles += 1
        if not self.store.publish(snapshot):
            logger.warning("publish_skipped", cycle=self.cycles, reason="lock timeout")
            return False
        self.published += 1
        return True

    def _warm_up(self) -> None:
        try:
            self.provider.refresh_all()
        except (CounterUnavailable, OSError) as e:
            logger.warning("warmup_refresh_incomplete", error=str(e))

    def _guard(self, counter: str, read: Callable[[], T], default: T) -> T:
        try:
            return read()
        except (CounterUnavailable, OSError) as e:
            logger.debug("counter_unavailable", counter=counter, error=str(e))
            return default

    async def _wait(self, delay: float) -> bool:
        """Sleep *delay* seconds. Returns True if the stop event fired."""
        if self.stop_event is None:
            await asyncio.sleep(delay)
            return False
        if self.stop_event.is_set():
            return True
        try:
            await asyncio.wait_for(self.stop_event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return False
        return True
