"""Provider — raw CPU/memory/process counters via psutil.

The provider caches the result of each ``refresh_*`` call; the read methods
return the cached values so that all reads of one cycle come from the same
refresh. psutil reports CPU usage as the delta since the previous call, so the
very first ``refresh_cpu()`` yields zeros. The sampler performs a warm-up
refresh before it trusts any numbers.
"""

from __future__ import annotations

from typing import Protocol

import psutil
import structlog

from resmon.models.snapshot import ProcessCounters
from resmon.sysstat.errors import CounterUnavailable

logger = structlog.get_logger().bind(component="sysstat.provider")


class Provider(Protocol):
    """What the sampler needs from an OS-information provider."""

    def track(self, pid: int) -> None: ...

    def refresh_all(self) -> None: ...

    def refresh_cpu(self) -> None: ...

    def refresh_memory(self) -> None: ...

    def refresh_processes(self) -> None: ...

    def core_usages(self) -> list[float]: ...

    def memory_used(self) -> int: ...

    def memory_total(self) -> int: ...

    def process(self, pid: int) -> ProcessCounters | None: ...


class PsutilProvider:
    """psutil-backed provider. Owned by exactly one sampler; not thread-safe.

    Only processes registered with ``track()`` are refreshed. Each tracked
    process keeps its own ``psutil.Process`` handle so per-process CPU deltas
    accumulate between refreshes.
    """

    def __init__(self) -> None:
        self._core_usages: list[float] = []
        self._memory = None  # last psutil.virtual_memory() result
        self._handles: dict[int, psutil.Process] = {}
        self._processes: dict[int, ProcessCounters] = {}

    def track(self, pid: int) -> None:
        """Start refreshing *pid* on every ``refresh_processes()``."""
        if pid in self._handles:
            return
        try:
            self._handles[pid] = psutil.Process(pid)
        except psutil.Error as e:
            # Lookup simply fails later; the sampler reports zeros.
            logger.warning("process_track_failed", pid=pid, error=str(e))

    def refresh_all(self) -> None:
        self.refresh_cpu()
        self.refresh_memory()
        self.refresh_processes()

    def refresh_cpu(self) -> None:
        try:
            self._core_usages = list(psutil.cpu_percent(interval=None, percpu=True))
        except (psutil.Error, OSError) as e:
            self._core_usages = []
            raise CounterUnavailable("cpu", str(e)) from e

    def refresh_memory(self) -> None:
        try:
            self._memory = psutil.virtual_memory()
        except (psutil.Error, OSError) as e:
            self._memory = None
            raise CounterUnavailable("memory", str(e)) from e

    def refresh_processes(self) -> None:
        self._processes.clear()
        for pid, handle in list(self._handles.items()):
            try:
                with handle.oneshot():
                    counters = ProcessCounters(
                        cpu_percent=handle.cpu_percent(interval=None),
                        memory_rss=handle.memory_info().rss,
                    )
            except psutil.NoSuchProcess:
                logger.warning("process_gone", pid=pid)
                del self._handles[pid]
                continue
            except (psutil.Error, OSError) as e:
                logger.debug("process_refresh_failed", pid=pid, error=str(e))
                continue
            self._processes[pid] = counters

    def core_usages(self) -> list[float]:
        return list(self._core_usages)

    def memory_used(self) -> int:
        # "used" as total minus available; psutil's own .used excludes
        # buffers/cache differently per platform.
        mem = self._require_memory("memory_used")
        return max(mem.total - mem.available, 0)

    def memory_total(self) -> int:
        return self._require_memory("memory_total").total

    def process(self, pid: int) -> ProcessCounters | None:
        """Counters for *pid* from the last refresh, or None if the lookup failed."""
        return self._processes.get(pid)

    def _require_memory(self, counter: str):
        if self._memory is None:
            raise CounterUnavailable(counter, "memory not refreshed")
        return self._memory
