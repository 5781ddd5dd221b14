"""Unit-test conftest — FakeProvider, shared fixtures, and cadence helpers.

All fixtures here are available to every test under tests/unit/ without import.
"""

from __future__ import annotations

import pytest

import resmon.sysstat.sampler as _sampler_mod
from resmon.models.snapshot import ProcessCounters
from resmon.sysstat.errors import CounterUnavailable
from resmon.sysstat.store import SnapshotStore


# ─────────────────────────────────────────────────────────────────────────────
# FakeProvider — drop-in replacement for PsutilProvider
# ─────────────────────────────────────────────────────────────────────────────

class FakeProvider:
    """Configurable fake OS-information provider for unit tests.

    Args:
        core_usages:    Per-core CPU percentages returned by core_usages().
        memory_used:    Bytes returned by memory_used().
        memory_total:   Bytes returned by memory_total().
        process:        ProcessCounters for the tracked pid; None simulates a
                        failed process-table lookup.
        failing:        Names of counters that raise CounterUnavailable
                        ("cpu", "memory", "processes", "core_usages",
                        "memory_used", "memory_total", "process").
        raises:         If set, refresh_cpu raises this (non-counter) exception.
    """

    def __init__(
        self,
        *,
        core_usages: list[float] | None = None,
        memory_used: int = 4 * 1024**3,
        memory_total: int = 16 * 1024**3,
        process: ProcessCounters | None = ProcessCounters(cpu_percent=3.5, memory_rss=50 * 1024**2),
        failing: set[str] | None = None,
        raises: Exception | None = None,
    ) -> None:
        self._core_usages = core_usages if core_usages is not None else [10.0, 20.0, 30.0, 40.0]
        self._memory_used = memory_used
        self._memory_total = memory_total
        self._process = process
        self.failing = failing or set()
        self.raises = raises
        self.tracked: list[int] = []
        # Call counters for assertion
        self.refresh_all_calls: int = 0
        self.refresh_cpu_calls: int = 0
        self.process_lookups: int = 0

    def _check(self, counter: str) -> None:
        if counter in self.failing:
            raise CounterUnavailable(counter, "simulated failure")

    def track(self, pid: int) -> None:
        self.tracked.append(pid)

    def refresh_all(self) -> None:
        self.refresh_all_calls += 1

    def refresh_cpu(self) -> None:
        self.refresh_cpu_calls += 1
        if self.raises:
            raise self.raises
        self._check("cpu")

    def refresh_memory(self) -> None:
        self._check("memory")

    def refresh_processes(self) -> None:
        self._check("processes")

    def core_usages(self) -> list[float]:
        self._check("core_usages")
        return list(self._core_usages)

    def memory_used(self) -> int:
        self._check("memory_used")
        return self._memory_used

    def memory_total(self) -> int:
        self._check("memory_total")
        return self._memory_total

    def process(self, pid: int) -> ProcessCounters | None:
        self.process_lookups += 1
        self._check("process")
        return self._process if pid in self.tracked else None


# ─────────────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def store():
    """A fresh, empty SnapshotStore with a short lock timeout."""
    return SnapshotStore(lock_timeout=0.05)


@pytest.fixture
def fake_provider():
    """A FakeProvider with healthy counters."""
    return FakeProvider()


@pytest.fixture
def fast_cadence(monkeypatch):
    """Shrink the sampler cadence so loops complete in milliseconds."""
    monkeypatch.setattr(_sampler_mod, "WARMUP_DELAY", 0.01)
    monkeypatch.setattr(_sampler_mod, "TICK_INTERVAL", 0.01)
    monkeypatch.setattr(_sampler_mod, "REFRESH_INTERVAL", 0.03)


@pytest.fixture
def make_provider():
    """FakeProvider factory for tests that need non-default counters."""
    return FakeProvider
