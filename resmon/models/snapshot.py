"""Snapshot — one sampling pass worth of host and process metrics."""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field


class ProcessCounters(BaseModel):
    """Raw counters for a single process, as read by the provider."""

    model_config = ConfigDict(frozen=True)

    cpu_percent: float = Field(default=0.0, description="Process CPU usage (%), may exceed 100 on multi-core hosts")
    memory_rss: int = Field(default=0, ge=0, description="Resident set size (bytes)")


class Snapshot(BaseModel):
    """Host and current-process CPU/memory utilization from one sampling cycle.

    Snapshots are frozen: the sampler replaces the stored snapshot on every
    cycle instead of mutating it, and readers get their own copy.
    """

    model_config = ConfigDict(frozen=True)

    cpu_usage: float = Field(default=0.0, description="Host CPU usage (%), mean over all logical cores")
    memory_usage: float = Field(default=0.0, description="Host memory usage (%) = used / total * 100")
    memory_used: int = Field(default=0, ge=0, description="Host memory in use (bytes)")
    memory_total: int = Field(default=0, ge=0, description="Host total memory (bytes)")
    process_cpu_usage: float = Field(default=0.0, description="Current process CPU usage (%)")
    process_memory_usage: int = Field(default=0, ge=0, description="Current process resident memory (bytes)")

    @classmethod
    def from_counters(
        cls,
        *,
        core_usages: Sequence[float],
        memory_used: int,
        memory_total: int,
        process: ProcessCounters | None = None,
    ) -> Snapshot:
        """Derive a snapshot from raw provider counters.

        Args:
            core_usages: Per logical core CPU usage (%). Empty means unknown.
            memory_used: Host memory in use (bytes).
            memory_total: Host total memory (bytes).
            process: Counters for the current process, or None when the
                process lookup failed this cycle.
        """
        cpu_usage = sum(core_usages) / len(core_usages) if core_usages else 0.0
        memory_usage = (memory_used / memory_total) * 100.0 if memory_total > 0 else 0.0
        process = process or ProcessCounters()

        return cls(
            cpu_usage=cpu_usage,
            memory_usage=memory_usage,
            memory_used=memory_used,
            memory_total=memory_total,
            process_cpu_usage=process.cpu_percent,
            process_memory_usage=process.memory_rss,
        )
