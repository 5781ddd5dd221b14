"""resmon SysStat — background sampling of host and process resources.

Architecture:
    Provider      — raw counters from the OS (psutil), owned by the sampler
    SamplerLoop   — perpetual asyncio task, publishes one Snapshot per interval
    SnapshotStore — lock-guarded cell with the latest Snapshot, read by commands
"""

from .errors import CounterUnavailable, LockUnavailable, MonitorError, NotInitialized
from .provider import Provider, PsutilProvider
from .sampler import SamplerLoop
from .store import SnapshotStore

__all__ = [
    "CounterUnavailable",
    "LockUnavailable",
    "MonitorError",
    "NotInitialized",
    "Provider",
    "PsutilProvider",
    "SamplerLoop",
    "SnapshotStore",
]
