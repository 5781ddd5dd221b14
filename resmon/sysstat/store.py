"""SnapshotStore — the single shared cell holding the latest Snapshot."""

from __future__ import annotations

import threading

from resmon.models.snapshot import Snapshot
from resmon.sysstat.errors import LockUnavailable, NotInitialized


class SnapshotStore:
    """Mutex-guarded ``Snapshot | None``.

    Constructed once at startup and handed to both the sampler (sole writer)
    and the command layer (readers). The critical section covers only the
    reference swap or the copy, never any sampling work. A ``threading.Lock``
    is used so readers on other threads are as safe as coroutines on the
    sampler's event loop.
    """

    def __init__(self, lock_timeout: float | None = None) -> None:
        if lock_timeout is None:
            from resmon.config import settings
            lock_timeout = settings.lock_timeout
        self.lock_timeout = lock_timeout
        self._lock = threading.Lock()
        self._snapshot: Snapshot | None = None

    def publish(self, snapshot: Snapshot) -> bool:
        """Replace the stored snapshot. Returns False if the lock timed out."""
        if not self._lock.acquire(timeout=self.lock_timeout):
            return False
        try:
            self._snapshot = snapshot
        finally:
            self._lock.release()
        return True

    def read(self) -> Snapshot:
        """Return a copy of the latest snapshot.

        Raises:
            NotInitialized: nothing has been published yet.
            LockUnavailable: the lock was not acquired within ``lock_timeout``.
        """
        if not self._lock.acquire(timeout=self.lock_timeout):
            raise LockUnavailable(f"lock not acquired within {self.lock_timeout}s")
        try:
            current = self._snapshot
        finally:
            self._lock.release()

        if current is None:
            raise NotInitialized()
        return current.model_copy()

    @property
    def initialized(self) -> bool:
        return self._snapshot is not None
