"""Error taxonomy for the monitoring core.

Only the read path raises to callers. Sampling-side failures are absorbed by
the sampler and degrade to zero values.
"""

from __future__ import annotations


class MonitorError(Exception):
    """Base class for monitoring errors."""

    retryable: bool = False


class NotInitialized(MonitorError):
    """The store was read before the sampler published its first snapshot."""

    retryable = True

    def __init__(self, message: str = "system info is not initialized yet") -> None:
        super().__init__(message)


class LockUnavailable(MonitorError):
    """The snapshot lock could not be acquired in time."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"failed to acquire system info: {reason}")
        self.reason = reason


class CounterUnavailable(MonitorError):
    """A single OS counter could not be read this cycle."""

    def __init__(self, counter: str, reason: str = "") -> None:
        message = f"counter '{counter}' unavailable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.counter = counter
