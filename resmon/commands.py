"""Commands exposed to the application shell.

Each command is a plain (sync or async) function registered by name. The
shell calls ``CommandRouter.invoke(name, **kwargs)`` and always receives a
``CommandResponse``; exceptions never cross the boundary. Commands that take a
``store`` parameter get the router's SnapshotStore injected.
"""

from __future__ import annotations

import asyncio
import inspect
import time
from collections.abc import Callable
from typing import Any

import structlog
from pydantic import BaseModel

from resmon.models.schemas import CommandResponse
from resmon.models.snapshot import Snapshot
from resmon.sysstat.errors import MonitorError
from resmon.sysstat.provider import Provider
from resmon.sysstat.sampler import SamplerLoop
from resmon.sysstat.store import SnapshotStore

logger = structlog.get_logger().bind(component="commands")

COMMANDS: dict[str, Callable[..., Any]] = {}


def command(func: Callable[..., Any]) -> Callable[..., Any]:
    """Register *func* as a shell command under its own name."""
    COMMANDS[func.__name__] = func
    return func


@command
def greet(name: str) -> str:
    """Development greeting, handy for checking the shell wiring."""
    return f"Hello, {name}! You've been greeted from Python!"


@command
async def get_system_info(store: SnapshotStore) -> Snapshot:
    """Latest system snapshot (CPU and memory, host and this process).

    Raises:
        NotInitialized: sampler has not published yet, poll again shortly.
        LockUnavailable: snapshot lock could not be acquired.
    """
    return store.read()


async def start_system_monitoring(
    store: SnapshotStore,
    provider: Provider | None = None,
    stop_event: asyncio.Event | None = None,
) -> None:
    """Background entry point, spawned once at startup.

    Never returns unless *stop_event* is set or the task is cancelled.
    """
    await SamplerLoop(store, provider, stop_event=stop_event).run()


class CommandRouter:
    """Dispatches named commands and wraps results in CommandResponse."""

    def __init__(self, store: SnapshotStore, commands: dict[str, Callable[..., Any]] | None = None) -> None:
        self.store = store
        self.commands = commands if commands is not None else COMMANDS

    def names(self) -> list[str]:
        return sorted(self.commands)

    async def invoke(self, name: str, /, **kwargs: Any) -> CommandResponse:
        start = time.perf_counter()
        func = self.commands.get(name)
        if func is None:
            return CommandResponse(command=name, success=False, error=f"unknown command: {name}")

        if "store" in inspect.signature(func).parameters:
            kwargs.setdefault("store", self.store)

        try:
            result = func(**kwargs)
            if inspect.isawaitable(result):
                result = await result
        except MonitorError as e:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            logger.debug("command_failed", command=name, error=str(e), retryable=e.retryable)
            return CommandResponse(
                command=name,
                success=False,
                error=str(e),
                retryable=e.retryable,
                duration_ms=duration_ms,
            )
        except Exception as e:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            logger.error("command_error", command=name, error=str(e))
            return CommandResponse(command=name, success=False, error=str(e), duration_ms=duration_ms)

        if isinstance(result, BaseModel):
            result = result.model_dump(mode="json")
        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        return CommandResponse(command=name, success=True, data=result, duration_ms=duration_ms)
