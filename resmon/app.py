"""Application — startup and shutdown wiring for the monitor and settings.

Startup order:
    1. Construct the SnapshotStore (shared by sampler and commands).
    2. Spawn the sampler as a background asyncio task.
    3. Initialize and load persisted settings. A SettingsError here is logged
       and startup continues with defaults; the sampler never depends on
       settings. Anything else stops the sampler and propagates.
"""

from __future__ import annotations

import asyncio

import structlog

from resmon.commands import CommandRouter, start_system_monitoring
from resmon.models.schemas import CommandResponse
from resmon.models.settings import WindowConfig, WindowState
from resmon.sysstat.provider import Provider
from resmon.sysstat.store import SnapshotStore
from resmon.tools.settings_store import SettingsError, SettingsStore

logger = structlog.get_logger().bind(component="app")


class Application:
    """Owns the store, the sampler task, and the settings lifecycle."""

    def __init__(
        self,
        store: SnapshotStore | None = None,
        provider: Provider | None = None,
        settings_store: SettingsStore | None = None,
    ) -> None:
        self.store = store or SnapshotStore()
        self.provider = provider
        self.settings_store = settings_store or SettingsStore()
        self.router = CommandRouter(self.store)
        self.window_config = WindowConfig()
        self.window_state = WindowState()
        self._stop_event: asyncio.Event | None = None
        self._sampler_task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._sampler_task is not None and not self._sampler_task.done()

    async def start(self) -> None:
        logger.info("application_start")
        if self.running:
            return

        self._stop_event = asyncio.Event()
        self._sampler_task = asyncio.create_task(
            start_system_monitoring(self.store, self.provider, self._stop_event),
            name="resmon-sampler",
        )
        try:
            self._load_settings()
        except Exception:
            await self._stop_sampler()
            raise

    def _load_settings(self) -> None:
        try:
            self.settings_store.initialize()
            self.window_config = self.settings_store.load_window_config()
            self.window_state = self.settings_store.load_window_state()
        except SettingsError as e:
            logger.error("settings_unavailable_using_defaults", error=str(e))
            return
        logger.info("window_settings_applied", title=self.window_config.title)

    async def stop(self, timeout: float = 2.0) -> None:
        """Stop the sampler and persist the window state."""
        await self._stop_sampler(timeout)
        try:
            self.settings_store.save_window_state(self.window_state)
        except SettingsError as e:
            logger.error("window_state_save_failed", error=str(e))
        logger.info("application_stopped")

    async def _stop_sampler(self, timeout: float = 2.0) -> None:
        if self._sampler_task is None:
            return
        if self._stop_event is not None:
            self._stop_event.set()
        try:
            await asyncio.wait_for(self._sampler_task, timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("sampler_stop_timeout", timeout=timeout)
        self._sampler_task = None

    async def invoke(self, name: str, /, **kwargs) -> CommandResponse:
        return await self.router.invoke(name, **kwargs)

    async def __aenter__(self) -> Application:
        await self.start()
        return self

    async def __aexit__(self, *exc) -> None:
        await self.stop()
