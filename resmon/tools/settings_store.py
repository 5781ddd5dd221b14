"""Settings store — persisted project and window configuration.

A flat JSON key-value file (``D4CleaningStudio.config``) inside the config
directory, with one key per section:

    project_config  — ProjectConfig
    window_config   — WindowConfig (title, min/max size)
    window_state    — WindowState (geometry, fullscreen, theme, panel layout)

Missing keys are filled with defaults by ``initialize()``; existing keys are
never overwritten there. Loads validate against the pydantic models.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Literal, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from resmon.models.settings import AppConfig, ProjectConfig, WindowConfig, WindowState

logger = structlog.get_logger().bind(component="settings_store")

CONFIG_FILE_NAME = "D4CleaningStudio.config"

M = TypeVar("M", bound=BaseModel)


class SettingsError(Exception):
    """Settings file unreadable, key missing, or value invalid."""


class SettingsStore:
    """JSON-file backed settings, read at startup and written at shutdown."""

    def __init__(self, config_dir: Path | None = None) -> None:
        if config_dir is None:
            from resmon.config import settings
            config_dir = settings.config_dir
        self.config_dir = Path(config_dir)

    @property
    def path(self) -> Path:
        return self.config_dir / CONFIG_FILE_NAME

    def initialize(self) -> None:
        """Create the config dir and write defaults for any missing key."""
        defaults = AppConfig()
        data = self._read()
        missing = {
            "project_config": defaults.projects,
            "window_config": defaults.window_config,
            "window_state": defaults.window_state,
        }
        changed = False
        for key, value in missing.items():
            if key not in data:
                data[key] = value.model_dump(mode="json")
                logger.info("settings_key_defaulted", key=key)
                changed = True

        if changed or not self.path.exists():
            self._write(data)
        logger.info("settings_initialized", path=str(self.path))

    def load_project_config(self) -> ProjectConfig:
        return self._load("project_config", ProjectConfig)

    def load_window_config(self) -> WindowConfig:
        return self._load("window_config", WindowConfig)

    def load_window_state(self) -> WindowState:
        return self._load("window_state", WindowState)

    def save_window_state(self, state: WindowState) -> None:
        data = self._read()
        data["window_state"] = state.model_dump(mode="json")
        self._write(data)
        logger.info("window_state_saved", width=state.width, height=state.height)

    def _load(self, key: str, model: type[M]) -> M:
        data = self._read()
        if key not in data:
            raise SettingsError(f"{key} does not exist in {self.path}")
        try:
            value = model.model_validate(data[key])
        except ValidationError as e:
            raise SettingsError(f"{key} is invalid: {e}") from e
        logger.info("settings_loaded", key=key)
        return value

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise SettingsError(f"cannot read {self.path}: {e}") from e
        if not isinstance(raw, dict):
            raise SettingsError(f"{self.path} does not contain a JSON object")
        return raw

    def _write(self, data: dict[str, Any]) -> None:
        tmp = self.path.with_suffix(".tmp")
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as e:
            raise SettingsError(f"cannot write {self.path}: {e}") from e


def resolve_theme(state: WindowState) -> Literal["Light", "Dark"] | None:
    """Map the stored theme to a concrete one; None means system default."""
    if state.theme == "Light":
        return "Light"
    if state.theme == "Dark":
        return "Dark"
    # "auto" and anything unrecognized defer to the system
    return None
