"""resmon configuration — loaded from .env via pydantic-settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


def _default_config_dir() -> Path:
    return Path.home() / ".config" / "BaseProject"


class ResmonSettings(BaseSettings):
    """All resmon configuration. Reads from .env file and RESMON_* variables.

    Sampling cadence is intentionally absent: it lives as module constants in
    ``resmon.sysstat.sampler``.
    """

    # --- Logging ---
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(
        default="console",
        description="Log format: 'console' for dev, 'json' for production, 'plain' for files",
    )
    log_file: Path | None = Field(
        default=None,
        description="Append logs to this file instead of stdout",
    )

    # --- Persisted window / project settings ---
    config_dir: Path = Field(
        default_factory=_default_config_dir,
        description="Directory holding D4CleaningStudio.config",
    )

    # --- Snapshot store ---
    lock_timeout: float = Field(
        default=1.0,
        gt=0,
        description="Seconds a reader or the sampler waits for the snapshot lock",
    )

    model_config = {
        "env_prefix": "RESMON_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton — import this everywhere
settings = ResmonSettings()
