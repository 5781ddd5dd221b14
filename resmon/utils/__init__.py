"""Structured logging configuration using structlog."""

from __future__ import annotations

from pathlib import Path
from typing import TextIO

import structlog
from resmon.config import settings

_LEVELS = {"debug": 10, "info": 20, "warning": 30, "warn": 30, "error": 40, "critical": 50}


def _plain_renderer(_logger, _method: str, event_dict: dict) -> str:
    """Render as ``[2025-01-01 12:00:00]:[INFO]: event key=value``."""
    timestamp = event_dict.pop("timestamp", "")
    level = str(event_dict.pop("level", "info")).upper()
    event = event_dict.pop("event", "")
    extras = " ".join(f"{key}={value}" for key, value in event_dict.items())
    line = f"[{timestamp}]:[{level}]: {event}"
    return f"{line} {extras}" if extras else line


def setup_logging(log_file: Path | None = None) -> None:
    """Configure structlog for resmon.

    Renderers by ``settings.log_format``:
        console — colored dev output (default)
        json    — one JSON object per line
        plain   — ``[time]:[LEVEL]: message`` lines, suitable for log files

    Args:
        log_file: Append to this file instead of printing to stdout. The
            parent directory is created if needed.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", utc=False),
        structlog.processors.StackInfoRenderer(),
    ]

    if settings.log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    elif settings.log_format == "plain" or log_file is not None:
        renderer = _plain_renderer
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    log_level = _LEVELS.get(settings.log_level.lower(), 20)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        stream: TextIO = log_file.open("a", encoding="utf-8")
        logger_factory = structlog.WriteLoggerFactory(file=stream)
    else:
        logger_factory = structlog.PrintLoggerFactory()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=logger_factory,
        cache_logger_on_first_use=True,
    )
