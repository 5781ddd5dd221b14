"""Core schemas — CommandResponse returned to the application shell."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class CommandResponse(BaseModel):
    """Standard output from every shell command.

    Mirrors an IPC result: ``success=True`` carries ``data``,
    ``success=False`` carries a human-readable ``error``.
    """

    command: str = Field(description="Name of the command that produced this response")
    success: bool = Field(default=True, description="Whether the command succeeded")
    data: Any = Field(default=None, description="Command result, JSON-serializable")
    error: str = Field(default="", description="Error message if success=False")
    retryable: bool = Field(
        default=False,
        description="True when the caller should simply poll again (e.g. monitor still warming up)",
    )
    duration_ms: float = Field(default=0.0, description="Execution time in milliseconds")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
