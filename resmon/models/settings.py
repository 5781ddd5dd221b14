"""Persisted window and project settings.

Defaults match what the desktop shell writes on first launch.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ProjectConfig(BaseModel):
    """Single project entry."""

    name: str = ""
    filepath: str = ""
    remarks: str = ""


class WindowConfig(BaseModel):
    """Window settings applied once at startup (title, size bounds)."""

    title: str = "D4CleaningStudio 2025"
    min_width: int = Field(default=1024, ge=0)
    min_height: int = Field(default=768, ge=0)
    max_width: int = Field(default=7680, ge=0)
    max_height: int = Field(default=4320, ge=0)


class MainPanelLayout(BaseModel):
    """Split ratios of the main panel."""

    horizontal: tuple[int, int, int] = (15, 70, 15)
    vertical: tuple[int, int] = (85, 15)


class WindowState(BaseModel):
    """Window geometry and theme as they were when the app last closed."""

    width: int = Field(default=1200, ge=0)
    height: int = Field(default=800, ge=0)
    x: int = 100
    y: int = 100
    fullscreen: bool = False
    theme: str = Field(default="auto", description="'Light', 'Dark' or 'auto'")
    main_panel_layout: MainPanelLayout = Field(default_factory=MainPanelLayout)


class AppConfig(BaseModel):
    """Everything stored in the settings file, one key per section."""

    projects: ProjectConfig = Field(default_factory=ProjectConfig)
    window_state: WindowState = Field(default_factory=WindowState)
    window_config: WindowConfig = Field(default_factory=WindowConfig)
