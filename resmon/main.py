"""resmon CLI — the user interface.

Commands:
    resmon status    — One snapshot of host and process CPU/memory
    resmon watch     — Live-updating snapshot table until Ctrl-C
    resmon config    — Show persisted window / project settings
    resmon greet     — Shell wiring check
    resmon version   — Print version
"""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.table import Table

from resmon.config import settings
from resmon.utils import setup_logging

# Initialize logging on import
setup_logging(settings.log_file)

app = typer.Typer(
    name="resmon",
    help="📈 resmon — background host and process resource monitor",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()

_POLL_INTERVAL = 0.25


def _format_bytes(num: int) -> str:
    value = float(num)
    for unit in ("B", "KB", "MB", "GB"):
        if value < 1024:
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} TB"


def _usage_color(pct: float) -> str:
    return "green" if pct < 70 else "yellow" if pct < 90 else "red"


def _snapshot_table(data: dict) -> Table:
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white")

    cpu = data.get("cpu_usage", 0.0)
    mem_pct = data.get("memory_usage", 0.0)
    table.add_row("CPU", f"[{_usage_color(cpu)}]{cpu:.1f}%[/]")
    table.add_row(
        "Memory",
        f"[{_usage_color(mem_pct)}]{_format_bytes(data.get('memory_used', 0))} / "
        f"{_format_bytes(data.get('memory_total', 0))} ({mem_pct:.1f}%)[/]",
    )
    table.add_row("Process CPU", f"{data.get('process_cpu_usage', 0.0):.1f}%")
    table.add_row("Process Memory", _format_bytes(data.get("process_memory_usage", 0)))
    return table


# ── resmon status ─────────────────────────────────────────────


@app.command()
def status(
    wait: float = typer.Option(5.0, "--wait", "-w", help="Seconds to wait for the first sample"),
):
    """🩺 Current CPU and memory usage, host and this process."""
    asyncio.run(_status(wait))


async def _status(wait: float):
    from resmon.app import Application

    async with Application() as application:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + wait

        with console.status("[dim]Sampling...[/]", spinner="dots"):
            response = await application.invoke("get_system_info")
            while not response.success and response.retryable and loop.time() < deadline:
                await asyncio.sleep(_POLL_INTERVAL)
                response = await application.invoke("get_system_info")

    if response.success:
        console.print(Panel(_snapshot_table(response.data), title="[bold cyan]⚙ System Resources[/]", border_style="cyan"))
    else:
        console.print(f"[red]System info unavailable: {response.error}[/]")
        raise typer.Exit(code=1)


# ── resmon watch ──────────────────────────────────────────────


@app.command()
def watch(
    interval: float = typer.Option(1.0, "--interval", "-i", help="Screen refresh period in seconds"),
):
    """📺 Live view — redraws the latest snapshot until Ctrl-C."""
    try:
        asyncio.run(_watch(interval))
    except KeyboardInterrupt:
        console.print("\n[dim]Stopped.[/]")


async def _watch(interval: float):
    from resmon.app import Application

    async with Application() as application:
        waiting = Panel("[dim]Waiting for first sample...[/]", title="[bold cyan]⚙ System Resources[/]")
        with Live(waiting, console=console, refresh_per_second=4) as live:
            while True:
                response = await application.invoke("get_system_info")
                if response.success:
                    live.update(Panel(
                        _snapshot_table(response.data),
                        title="[bold cyan]⚙ System Resources[/]",
                        border_style="cyan",
                    ))
                elif not response.retryable:
                    live.update(Panel(f"[red]{response.error}[/]", title="[bold red]⚠ System Resources[/]"))
                await asyncio.sleep(interval)


# ── resmon config ─────────────────────────────────────────────


@app.command()
def config():
    """🗂 Show persisted window and project settings."""
    from resmon.tools.settings_store import SettingsError, SettingsStore, resolve_theme

    store = SettingsStore()
    try:
        store.initialize()
        window_config = store.load_window_config()
        window_state = store.load_window_state()
        project = store.load_project_config()
    except SettingsError as e:
        console.print(f"[red]Settings unavailable: {e}[/]")
        raise typer.Exit(code=1)

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Key", style="magenta")
    table.add_column("Value", style="white")
    table.add_row("File", str(store.path))
    table.add_row("Title", window_config.title)
    table.add_row("Min size", f"{window_config.min_width}×{window_config.min_height}")
    table.add_row("Max size", f"{window_config.max_width}×{window_config.max_height}")
    table.add_row("Size", f"{window_state.width}×{window_state.height}")
    table.add_row("Position", f"({window_state.x}, {window_state.y})")
    table.add_row("Fullscreen", "yes" if window_state.fullscreen else "no")
    table.add_row("Theme", f"{window_state.theme} → {resolve_theme(window_state) or 'system'}")
    table.add_row("Project", project.name or "[dim]—[/]")

    console.print(Panel(table, title="[bold magenta]🗂 Settings[/]", border_style="magenta"))


# ── resmon greet / version ────────────────────────────────────


@app.command()
def greet(name: str = typer.Argument(..., help="Who to greet")):
    """👋 Greeting round-trip through the command router."""
    asyncio.run(_greet(name))


async def _greet(name: str):
    from resmon.commands import CommandRouter
    from resmon.sysstat.store import SnapshotStore

    response = await CommandRouter(SnapshotStore()).invoke("greet", name=name)
    console.print(response.data)


@app.command()
def version():
    """Print version."""
    from resmon import __version__
    console.print(f"[bold cyan]📈 resmon[/] v{__version__}")


if __name__ == "__main__":
    app()
