"""Rich console utilities for output formatting."""

from __future__ import annotations

import logging
import platform

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.text import Text

from version_guard import __version__


def create_console() -> Console:
    """Create a configured Rich console."""
    # Windows-specific console settings
    if platform.system() == "Windows":
        return Console(legacy_windows=True, emoji=False)
    return Console()


def configure_logging(verbose: bool = False) -> None:
    """Route library logging through a Rich console on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=verbose)],
        force=True,
    )


def mute_console_logging() -> None:
    """Stop Rich log output, leaving stdout to a machine-readable record."""
    for handler in logging.getLogger().handlers:
        if isinstance(handler, RichHandler):
            handler.setLevel(logging.CRITICAL + 1)


def print_banner(console: Console) -> None:
    """Print the Version Guard banner."""
    banner_text = Text()
    banner_text.append("VERSION ", style="bold cyan")
    banner_text.append("GUARD", style="bold yellow")

    tagline = Text("Lock your installed version and keep the updater out", style="dim italic")

    panel = Panel(
        Text.assemble(banner_text, "\n", tagline),
        border_style="blue",
        padding=(0, 2),
        subtitle=f"v{__version__}",
        subtitle_align="right",
    )

    console.print(panel)
    console.print()


def print_log_line(console: Console, line: str) -> None:
    """Print one operation log line, colored by its prefix."""
    if line.startswith("[OK]"):
        console.print(line, style="green", markup=False)
    elif line.startswith("[!]"):
        console.print(line, style="yellow", markup=False)
    else:
        console.print(line, style="dim", markup=False)


def print_error(console: Console, message: str) -> None:
    """Print an error message."""
    console.print(f"[red]{message}[/red]")
