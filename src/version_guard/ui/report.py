"""Rendering of response records for the terminal."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from version_guard.core.results import OperationResult, ProtectionStatus, SwitchResult
from version_guard.core.scanner import VersionInfo, format_size
from version_guard.ui.console import print_error, print_log_line


class Reporter:
    """Displays operation results, status and version listings."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def display_logs(self, logs: list[str]) -> None:
        for line in logs:
            print_log_line(self.console, line)

    def display_result(self, result: OperationResult) -> None:
        self.display_logs(result.logs)
        self.console.print()
        if result.success:
            self.console.print("[bold green]Done.[/bold green]")
        else:
            kind = result.error_kind.value if result.error_kind else "error"
            print_error(self.console, f"Failed ({kind}): {result.error}")

    def display_switch(self, result: SwitchResult) -> None:
        self.display_logs(result.logs)
        self.console.print()
        if result.success:
            self.console.print(f"[bold green]{result.message}[/bold green]")
        else:
            print_error(self.console, result.message)

    def display_status(self, status: ProtectionStatus) -> None:
        def mark(flag: bool) -> str:
            return "[green]yes[/green]" if flag else "[dim]no[/dim]"

        state = "[bold green]PROTECTED[/bold green]" if status.is_protected else "[bold yellow]UNPROTECTED[/bold yellow]"
        self.console.print(
            Panel(
                f"[bold]State:[/bold] {state}\n"
                f"[bold]Config locked:[/bold] {mark(status.config_locked)}\n"
                f"[bold]Blockers present:[/bold] {mark(status.blockers_exist)}",
                title="Protection Status",
                border_style="blue",
            )
        )

    def display_versions(self, versions: list[VersionInfo]) -> None:
        if not versions:
            self.console.print("[yellow]No installed versions found.[/yellow]")
            return

        table = Table(
            title="Installed Versions",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("#", style="dim", width=4)
        table.add_column("Version", style="green", width=16)
        table.add_column("Size", justify="right", style="cyan", width=10)
        table.add_column("Files", justify="right", width=8)
        table.add_column("Executable", width=10)
        table.add_column("Path", style="white", overflow="ellipsis")

        for i, version in enumerate(versions, 1):
            table.add_row(
                str(i),
                version.name,
                version.size_human,
                str(version.file_count),
                "yes" if version.has_executable else "[red]missing[/red]",
                str(version.path),
            )

        self.console.print(table)
        total = sum(v.size_bytes for v in versions)
        self.console.print(f"\n[bold]Total:[/bold] [cyan]{format_size(total)}[/cyan]")
