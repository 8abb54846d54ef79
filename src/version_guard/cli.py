"""Version Guard CLI - Main entry point."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer
from rich.panel import Panel
from rich.table import Table

from version_guard import __version__
from version_guard.api import GuardService
from version_guard.config import (
    DEFAULT_CONFIG_TEMPLATE,
    Config,
    get_config_paths,
    load_config,
    load_config_from_file,
)
from version_guard.core.results import OperationResult, ProtectionOptions, ProtectionParams
from version_guard.core.scanner import format_size
from version_guard.errors import EnvironmentUnresolved
from version_guard.platform.detect import get_platform_info
from version_guard.ui.console import (
    configure_logging,
    create_console,
    mute_console_logging,
    print_banner,
)
from version_guard.ui.prompts import confirm_action, select_version, select_versions
from version_guard.ui.report import Reporter

app = typer.Typer(
    name="version-guard",
    help="Lock an installed application version and block its auto-updater.",
    no_args_is_help=True,
)
console = create_console()
reporter = Reporter(console)


class State:
    """Global state container for CLI."""

    def __init__(self) -> None:
        self.config: Config = Config()  # Default until loaded

    @property
    def service(self) -> GuardService:
        return GuardService(self.config)


state = State()


def _json_callback(value: bool) -> bool:
    if value:
        mute_console_logging()
    return value


# Shared CLI option defaults
JSON_OPTION = typer.Option(
    False,
    "--json",
    help="Print the response record as JSON",
    callback=_json_callback,
)

INTERACTIVE_OPTION = typer.Option(
    None,
    "--interactive/--auto",
    help="Prompt before destructive actions (default: from config)",
)


def _emit_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2))


def _finish(result: OperationResult, as_json: bool) -> None:
    """Print a result record and exit non-zero on failure."""
    if as_json:
        _emit_json(result.to_dict())
    else:
        reporter.display_result(result)
    if not result.success:
        raise typer.Exit(1)


def _is_interactive(flag: Optional[bool]) -> bool:
    return state.config.defaults.interactive if flag is None else flag


def _print_install_header() -> None:
    try:
        paths = state.service.install_paths()
    except EnvironmentUnresolved as e:
        console.print(f"[yellow]{e}[/yellow]")
        return
    console.print(f"[dim]Installation: {paths.root}[/dim]")


@app.command()
def status(as_json: bool = JSON_OPTION) -> None:
    """Show whether update protection is active."""
    result = state.service.check_protection_status()
    if as_json:
        _emit_json(result.to_dict())
        return
    _print_install_header()
    reporter.display_status(result)


@app.command()
def protect(
    lock_config: Optional[bool] = typer.Option(
        None,
        "--lock-config/--no-lock-config",
        help="Pin last_version in configure.ini",
    ),
    create_blockers: Optional[bool] = typer.Option(
        None,
        "--blockers/--no-blockers",
        help="Create read-only blocker files",
    ),
    as_json: bool = JSON_OPTION,
) -> None:
    """Apply update protection."""
    defaults = state.config.defaults
    options = ProtectionOptions(
        lock_config=defaults.lock_config if lock_config is None else lock_config,
        create_blockers=defaults.create_blockers if create_blockers is None else create_blockers,
    )
    _finish(state.service.apply_protection(options), as_json)


@app.command()
def unprotect(as_json: bool = JSON_OPTION) -> None:
    """Remove blockers and the config lock so the application can update."""
    _finish(state.service.remove_protection(), as_json)


@app.command()
def versions(as_json: bool = JSON_OPTION) -> None:
    """List installed version directories."""
    found = state.service.scan_versions()
    if as_json:
        _emit_json([v.to_dict() for v in found])
        return
    _print_install_header()
    reporter.display_versions(found)


def _choose_versions(names: list[str], interactive: bool) -> list[str]:
    """Map version names or paths to directories, prompting when none given."""
    installed = state.service.scan_versions()
    if names:
        by_name = {v.name: str(v.path) for v in installed}
        return [by_name.get(name, name) for name in names]
    if not interactive:
        return []
    return [str(v.path) for v in select_versions(installed)]


@app.command()
def delete(
    targets: list[str] = typer.Argument(
        None,
        help="Version names or directories to delete",
    ),
    interactive: Optional[bool] = INTERACTIVE_OPTION,
    as_json: bool = JSON_OPTION,
) -> None:
    """Delete installed version directories."""
    ask = _is_interactive(interactive) and not as_json
    paths = _choose_versions(list(targets or []), ask)

    if paths and ask and not confirm_action(f"Delete {len(paths)} version(s)?"):
        console.print("[yellow]Aborted.[/yellow]")
        raise typer.Exit(0)

    _finish(state.service.delete_versions(paths), as_json)


@app.command()
def switch(
    target: Optional[str] = typer.Argument(
        None,
        help="Version name or directory to activate",
    ),
    lenient: bool = typer.Option(
        False,
        "--lenient",
        help="Report success even if ProductInfo.xml or configure.ini could not be written",
    ),
    as_json: bool = JSON_OPTION,
) -> None:
    """Point the launcher at another installed version."""
    installed = state.service.scan_versions()

    if target is None:
        if as_json:
            console.print("[red]A target version is required with --json[/red]")
            raise typer.Exit(1)
        chosen = select_version(installed)
        if chosen is None:
            console.print("[yellow]No versions available to switch to.[/yellow]")
            raise typer.Exit(0)
        target = str(chosen.path)
    else:
        by_name = {v.name: str(v.path) for v in installed}
        target = by_name.get(target, target)

    result = state.service.switch_version(target, strict=not lenient)
    if as_json:
        _emit_json(result.to_dict())
    else:
        reporter.display_switch(result)
    if not result.success:
        raise typer.Exit(1)


@app.command()
def run(
    targets: list[str] = typer.Argument(
        None,
        help="Version names or directories to delete before protecting",
    ),
    clean_cache: Optional[bool] = typer.Option(
        None,
        "--clean-cache/--no-clean-cache",
        help="Empty the application's cache directories",
    ),
    lock_config: Optional[bool] = typer.Option(
        None,
        "--lock-config/--no-lock-config",
        help="Pin last_version in configure.ini",
    ),
    create_blockers: Optional[bool] = typer.Option(
        None,
        "--blockers/--no-blockers",
        help="Create read-only blocker files",
    ),
    interactive: Optional[bool] = INTERACTIVE_OPTION,
    as_json: bool = JSON_OPTION,
) -> None:
    """Run the full sequence: check, delete versions, clean cache, protect."""
    defaults = state.config.defaults
    ask = _is_interactive(interactive) and not as_json

    if not as_json:
        print_banner(console)
        _print_install_header()

    params = ProtectionParams(
        versions_to_delete=_choose_versions(list(targets or []), ask),
        clean_cache=defaults.clean_cache if clean_cache is None else clean_cache,
        lock_config=defaults.lock_config if lock_config is None else lock_config,
        create_blockers=defaults.create_blockers if create_blockers is None else create_blockers,
    )

    if ask and params.versions_to_delete:
        if not confirm_action(f"Delete {len(params.versions_to_delete)} version(s) and protect?"):
            console.print("[yellow]Aborted.[/yellow]")
            raise typer.Exit(0)

    _finish(state.service.run_full_protection(params), as_json)


@app.command()
def cache(
    clean: bool = typer.Option(
        False,
        "--clean",
        help="Delete cache contents instead of only measuring them",
    ),
    trash: Optional[bool] = typer.Option(
        None,
        "--trash/--permanent",
        help="Move cache entries to the recycle bin (default: from config)",
    ),
    as_json: bool = JSON_OPTION,
) -> None:
    """Show or clean the application's cache size."""
    if clean:
        _finish(state.service.clean_cache(use_trash=trash), as_json)
        return

    size = state.service.calculate_cache_size()
    if as_json:
        _emit_json({"size_bytes": size, "size_mb": round(size / (1024 * 1024), 2)})
        return
    console.print(f"[bold]Cache size:[/bold] [cyan]{format_size(size)}[/cyan]")


@app.command()
def precheck(as_json: bool = JSON_OPTION) -> None:
    """Check that the application is installed and not running."""
    result = state.service.perform_precheck()
    if as_json:
        _emit_json(result.to_dict())
        return

    found = "[green]yes[/green]" if result.app_found else "[red]no[/red]"
    running = "[red]yes[/red]" if result.app_running else "[green]no[/green]"
    console.print(f"  Installed: {found}")
    console.print(f"  Running:   {running}")
    console.print(f"  Apps path: {result.apps_path or '[dim]unresolved[/dim]'}")


@app.command()
def info() -> None:
    """Show system and platform information."""
    print_banner(console)

    platform_info = get_platform_info()

    console.print("[bold]System Information[/bold]\n")
    console.print(f"  Platform: {platform_info.name}")
    console.print(f"  Variant:  {platform_info.variant}")
    console.print(f"  Home:     {platform_info.home_dir}")
    if platform_info.is_wsl:
        console.print("  WSL:      Yes")

    console.print(f"  App:      {state.config.app.name}")
    _print_install_header()

    console.print(f"\n[dim]Version Guard v{__version__}[/dim]")


# Config subcommand group
config_app = typer.Typer(
    name="config",
    help="Manage Version Guard configuration.",
    no_args_is_help=True,
)
app.add_typer(config_app)


def _print_config_locations(xdg_path: Path, cwd_path: Path) -> None:
    """Print config file locations and their status."""
    console.print("\n[bold]Config locations:[/bold]")
    xdg_status = "[green]exists[/green]" if xdg_path.exists() else "[dim]not found[/dim]"
    console.print(f"  Global: {xdg_path} ({xdg_status})")

    cwd_status = "[green]exists (overrides global)[/green]" if cwd_path.exists() else "[dim]not found[/dim]"
    console.print(f"  Local:  {cwd_path} ({cwd_status})")


@config_app.command("init")
def config_init(
    global_config: bool = typer.Option(
        True,
        "--global/--local",
        help="Create in XDG config (--global) or current directory (--local)",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite existing config file",
    ),
) -> None:
    """Generate a default configuration file with comments."""
    xdg_path, cwd_path = get_config_paths()
    target = xdg_path if global_config else cwd_path

    if target.exists() and not force:
        console.print(f"[yellow]Config already exists: {target}[/yellow]")
        console.print("[dim]Use --force to overwrite[/dim]")
        raise typer.Exit(1)

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(DEFAULT_CONFIG_TEMPLATE)
    except OSError as e:
        console.print(f"[red]Permission denied: {target}[/red]")
        console.print(f"[dim]Check write permissions for {target.parent}[/dim]")
        raise typer.Exit(1) from e

    location = "global" if global_config else "local"
    console.print(f"[green]Created {location} config:[/green] {target}")


@config_app.command("show")
def config_show() -> None:
    """Display the active configuration and its source."""
    config = state.config

    source_text = str(config._source) if config._source else "[dim]defaults only[/dim]"
    console.print(
        Panel.fit(
            f"[bold]Active config:[/bold] {source_text}",
            title="Configuration Source",
        )
    )

    table = Table(title="Resolved Configuration", show_header=True)
    table.add_column("Section", style="cyan")
    table.add_column("Key", style="green")
    table.add_column("Value")

    for section_name in ["app", "defaults", "cache"]:
        section = getattr(config, section_name)
        for key, value in vars(section).items():
            table.add_row(section_name, key, str(value))

    console.print(table)
    _print_config_locations(*get_config_paths())


@config_app.command("path")
def config_path() -> None:
    """Show configuration file locations and status."""
    _print_config_locations(*get_config_paths())


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"Version Guard v{__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file (overrides default locations)",
        exists=True,
        readable=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Show debug logging",
    ),
) -> None:
    """Version Guard - keep your application on the version you chose."""
    configure_logging(verbose=verbose)

    try:
        if config_file:
            state.config = load_config_from_file(config_file)
        else:
            state.config = load_config()
    except ValueError as e:
        console.print(f"[red]Config error: {e}[/red]")
        raise typer.Exit(1) from e


if __name__ == "__main__":
    app()
