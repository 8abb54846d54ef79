"""Interactive prompts for user input."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import typer
from InquirerPy import inquirer
from InquirerPy.base.control import Choice

if TYPE_CHECKING:
    from version_guard.core.scanner import VersionInfo


def confirm_action(message: str) -> bool:
    """Ask the user to confirm a destructive action (default: no)."""
    return typer.confirm(f"\n{message}", default=False)


def select_versions(versions: list["VersionInfo"]) -> list["VersionInfo"]:
    """
    Let user interactively select version directories to delete.

    Args:
        versions: Installed versions, newest first

    Returns:
        List of selected versions
    """
    choices = [
        Choice(value=v, name=f"{v.name:<16} | {v.size_human:>10} | {v.path}")
        for v in versions
    ]

    selected = inquirer.checkbox(
        message="Select versions to delete (Space to toggle, Enter to confirm):",
        choices=choices,
        cycle=True,
    ).execute()

    return selected or []


def select_version(versions: list["VersionInfo"]) -> Optional["VersionInfo"]:
    """Let user pick a single version to switch to."""
    if not versions:
        return None

    return inquirer.select(
        message="Select the version to activate:",
        choices=[Choice(value=v, name=f"{v.name:<16} | {v.path}") for v in versions],
    ).execute()
