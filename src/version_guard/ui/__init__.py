"""UI components for console output and prompts."""

from __future__ import annotations

from .console import create_console, print_banner
from .prompts import confirm_action, select_version, select_versions

__all__ = ["create_console", "print_banner", "confirm_action", "select_version", "select_versions"]
