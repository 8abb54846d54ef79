"""Protected path definitions to prevent deleting more than a version directory."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Set

from version_guard.platform.detect import InstallPaths

# Paths that must never be handed to a recursive delete
PROTECTED_PATTERNS: Set[str] = {
    # POSIX system
    "/",
    "/bin",
    "/boot",
    "/dev",
    "/etc",
    "/home",
    "/lib",
    "/opt",
    "/proc",
    "/root",
    "/sys",
    "/tmp",
    "/usr",
    "/var",

    # Windows system
    "C:\\",
    "C:\\Windows",
    "C:\\Program Files",
    "C:\\Program Files (x86)",
    "C:\\ProgramData",
    "C:\\Users",

    # macOS system
    "/System",
    "/Library",
    "/Applications",
    "/Users",
}

# Folders directly under the home directory
CRITICAL_HOME_FOLDERS: Set[str] = {
    "AppData",
    "Desktop",
    "Documents",
    "Downloads",
    "Music",
    "Pictures",
    "Videos",
}


def _normalize(path: Path) -> str:
    return os.path.normcase(str(path.absolute())).rstrip("\\/") or os.sep


def is_protected_path(path: Path, paths: Optional[InstallPaths] = None) -> bool:
    """
    Check if a path must not be deleted as a version directory.

    Only exact matches are refused: a directory beneath a protected
    location is fine, the location itself is not.

    Args:
        path: Path about to be deleted
        paths: Installation layout; its root and Apps directory are protected too

    Returns:
        True if the path is protected
    """
    target = _normalize(path)

    for protected in PROTECTED_PATTERNS:
        if target == _normalize(Path(protected)):
            return True

    # Drive roots and the home directory
    if path.absolute().parent == path.absolute():
        return True

    home = Path.home()
    if target == _normalize(home):
        return True
    if _normalize(path.parent) == _normalize(home) and path.name in CRITICAL_HOME_FOLDERS:
        return True

    if paths is not None:
        install_locations = (paths.root, paths.apps, paths.root.parent)
        if target in {_normalize(p) for p in install_locations}:
            return True

    return False
