"""Detection of the protected application's running process."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import asdict, dataclass
from typing import Any, Optional

import psutil

from version_guard.errors import EnvironmentUnresolved
from version_guard.platform.detect import (
    DEFAULT_APP_NAME,
    EnvironmentProvider,
    InstallPaths,
)

logger = logging.getLogger(__name__)

DEFAULT_PROCESS_NAMES = ("CapCut", "CapCut.exe")


def is_app_running(process_names: Iterable[str] = DEFAULT_PROCESS_NAMES) -> bool:
    """Check whether any process matches one of the given names (case-insensitive)."""
    wanted = {name.lower() for name in process_names}

    for proc in psutil.process_iter(["name"]):
        try:
            name = proc.info.get("name") or ""
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            continue
        if name.lower() in wanted:
            logger.debug("Found running process %s (pid %s)", name, proc.pid)
            return True

    return False


@dataclass
class PreCheckResult:
    """System pre-check results."""

    app_found: bool
    app_running: bool
    apps_path: Optional[str]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def perform_precheck(
    provider: Optional[EnvironmentProvider] = None,
    app_name: str = DEFAULT_APP_NAME,
    process_names: Iterable[str] = DEFAULT_PROCESS_NAMES,
) -> PreCheckResult:
    """Report whether the application is installed and whether it is running."""
    try:
        paths: Optional[InstallPaths] = InstallPaths.resolve(provider, app_name)
    except EnvironmentUnresolved:
        paths = None

    return PreCheckResult(
        app_found=paths is not None and paths.apps.exists(),
        app_running=is_app_running(process_names),
        apps_path=str(paths.apps) if paths else None,
    )
