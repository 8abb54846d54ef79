"""Repointing the active installation to another version directory."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from version_guard.core.attributes import AttributeManager
from version_guard.core.config_file import LAST_VERSION_KEY
from version_guard.core.results import SwitchResult
from version_guard.errors import EnvironmentUnresolved, ErrorKind
from version_guard.platform.detect import (
    DEFAULT_APP_NAME,
    EnvironmentProvider,
    InstallPaths,
)

logger = logging.getLogger(__name__)

DEFAULT_EXECUTABLE = "CapCut.exe"

PRODUCT_INFO_TEMPLATE = """<?xml version="1.0" charset="utf-8"?>
<ProductInfo>
  <InstallPath>{install_path}</InstallPath>
  <Version>{version}</Version>
</ProductInfo>"""

CONFIG_SECTION = "[Configure]"


def render_product_info(install_path: Path, version: str) -> str:
    return PRODUCT_INFO_TEMPLATE.format(install_path=install_path, version=version)


def render_switch_config(version: str) -> str:
    """Whole configure.ini content written by a switch (CRLF terminated)."""
    return f"{CONFIG_SECTION}\r\n{LAST_VERSION_KEY}={version}\r\n"


class VersionSwitcher:
    """Points ProductInfo.xml and configure.ini at a target version directory."""

    def __init__(
        self,
        provider: Optional[EnvironmentProvider] = None,
        app_name: str = DEFAULT_APP_NAME,
        executable: str = DEFAULT_EXECUTABLE,
        attributes: Optional[AttributeManager] = None,
        strict: bool = True,
    ):
        self.provider = provider
        self.app_name = app_name
        self.executable = executable
        self.attributes = attributes or AttributeManager()
        self.strict = strict

    def switch_version(self, target_path: Union[str, Path]) -> SwitchResult:
        """
        Make the version at target_path the active one.

        Both files are written independently: a failure on one is logged and
        does not prevent the other. With ``strict`` (the default) any write
        failure makes the result unsuccessful; otherwise the switch reports
        success whenever the target exists.
        """
        target_dir = Path(target_path)
        logs: list[str] = [f"Initiating switch to version at: {target_dir}"]

        if not target_dir.exists():
            logs.append("[!] Target directory does not exist")
            return SwitchResult(
                success=False,
                message="Target version not found",
                logs=logs,
                error_kind=ErrorKind.TARGET_NOT_FOUND,
            )

        version = target_dir.name or "unknown"
        logs.append(f"Detected version: {version}")

        try:
            paths = InstallPaths.resolve(self.provider, self.app_name)
        except EnvironmentUnresolved as e:
            logs.append(f"[!] {e}")
            return SwitchResult(
                success=False,
                message=str(e),
                logs=logs,
                error_kind=e.kind,
            )

        product_info = paths.product_info
        logs.append(f"Updating ProductInfo at: {product_info}")
        pointer_ok = self._write(
            product_info,
            render_product_info(target_dir / self.executable, version),
            logs,
        )

        config_file = paths.config_file
        logs.append(f"Updating {config_file.name} at: {config_file}")
        config_ok = self._write(config_file, render_switch_config(version), logs)

        if self.strict and not (pointer_ok and config_ok):
            return SwitchResult(
                success=False,
                message="Switched with errors",
                logs=logs,
                error_kind=ErrorKind.PARTIAL_FAILURE,
            )

        return SwitchResult(
            success=True,
            message=f"Successfully switched to v{version}",
            logs=logs,
        )

    def _write(self, path: Path, content: str, logs: list[str]) -> bool:
        """Clear read-only if set, then overwrite path. Failures are logged."""
        try:
            if self.attributes.clear_readonly(path):
                logs.append(f"Removed Read-Only attribute from {path.name}")
        except OSError as e:
            logger.debug("Could not clear read-only on %s: %s", path, e)

        try:
            path.write_text(content, encoding="utf-8", newline="")
        except OSError as e:
            logger.warning("Failed to write %s: %s", path, e)
            logs.append(f"[!] Failed to write {path.name}: {e}")
            return False

        logs.append(f"[OK] Updated {path.name}")
        return True
