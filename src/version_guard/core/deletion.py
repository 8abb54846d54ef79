"""Deletion of installed version directories."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Sequence
from pathlib import Path
from typing import Optional, Union

from version_guard.core.attributes import AttributeManager
from version_guard.core.results import OperationResult
from version_guard.errors import IoError
from version_guard.platform.detect import InstallPaths
from version_guard.safety.protected import is_protected_path

logger = logging.getLogger(__name__)


class DeletionManager:
    """Removes version directories in order, stopping at the first failure."""

    def __init__(
        self,
        attributes: Optional[AttributeManager] = None,
        install_paths: Optional[InstallPaths] = None,
    ):
        self.attributes = attributes or AttributeManager()
        self.install_paths = install_paths

    def delete_versions(self, paths: Sequence[Union[str, Path]]) -> OperationResult:
        """
        Delete each version directory in the given order.

        Read-only flags are cleared first (best-effort). The first directory
        that cannot be deleted ends the run: later paths are not attempted
        and earlier deletions are not undone.

        Args:
            paths: Version directories to delete

        Returns:
            OperationResult with one log line per attempted path
        """
        logs: list[str] = []

        if not paths:
            logs.append("[OK] No versions to delete")
            return OperationResult.ok(logs)

        for raw in paths:
            path = Path(raw)
            logs.append(f"Deleting: {path.name}")

            try:
                self._delete_directory(path)
            except IoError as e:
                logger.warning("Deletion stopped at %s: %s", path, e.detail)
                return OperationResult.failed(e, logs)

        logs.append(f"[OK] Deleted {len(paths)} version(s)")
        return OperationResult.ok(logs)

    def _delete_directory(self, path: Path) -> None:
        """Delete a single version directory safely."""
        name = path.name

        if is_protected_path(path, self.install_paths):
            raise IoError(
                path,
                "refusing to delete protected path",
                f"Failed to delete {name}: refusing to delete protected path",
            )

        self.attributes.clear_readonly_recursive(path)

        try:
            shutil.rmtree(path)
        except OSError as e:
            raise IoError(path, str(e), f"Failed to delete {name}: {e}") from e
