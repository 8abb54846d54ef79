"""Read-only attribute handling for files and directory trees."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Optional

from version_guard.platform.attributes import ReadOnlyBackend, get_default_backend

logger = logging.getLogger(__name__)


class AttributeManager:
    """Clears and sets the read-only flag through a platform backend."""

    def __init__(self, backend: Optional[ReadOnlyBackend] = None):
        self.backend = backend or get_default_backend()

    def is_readonly(self, path: Path) -> bool:
        """Return True if path exists and carries the read-only flag."""
        try:
            return self.backend.is_readonly(path)
        except OSError:
            return False

    def clear_readonly(self, path: Path) -> bool:
        """
        Clear read-only on a single entry if it is set.

        Returns:
            True if the flag was set and has been cleared
        """
        if not self.is_readonly(path):
            return False
        self.backend.clear_readonly(path)
        return True

    def clear_readonly_recursive(self, path: Path) -> None:
        """
        Clear read-only on path and everything beneath it.

        Best-effort: entries that cannot be read or changed are skipped.
        A missing path is a no-op.
        """
        if not os.path.lexists(path):
            return

        self._clear_entry(path)
        if not path.is_dir() or path.is_symlink():
            return

        for dirpath, dirnames, filenames in os.walk(path, onerror=self._on_walk_error):
            for name in dirnames + filenames:
                self._clear_entry(Path(dirpath) / name)

    def set_readonly(self, path: Path) -> None:
        """
        Mark a single existing file read-only.

        Raises:
            AttributeError: If the platform call fails
        """
        try:
            self.backend.set_readonly(path)
        except (OSError, subprocess.CalledProcessError) as e:
            raise AttributeError(f"Failed to set read-only on {path}: {e}") from e

    def _clear_entry(self, path: Path) -> None:
        try:
            self.clear_readonly(path)
        except OSError as e:
            logger.debug("Could not clear read-only on %s: %s", path, e)

    @staticmethod
    def _on_walk_error(error: OSError) -> None:
        logger.debug("Skipping unreadable entry %s: %s", error.filename, error)
