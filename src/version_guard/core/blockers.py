"""Zero-byte read-only marker files that block the external updater."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Optional

from version_guard.core.attributes import AttributeManager
from version_guard.errors import IoError

logger = logging.getLogger(__name__)


class BlockerFileManager:
    """Creates, removes and recognizes blocker files."""

    def __init__(self, attributes: Optional[AttributeManager] = None):
        self.attributes = attributes or AttributeManager()

    def create_blocker(self, path: Path) -> None:
        """
        Replace whatever is at path with an empty read-only file.

        Any existing file or directory at path is discarded first.

        Raises:
            IoError: If removal, write or the attribute change fails
        """
        try:
            if path.exists() or path.is_symlink():
                self.attributes.clear_readonly_recursive(path)
                if path.is_dir() and not path.is_symlink():
                    shutil.rmtree(path)
                else:
                    path.unlink()

            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(b"")
            self.attributes.set_readonly(path)
        except (OSError, AttributeError) as e:
            raise IoError(path, str(e)) from e

        logger.debug("Created blocker %s", path)

    def remove_blocker(self, path: Path, logs: list[str]) -> None:
        """
        Delete a blocker file, logging instead of raising on failure.

        A missing path is a no-op.
        """
        if not path.exists():
            return

        name = path.name
        logs.append(f"Removing {name} blocker...")
        self.attributes.clear_readonly_recursive(path)

        try:
            path.unlink()
        except OSError as e:
            logger.warning("Could not remove blocker %s: %s", path, e)
            logs.append(f"[!] Could not remove {name}: {e}")
        else:
            logs.append(f"[OK] {name} blocker removed")

    def is_blocker_present(self, path: Path) -> bool:
        """True iff path is an existing zero-byte file carrying read-only."""
        try:
            if not path.is_file() or path.stat().st_size != 0:
                return False
        except OSError:
            return False
        return self.attributes.is_readonly(path)
