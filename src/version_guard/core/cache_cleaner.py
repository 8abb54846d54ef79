"""Cleaning of the application's cache directories."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

from send2trash import send2trash

from version_guard.core.attributes import AttributeManager
from version_guard.core.results import OperationResult
from version_guard.core.scanner import format_size, get_directory_size
from version_guard.platform.detect import InstallPaths

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DIRECTORIES = ("User Data/Cache", "User Data/Log", "User Data/Temp")


def get_cache_paths(paths: InstallPaths, directories: Iterable[str]) -> list[Path]:
    """Existing cache directories below the installation root."""
    candidates = [paths.root / directory for directory in directories]
    return [p for p in candidates if p.is_dir()]


def calculate_cache_size(
    paths: InstallPaths,
    directories: Iterable[str] = DEFAULT_CACHE_DIRECTORIES,
) -> int:
    """Total size in bytes of all existing cache directories."""
    return sum(get_directory_size(p)[0] for p in get_cache_paths(paths, directories))


class CacheCleaner:
    """Empties cache directories while keeping the directories themselves."""

    def __init__(self, use_trash: bool = False, attributes: Optional[AttributeManager] = None):
        self.use_trash = use_trash
        self.attributes = attributes or AttributeManager()

    def clean(
        self,
        paths: InstallPaths,
        directories: Iterable[str] = DEFAULT_CACHE_DIRECTORIES,
    ) -> OperationResult:
        """
        Delete the contents of each cache directory.

        Failures are logged per entry; the result is always successful.
        """
        logs: list[str] = []
        freed = 0

        cache_dirs = get_cache_paths(paths, directories)
        if not cache_dirs:
            logs.append("[OK] No cache directories found")
            return OperationResult.ok(logs)

        for cache_dir in cache_dirs:
            logs.append(f"Cleaning: {cache_dir.relative_to(paths.root)}")
            try:
                entries = list(cache_dir.iterdir())
            except OSError as e:
                logs.append(f"[!] Could not read {cache_dir.name}: {e}")
                continue

            for entry in entries:
                size = get_directory_size(entry)[0] if entry.is_dir() else self._file_size(entry)
                try:
                    self._delete_entry(entry)
                except OSError as e:
                    logger.warning("Could not delete cache entry %s: %s", entry, e)
                    logs.append(f"[!] Could not delete {entry.name}: {e}")
                else:
                    freed += size

        logs.append(f"[OK] Cache cleaned ({format_size(freed)} freed)")
        return OperationResult.ok(logs)

    def _delete_entry(self, entry: Path) -> None:
        self.attributes.clear_readonly_recursive(entry)

        if self.use_trash:
            send2trash(str(entry.absolute()))
            return

        if entry.is_dir() and not entry.is_symlink():
            shutil.rmtree(entry)
        else:
            entry.unlink()

    @staticmethod
    def _file_size(entry: Path) -> int:
        try:
            return entry.lstat().st_size
        except OSError:
            return 0
