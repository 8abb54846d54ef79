"""Discovery of installed version directories."""

from __future__ import annotations

import os
import re
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from version_guard.platform.detect import InstallPaths

VERSION_DIR_PATTERN = re.compile(r"^\d+(\.\d+)+$")


@dataclass
class VersionInfo:
    """An installed version directory."""

    name: str
    path: Path
    size_bytes: int
    file_count: int
    has_executable: bool

    @property
    def size_human(self) -> str:
        return format_size(self.size_bytes)

    @property
    def version_key(self) -> tuple[int, ...]:
        return version_key(self.name)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["path"] = str(self.path)
        return data


def format_size(size_bytes: int) -> str:
    """Convert bytes to human-readable format."""
    size = float(size_bytes)
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} PB"


def version_key(name: str) -> tuple[int, ...]:
    """Numeric sort key for a dotted version label."""
    return tuple(int(part) for part in name.split("."))


def get_directory_size(path: Path) -> tuple[int, int]:
    """
    Calculate directory size using os.scandir.

    Returns:
        Tuple of (total_bytes, file_count)
    """
    total_size = 0
    file_count = 0

    try:
        with os.scandir(path) as entries:
            for entry in entries:
                try:
                    if entry.is_symlink():
                        continue
                    if entry.is_file(follow_symlinks=False):
                        total_size += entry.stat(follow_symlinks=False).st_size
                        file_count += 1
                    elif entry.is_dir(follow_symlinks=False):
                        sub_size, sub_count = get_directory_size(Path(entry.path))
                        total_size += sub_size
                        file_count += sub_count
                except OSError:
                    continue
    except OSError:
        pass

    return total_size, file_count


def scan_versions(paths: InstallPaths, executable: str) -> list[VersionInfo]:
    """
    List version directories under the Apps directory, newest first.

    Only directories named like a dotted numeric version are reported.
    """
    if not paths.apps.is_dir():
        return []

    versions: list[VersionInfo] = []
    with os.scandir(paths.apps) as entries:
        for entry in entries:
            if not entry.is_dir(follow_symlinks=False):
                continue
            if not VERSION_DIR_PATTERN.match(entry.name):
                continue

            version_dir = Path(entry.path)
            size, count = get_directory_size(version_dir)
            versions.append(
                VersionInfo(
                    name=entry.name,
                    path=version_dir,
                    size_bytes=size,
                    file_count=count,
                    has_executable=(version_dir / executable).is_file(),
                )
            )

    versions.sort(key=lambda v: v.version_key, reverse=True)
    return versions
