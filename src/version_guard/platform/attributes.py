"""Platform backends for the read-only file attribute."""

from __future__ import annotations

import os
import platform
import stat
import subprocess
from pathlib import Path
from typing import Protocol

_WRITE_BITS = stat.S_IWUSR | stat.S_IWGRP | stat.S_IWOTH


class ReadOnlyBackend(Protocol):
    """Get and set the read-only flag on a single filesystem entry."""

    def is_readonly(self, path: Path) -> bool:
        ...

    def set_readonly(self, path: Path) -> None:
        ...

    def clear_readonly(self, path: Path) -> None:
        ...


class PosixReadOnlyBackend:
    """Read-only means no write permission bit is set."""

    def is_readonly(self, path: Path) -> bool:
        return not (os.stat(path).st_mode & _WRITE_BITS)

    def set_readonly(self, path: Path) -> None:
        mode = os.stat(path).st_mode
        os.chmod(path, stat.S_IMODE(mode) & ~_WRITE_BITS)

    def clear_readonly(self, path: Path) -> None:
        mode = os.stat(path).st_mode
        os.chmod(path, stat.S_IMODE(mode) | stat.S_IWUSR)


class WindowsReadOnlyBackend:
    """Uses the FILE_ATTRIBUTE_READONLY flag via `attrib`."""

    def is_readonly(self, path: Path) -> bool:
        attrs = getattr(os.stat(path), "st_file_attributes", 0)
        return bool(attrs & stat.FILE_ATTRIBUTE_READONLY)

    def set_readonly(self, path: Path) -> None:
        subprocess.run(
            ["attrib", "+r", str(path)],
            check=True,
            capture_output=True,
        )

    def clear_readonly(self, path: Path) -> None:
        # os.chmod toggles FILE_ATTRIBUTE_READONLY on Windows
        os.chmod(path, stat.S_IWRITE | stat.S_IREAD)


def get_default_backend() -> ReadOnlyBackend:
    """Return the backend for the current platform."""
    if platform.system() == "Windows":
        return WindowsReadOnlyBackend()
    return PosixReadOnlyBackend()
