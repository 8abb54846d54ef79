"""Line-preserving edits of the application's configure.ini."""

from __future__ import annotations

from pathlib import Path

LAST_VERSION_KEY = "last_version"

# Bytes that are not UTF-8 (e.g. ANSI code page paths) pass through unchanged
ENCODING_ERRORS = "surrogateescape"


def _read_lines(file_path: Path) -> list[str]:
    if not file_path.exists():
        return []
    return file_path.read_text(encoding="utf-8", errors=ENCODING_ERRORS).splitlines()


class ConfigPatcher:
    """
    Upserts or removes a single key in a newline-separated key=value file.

    Lines are matched on their trimmed form starting with the key, and all
    other lines keep their content and order. Writes join lines with the
    configured separator and no trailing terminator.
    """

    def __init__(self, line_separator: str = "\n"):
        self.line_separator = line_separator

    def upsert_key(self, file_path: Path, key: str, value: str) -> None:
        """
        Bind key to value, replacing every existing line for key.

        A missing file is treated as empty. If the key was absent it is
        appended as the last line.

        Raises:
            OSError: If the file cannot be written
        """
        entry = f"{key}={value}"
        new_lines: list[str] = []
        found = False

        for line in _read_lines(file_path):
            if line.strip().startswith(key):
                if not found:
                    new_lines.append(entry)
                found = True
            else:
                new_lines.append(line)

        if not found:
            new_lines.append(entry)

        file_path.write_text(
            self.line_separator.join(new_lines), encoding="utf-8", errors=ENCODING_ERRORS, newline=""
        )

    def remove_key(self, file_path: Path, key: str) -> bool:
        """
        Drop every line whose trimmed form starts with key.

        Returns:
            False if the file does not exist (nothing is written), True otherwise

        Raises:
            OSError: If the file cannot be read or written
        """
        if not file_path.exists():
            return False

        kept = [line for line in _read_lines(file_path) if not line.strip().startswith(key)]
        file_path.write_text(
            self.line_separator.join(kept), encoding="utf-8", errors=ENCODING_ERRORS, newline=""
        )
        return True

    @staticmethod
    def read_contains(file_path: Path, substring: str) -> bool:
        """Return True if the file exists and its text contains substring."""
        try:
            return substring in file_path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            return False
