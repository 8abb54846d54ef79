"""Error kinds raised by the protection engine."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional


class ErrorKind(str, Enum):
    """Closed set of failure categories reported in response records."""

    ENVIRONMENT_UNRESOLVED = "environment_unresolved"
    IO_ERROR = "io_error"
    PRECONDITION_FAILED = "precondition_failed"
    TARGET_NOT_FOUND = "target_not_found"
    PARTIAL_FAILURE = "partial_failure"


class GuardError(Exception):
    """Base error for protection and version-switching operations."""

    kind: ErrorKind = ErrorKind.IO_ERROR


class EnvironmentUnresolved(GuardError):
    """The installation root could not be located."""

    kind = ErrorKind.ENVIRONMENT_UNRESOLVED


class IoError(GuardError):
    """A read, write, delete or attribute change failed on a path."""

    kind = ErrorKind.IO_ERROR

    def __init__(self, path: Path, detail: str, message: Optional[str] = None):
        self.path = path
        self.detail = detail
        super().__init__(message or detail)


class PreconditionFailed(GuardError):
    """The protected application is still running."""

    kind = ErrorKind.PRECONDITION_FAILED


class TargetNotFound(GuardError):
    """The requested version directory does not exist."""

    kind = ErrorKind.TARGET_NOT_FOUND


class PartialFailure(GuardError):
    """A multi-step operation stopped after some steps succeeded."""

    kind = ErrorKind.PARTIAL_FAILURE
