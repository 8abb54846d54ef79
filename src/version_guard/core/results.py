"""Request and response records exchanged by the command surface."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from collections.abc import Mapping
from typing import Any, Optional

from version_guard.errors import ErrorKind, GuardError


def _record_dict(record: Any) -> dict[str, Any]:
    data = asdict(record)
    for key, value in data.items():
        if isinstance(value, ErrorKind):
            data[key] = value.value
    return data


def _known_fields(record_type: type, data: Mapping[str, Any]) -> dict[str, Any]:
    """Keep only the keys that name a field of record_type."""
    known = {f.name for f in fields(record_type)}
    return {k: v for k, v in data.items() if k in known}


@dataclass
class OperationResult:
    """Outcome of a mutating operation plus its cumulative log."""

    success: bool
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    logs: list[str] = field(default_factory=list)

    @classmethod
    def ok(cls, logs: list[str]) -> "OperationResult":
        return cls(success=True, logs=logs)

    @classmethod
    def failed(cls, error: GuardError, logs: list[str]) -> "OperationResult":
        return cls(success=False, error=str(error), error_kind=error.kind, logs=logs)

    def to_dict(self) -> dict[str, Any]:
        return _record_dict(self)


@dataclass
class SwitchResult:
    """Outcome of a version switch."""

    success: bool
    message: str
    logs: list[str] = field(default_factory=list)
    error_kind: Optional[ErrorKind] = None

    def to_dict(self) -> dict[str, Any]:
        return _record_dict(self)


@dataclass(frozen=True)
class ProtectionStatus:
    """Protection state derived from disk; never persisted."""

    config_locked: bool = False
    blockers_exist: bool = False

    @property
    def is_protected(self) -> bool:
        return self.config_locked or self.blockers_exist

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_protected": self.is_protected,
            "config_locked": self.config_locked,
            "blockers_exist": self.blockers_exist,
        }


@dataclass(frozen=True)
class ProtectionOptions:
    """Which protection measures to apply."""

    lock_config: bool = True
    create_blockers: bool = True

    @property
    def any_enabled(self) -> bool:
        return self.lock_config or self.create_blockers

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProtectionOptions":
        """Build options from a plain mapping, ignoring unknown keys."""
        return cls(**_known_fields(cls, data))


@dataclass
class ProtectionParams:
    """Parameters of the full protection sequence."""

    versions_to_delete: list[str] = field(default_factory=list)
    clean_cache: bool = False
    lock_config: bool = True
    create_blockers: bool = True

    @property
    def options(self) -> ProtectionOptions:
        return ProtectionOptions(
            lock_config=self.lock_config,
            create_blockers=self.create_blockers,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProtectionParams":
        """Build params from a plain mapping, ignoring unknown keys."""
        return cls(**_known_fields(cls, data))
