"""Platform detection and handling."""

from __future__ import annotations

from .attributes import ReadOnlyBackend, get_default_backend
from .detect import (
    EnvironmentProvider,
    FixedEnvironmentProvider,
    InstallPaths,
    OsEnvironmentProvider,
    PlatformInfo,
    get_platform_info,
)

__all__ = [
    "EnvironmentProvider",
    "FixedEnvironmentProvider",
    "InstallPaths",
    "OsEnvironmentProvider",
    "PlatformInfo",
    "ReadOnlyBackend",
    "get_default_backend",
    "get_platform_info",
]
