"""Platform detection and installation path resolution."""

from __future__ import annotations

import os
import platform
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from version_guard.errors import EnvironmentUnresolved

DEFAULT_APP_NAME = "CapCut"
DEFAULT_ENV_VAR = "LOCALAPPDATA"

CONFIG_FILE_NAME = "configure.ini"
PRODUCT_INFO_NAME = "ProductInfo.xml"
UPDATE_BLOCKER_PARTS = ("User Data", "Download", "update.exe")


class EnvironmentProvider(Protocol):
    """Supplies the per-user local application-data root."""

    def local_app_data(self) -> Optional[Path]:
        ...


@dataclass
class OsEnvironmentProvider:
    """Reads the application-data root from an environment variable."""

    env_var: str = DEFAULT_ENV_VAR

    def local_app_data(self) -> Optional[Path]:
        value = os.environ.get(self.env_var)
        return Path(value) if value else None


@dataclass
class FixedEnvironmentProvider:
    """Returns a fixed application-data root (None means unresolved)."""

    root: Optional[Path]

    def local_app_data(self) -> Optional[Path]:
        return self.root


@dataclass(frozen=True)
class InstallPaths:
    """All filesystem locations the engine touches for one installation."""

    root: Path
    apps: Path

    @property
    def config_file(self) -> Path:
        return self.apps / CONFIG_FILE_NAME

    @property
    def product_info(self) -> Path:
        return self.apps / PRODUCT_INFO_NAME

    @property
    def update_blocker(self) -> Path:
        return self.root.joinpath(*UPDATE_BLOCKER_PARTS)

    @property
    def blocker_paths(self) -> tuple[Path, Path]:
        return self.product_info, self.update_blocker

    @classmethod
    def resolve(
        cls,
        provider: Optional[EnvironmentProvider] = None,
        app_name: str = DEFAULT_APP_NAME,
    ) -> "InstallPaths":
        """
        Resolve installation paths from the environment.

        Raises:
            EnvironmentUnresolved: If the provider has no application-data root
        """
        provider = provider or OsEnvironmentProvider()
        base = provider.local_app_data()
        if base is None:
            env_var = getattr(provider, "env_var", DEFAULT_ENV_VAR)
            raise EnvironmentUnresolved(f"Failed to get {env_var}")
        root = base / app_name
        return cls(root=root, apps=root / "Apps")


@dataclass
class PlatformInfo:
    """Information about the current platform."""

    name: str  # Windows, macOS, Linux
    variant: str
    home_dir: Path
    is_wsl: bool = False


def _detect_wsl() -> bool:
    """Detect if running under WSL."""
    if not os.path.exists("/proc/version"):
        return False

    try:
        with open("/proc/version", "r") as f:
            version = f.read().lower()
    except OSError:
        return False
    return "microsoft" in version or "wsl" in version


def get_platform_info() -> PlatformInfo:
    """Detect and return current platform information."""
    system = platform.system()
    home_dir = Path.home()

    if system == "Windows":
        return PlatformInfo(name="Windows", variant=platform.release(), home_dir=home_dir)

    if system == "Darwin":
        return PlatformInfo(
            name="macOS",
            variant=f"macOS {platform.mac_ver()[0]}",
            home_dir=home_dir,
        )

    if system == "Linux":
        is_wsl = _detect_wsl()
        distro = os.environ.get("WSL_DISTRO_NAME", "Unknown")
        return PlatformInfo(
            name="Linux",
            variant=f"WSL ({distro})" if is_wsl else platform.release(),
            home_dir=home_dir,
            is_wsl=is_wsl,
        )

    return PlatformInfo(name=system, variant="Unknown", home_dir=home_dir)
