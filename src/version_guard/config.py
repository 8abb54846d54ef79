"""Configuration management for Version Guard CLI."""

from __future__ import annotations

import os
import re
import sys
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

# Conditional import for Python 3.10 compatibility
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found]

from version_guard.core.cache_cleaner import DEFAULT_CACHE_DIRECTORIES
from version_guard.core.protection import DEFAULT_SENTINEL_VERSION
from version_guard.core.switcher import DEFAULT_EXECUTABLE
from version_guard.platform.detect import DEFAULT_APP_NAME, DEFAULT_ENV_VAR
from version_guard.platform.process import DEFAULT_PROCESS_NAMES

_VERSION_RE = re.compile(r"^\d+(\.\d+)+$")


@dataclass
class AppConfig:
    """The protected application."""

    name: str = DEFAULT_APP_NAME
    executable: str = DEFAULT_EXECUTABLE
    process_names: list[str] = field(default_factory=lambda: list(DEFAULT_PROCESS_NAMES))
    env_var: str = DEFAULT_ENV_VAR
    sentinel_version: str = DEFAULT_SENTINEL_VERSION


@dataclass
class DefaultsConfig:
    """Default behavior options."""

    lock_config: bool = True
    create_blockers: bool = True
    clean_cache: bool = True
    trash: bool = False
    interactive: bool = True


@dataclass
class CacheConfig:
    """Cache directories relative to the installation root."""

    directories: list[str] = field(default_factory=lambda: list(DEFAULT_CACHE_DIRECTORIES))


@dataclass
class Config:
    """Root configuration container."""

    app: AppConfig = field(default_factory=AppConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)

    # Metadata (not from TOML)
    _source: Path | None = field(default=None, repr=False)


def get_xdg_config_home() -> Path:
    """Get XDG config home, respecting environment variable."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    return Path.home() / ".config"


def get_config_paths() -> tuple[Path, Path]:
    """
    Get config file paths in priority order.

    Returns:
        (xdg_path, cwd_path) - XDG is base, CWD overrides
    """
    xdg_path = get_xdg_config_home() / "version-guard" / "config.toml"
    cwd_path = Path.cwd() / "versionguard.toml"
    return xdg_path, cwd_path


def _load_toml(path: Path) -> dict[str, Any]:
    """Load and parse a TOML file."""
    with open(path, "rb") as f:
        result: dict[str, Any] = tomllib.load(f)
        return result


def _merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, override takes precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_dicts(result[key], value)
        else:
            result[key] = value
    return result


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) and v for v in value)


def _validate_config(data: dict[str, Any]) -> list[str]:
    """Validate TOML data and return list of errors."""
    errors: list[str] = []
    app = data.get("app", {})

    sentinel = app.get("sentinel_version")
    if sentinel is not None and not (isinstance(sentinel, str) and _VERSION_RE.match(sentinel)):
        errors.append(f"Invalid app.sentinel_version: '{sentinel}' (use: 1.0.0.0)")

    for key in ("name", "executable", "env_var"):
        value = app.get(key)
        if value is not None and not (isinstance(value, str) and value.strip()):
            errors.append(f"Invalid app.{key}: must be a non-empty string")

    process_names = app.get("process_names")
    if process_names is not None and not _is_string_list(process_names):
        errors.append("Invalid app.process_names: must be a list of names")

    directories = data.get("cache", {}).get("directories")
    if directories is not None:
        if not _is_string_list(directories):
            errors.append("Invalid cache.directories: must be a list of relative paths")
        elif any(Path(d).is_absolute() or ".." in Path(d).parts for d in directories):
            errors.append("Invalid cache.directories: paths must stay inside the install root")

    return errors


def _filter_known_keys(data: dict[str, Any], dataclass_type: type) -> dict[str, Any]:
    """Filter dict to only include keys that are valid fields for the dataclass."""
    valid_fields = {f.name for f in fields(dataclass_type)}
    return {k: v for k, v in data.items() if k in valid_fields}


# Mapping of section names to their config classes
SECTION_TYPES = {
    "app": AppConfig,
    "defaults": DefaultsConfig,
    "cache": CacheConfig,
}


def _dict_to_config(data: dict[str, Any], source: Path | None = None) -> Config:
    """Convert parsed TOML dict to Config dataclass."""
    sections = {
        name: cls(**_filter_known_keys(data.get(name, {}), cls))
        for name, cls in SECTION_TYPES.items()
    }
    return Config(**sections, _source=source)


def load_config() -> Config:
    """
    Load configuration with XDG + CWD override precedence.

    Priority (highest to lowest):
    1. ./versionguard.toml (CWD override)
    2. ~/.config/version-guard/config.toml (XDG base)
    3. Built-in defaults

    Returns:
        Merged Config instance

    Raises:
        ValueError: If TOML syntax is invalid in either config file
    """
    xdg_path, cwd_path = get_config_paths()

    merged_data: dict[str, Any] = {}
    active_source: Path | None = None

    if xdg_path.exists():
        try:
            merged_data = _load_toml(xdg_path)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {xdg_path}: {e}") from e
        active_source = xdg_path

    if cwd_path.exists():
        try:
            cwd_data = _load_toml(cwd_path)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {cwd_path}: {e}") from e
        merged_data = _merge_dicts(merged_data, cwd_data)
        active_source = cwd_path

    if merged_data:
        errors = _validate_config(merged_data)
        if errors:
            raise ValueError(f"Config validation failed ({active_source}): {'; '.join(errors)}")

    return _dict_to_config(merged_data, active_source)


def load_config_from_file(path: Path) -> Config:
    """Load configuration from a specific file."""
    try:
        data = _load_toml(path)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {path}: {e}") from e
    errors = _validate_config(data)
    if errors:
        raise ValueError(f"Config validation failed: {'; '.join(errors)}")
    return _dict_to_config(data, path)


# Default config template for `config init`
DEFAULT_CONFIG_TEMPLATE = """\
# Version Guard Configuration

[app]
name = "CapCut"                 # Folder name under the app-data root
executable = "CapCut.exe"       # Executable inside each version directory
process_names = ["CapCut", "CapCut.exe"]
env_var = "LOCALAPPDATA"        # Environment variable holding the app-data root
sentinel_version = "1.0.0.0"    # last_version pinned by the config lock

[defaults]
lock_config = true      # Pin last_version in configure.ini
create_blockers = true  # Create read-only ProductInfo.xml and update.exe
clean_cache = true      # Empty cache directories during `run`
trash = false           # Send cache entries to the recycle bin
interactive = true      # Prompt before destructive actions

[cache]
# Relative to the installation root
directories = ["User Data/Cache", "User Data/Log", "User Data/Temp"]
"""
