"""Applying, removing and detecting update protection."""

from __future__ import annotations

import logging
from typing import Optional

from version_guard.core.attributes import AttributeManager
from version_guard.core.blockers import BlockerFileManager
from version_guard.core.config_file import LAST_VERSION_KEY, ConfigPatcher
from version_guard.core.results import OperationResult, ProtectionOptions, ProtectionStatus
from version_guard.errors import EnvironmentUnresolved, GuardError, IoError
from version_guard.platform.detect import (
    DEFAULT_APP_NAME,
    EnvironmentProvider,
    InstallPaths,
)

logger = logging.getLogger(__name__)

DEFAULT_SENTINEL_VERSION = "1.0.0.0"


class ProtectionOrchestrator:
    """
    Combines the config lock and the blocker files into one protection state.

    Nothing is stored between calls: the installation root is resolved and
    disk state is re-read on every operation.
    """

    def __init__(
        self,
        provider: Optional[EnvironmentProvider] = None,
        app_name: str = DEFAULT_APP_NAME,
        sentinel_version: str = DEFAULT_SENTINEL_VERSION,
        attributes: Optional[AttributeManager] = None,
    ):
        self.provider = provider
        self.app_name = app_name
        self.sentinel_version = sentinel_version
        self.attributes = attributes or AttributeManager()
        self.patcher = ConfigPatcher("\n")
        self.blockers = BlockerFileManager(self.attributes)

    @property
    def sentinel_entry(self) -> str:
        return f"{LAST_VERSION_KEY}={self.sentinel_version}"

    def resolve_paths(self) -> InstallPaths:
        return InstallPaths.resolve(self.provider, self.app_name)

    def apply(self, options: Optional[ProtectionOptions] = None) -> OperationResult:
        """
        Lock the config and/or create blockers, in that order.

        Stops at the first failing step; completed steps are not rolled back.
        """
        options = options or ProtectionOptions()
        logs: list[str] = []

        try:
            paths = self.resolve_paths()

            if options.lock_config:
                logs.append("Modifying config...")
                self._lock_config(paths)
                logs.append("[OK] Configuration locked")
            else:
                logs.append("Skipping config lock (disabled)")

            if options.create_blockers:
                logs.append("Creating blockers...")
                for blocker in paths.blocker_paths:
                    self.blockers.create_blocker(blocker)
                logs.append("[OK] Update blockers created")
            else:
                logs.append("Skipping blocker creation (disabled)")
        except GuardError as e:
            logger.warning("Protection not applied: %s", e)
            return OperationResult.failed(e, logs)

        return OperationResult.ok(logs)

    def remove(self) -> OperationResult:
        """
        Remove blockers and the config lock.

        Individual failures are logged; only an unresolved installation
        root makes this fail.
        """
        logs: list[str] = []

        try:
            paths = self.resolve_paths()
        except EnvironmentUnresolved as e:
            return OperationResult.failed(e, logs)

        for blocker in paths.blocker_paths:
            self.blockers.remove_blocker(blocker, logs)

        config_file = paths.config_file
        if config_file.exists():
            logs.append(f"Resetting {config_file.name}...")
            self.attributes.clear_readonly_recursive(config_file)
            try:
                self.patcher.remove_key(config_file, LAST_VERSION_KEY)
            except OSError as e:
                logger.warning("Could not reset %s: %s", config_file, e)
                logs.append(f"[!] Could not reset {config_file.name}: {e}")
            else:
                logs.append(f"[OK] {config_file.name} reset")

        logs.append(f"[OK] Protection removed - {self.app_name} can now auto-update")
        return OperationResult.ok(logs)

    def status(self) -> ProtectionStatus:
        """Derive the current protection state from disk."""
        try:
            paths = self.resolve_paths()
        except EnvironmentUnresolved:
            return ProtectionStatus()

        blockers_exist = any(
            self.blockers.is_blocker_present(blocker) for blocker in paths.blocker_paths
        )
        config_locked = self.patcher.read_contains(paths.config_file, self.sentinel_entry)

        return ProtectionStatus(config_locked=config_locked, blockers_exist=blockers_exist)

    def _lock_config(self, paths: InstallPaths) -> None:
        config_file = paths.config_file
        try:
            self.patcher.upsert_key(config_file, LAST_VERSION_KEY, self.sentinel_version)
        except OSError as e:
            raise IoError(config_file, str(e)) from e
