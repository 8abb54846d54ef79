"""Record-in, record-out entry points for every protection command."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Mapping, Optional, Union

from version_guard.config import Config
from version_guard.core.attributes import AttributeManager
from version_guard.core.cache_cleaner import CacheCleaner
from version_guard.core.cache_cleaner import calculate_cache_size as _calculate_cache_size
from version_guard.core.deletion import DeletionManager
from version_guard.core.protection import ProtectionOrchestrator
from version_guard.core.results import (
    OperationResult,
    ProtectionOptions,
    ProtectionParams,
    ProtectionStatus,
    SwitchResult,
)
from version_guard.core.scanner import VersionInfo
from version_guard.core.scanner import scan_versions as _scan_versions
from version_guard.core.sequence import ProtectionSequence
from version_guard.core.switcher import VersionSwitcher
from version_guard.errors import EnvironmentUnresolved
from version_guard.platform.detect import (
    EnvironmentProvider,
    InstallPaths,
    OsEnvironmentProvider,
)
from version_guard.platform.process import PreCheckResult, is_app_running
from version_guard.platform.process import perform_precheck as _perform_precheck


class GuardService:
    """Wires the engine components for one configuration and environment."""

    def __init__(
        self,
        config: Optional[Config] = None,
        provider: Optional[EnvironmentProvider] = None,
        attributes: Optional[AttributeManager] = None,
    ):
        self.config = config or Config()
        self.provider = provider or OsEnvironmentProvider(self.config.app.env_var)
        self.attributes = attributes or AttributeManager()

    def install_paths(self) -> InstallPaths:
        return InstallPaths.resolve(self.provider, self.config.app.name)

    def _optional_paths(self) -> Optional[InstallPaths]:
        try:
            return self.install_paths()
        except EnvironmentUnresolved:
            return None

    def orchestrator(self) -> ProtectionOrchestrator:
        app = self.config.app
        return ProtectionOrchestrator(
            provider=self.provider,
            app_name=app.name,
            sentinel_version=app.sentinel_version,
            attributes=self.attributes,
        )

    def delete_versions(self, paths: Sequence[str]) -> OperationResult:
        manager = DeletionManager(self.attributes, self._optional_paths())
        return manager.delete_versions(paths)

    def apply_protection(self, options: Optional[ProtectionOptions] = None) -> OperationResult:
        return self.orchestrator().apply(options)

    def remove_protection(self) -> OperationResult:
        return self.orchestrator().remove()

    def check_protection_status(self) -> ProtectionStatus:
        return self.orchestrator().status()

    def switch_version(self, target_path: str, strict: bool = True) -> SwitchResult:
        switcher = VersionSwitcher(
            provider=self.provider,
            app_name=self.config.app.name,
            executable=self.config.app.executable,
            attributes=self.attributes,
            strict=strict,
        )
        return switcher.switch_version(target_path)

    def scan_versions(self) -> list[VersionInfo]:
        paths = self._optional_paths()
        if paths is None:
            return []
        return _scan_versions(paths, self.config.app.executable)

    def calculate_cache_size(self) -> int:
        paths = self._optional_paths()
        if paths is None:
            return 0
        return _calculate_cache_size(paths, self.config.cache.directories)

    def clean_cache(self, use_trash: Optional[bool] = None) -> OperationResult:
        try:
            paths = self.install_paths()
        except EnvironmentUnresolved as e:
            return OperationResult.failed(e, [])

        if use_trash is None:
            use_trash = self.config.defaults.trash
        cleaner = CacheCleaner(use_trash=use_trash, attributes=self.attributes)
        return cleaner.clean(paths, self.config.cache.directories)

    def is_app_running(self) -> bool:
        return is_app_running(self.config.app.process_names)

    def perform_precheck(self) -> PreCheckResult:
        app = self.config.app
        return _perform_precheck(self.provider, app.name, app.process_names)

    def run_full_protection(
        self,
        params: Union[ProtectionParams, Mapping[str, Any]],
    ) -> OperationResult:
        if not isinstance(params, ProtectionParams):
            params = ProtectionParams.from_dict(dict(params))

        sequence = ProtectionSequence(
            deletion=DeletionManager(self.attributes, self._optional_paths()),
            orchestrator=self.orchestrator(),
            is_running=self.is_app_running,
            clean_cache=self.clean_cache,
        )
        return sequence.run(params)


def delete_versions(
    paths: Sequence[str], provider: Optional[EnvironmentProvider] = None
) -> dict[str, Any]:
    return GuardService(provider=provider).delete_versions(paths).to_dict()


def apply_protection(
    options: Optional[Mapping[str, Any]] = None,
    provider: Optional[EnvironmentProvider] = None,
) -> dict[str, Any]:
    opts = ProtectionOptions.from_dict(options) if options else ProtectionOptions()
    return GuardService(provider=provider).apply_protection(opts).to_dict()


def remove_protection(provider: Optional[EnvironmentProvider] = None) -> dict[str, Any]:
    return GuardService(provider=provider).remove_protection().to_dict()


def check_protection_status(provider: Optional[EnvironmentProvider] = None) -> dict[str, Any]:
    return GuardService(provider=provider).check_protection_status().to_dict()


def switch_version(
    target_path: str, provider: Optional[EnvironmentProvider] = None
) -> dict[str, Any]:
    return GuardService(provider=provider).switch_version(target_path).to_dict()


def run_full_protection(
    params: Mapping[str, Any], provider: Optional[EnvironmentProvider] = None
) -> dict[str, Any]:
    return GuardService(provider=provider).run_full_protection(params).to_dict()


def scan_versions(provider: Optional[EnvironmentProvider] = None) -> list[dict[str, Any]]:
    return [v.to_dict() for v in GuardService(provider=provider).scan_versions()]


def calculate_cache_size(provider: Optional[EnvironmentProvider] = None) -> int:
    return GuardService(provider=provider).calculate_cache_size()


def clean_cache(provider: Optional[EnvironmentProvider] = None) -> dict[str, Any]:
    return GuardService(provider=provider).clean_cache().to_dict()


def perform_precheck(provider: Optional[EnvironmentProvider] = None) -> dict[str, Any]:
    return GuardService(provider=provider).perform_precheck().to_dict()
