"""Tests for platform detection and path resolution."""

from __future__ import annotations

import platform
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from version_guard.errors import EnvironmentUnresolved
from version_guard.platform.detect import (
    FixedEnvironmentProvider,
    InstallPaths,
    OsEnvironmentProvider,
    PlatformInfo,
    get_platform_info,
)
from version_guard.platform.process import is_app_running, perform_precheck


class TestGetPlatformInfo:
    """Tests for get_platform_info function."""

    def test_returns_platform_info(self):
        info = get_platform_info()
        assert isinstance(info, PlatformInfo)

    def test_has_required_fields(self):
        info = get_platform_info()
        assert info.variant is not None
        assert isinstance(info.home_dir, Path)

    def test_correct_platform_name(self):
        info = get_platform_info()
        system = platform.system()

        if system == "Windows":
            assert info.name == "Windows"
        elif system == "Darwin":
            assert info.name == "macOS"
        elif system == "Linux":
            assert info.name == "Linux"


class TestInstallPaths:
    """Tests for InstallPaths.resolve."""

    def test_layout(self, temp_dir: Path):
        paths = InstallPaths.resolve(FixedEnvironmentProvider(temp_dir))

        assert paths.root == temp_dir / "CapCut"
        assert paths.apps == temp_dir / "CapCut" / "Apps"
        assert paths.config_file == paths.apps / "configure.ini"
        assert paths.product_info == paths.apps / "ProductInfo.xml"
        assert paths.update_blocker == paths.root / "User Data" / "Download" / "update.exe"

    def test_custom_app_name(self, temp_dir: Path):
        paths = InstallPaths.resolve(FixedEnvironmentProvider(temp_dir), "OtherApp")
        assert paths.root == temp_dir / "OtherApp"

    def test_unresolved(self):
        with pytest.raises(EnvironmentUnresolved):
            InstallPaths.resolve(FixedEnvironmentProvider(None))

    def test_reads_environment(self, temp_dir: Path, monkeypatch):
        monkeypatch.setenv("LOCALAPPDATA", str(temp_dir))
        assert InstallPaths.resolve(OsEnvironmentProvider()).root == temp_dir / "CapCut"

    def test_missing_environment_variable(self, monkeypatch):
        monkeypatch.delenv("VG_TEST_ROOT", raising=False)
        with pytest.raises(EnvironmentUnresolved, match="VG_TEST_ROOT"):
            InstallPaths.resolve(OsEnvironmentProvider("VG_TEST_ROOT"))


def _proc(name: str) -> MagicMock:
    proc = MagicMock()
    proc.info = {"name": name}
    return proc


class TestIsAppRunning:
    """Tests for is_app_running function."""

    def test_match_is_case_insensitive(self):
        with patch("version_guard.platform.process.psutil.process_iter") as process_iter:
            process_iter.return_value = [_proc("explorer.exe"), _proc("capcut.exe")]
            assert is_app_running(["CapCut", "CapCut.exe"]) is True

    def test_no_match(self):
        with patch("version_guard.platform.process.psutil.process_iter") as process_iter:
            process_iter.return_value = [_proc("explorer.exe"), _proc(None)]
            assert is_app_running(["CapCut"]) is False


class TestPerformPrecheck:
    """Tests for perform_precheck function."""

    def test_installed_and_idle(self, install: InstallPaths, provider):
        with patch("version_guard.platform.process.is_app_running", return_value=False):
            result = perform_precheck(provider)

        assert result.app_found is True
        assert result.app_running is False
        assert result.apps_path == str(install.apps)

    def test_unresolved(self):
        with patch("version_guard.platform.process.is_app_running", return_value=True):
            result = perform_precheck(FixedEnvironmentProvider(None))

        assert result.to_dict() == {"app_found": False, "app_running": True, "apps_path": None}
