"""Tests for applying, removing and detecting protection."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from version_guard.core.attributes import AttributeManager
from version_guard.core.protection import ProtectionOrchestrator
from version_guard.core.results import ProtectionOptions, ProtectionStatus
from version_guard.errors import ErrorKind
from version_guard.platform.detect import FixedEnvironmentProvider, InstallPaths


@pytest.fixture
def orchestrator(provider, attributes: AttributeManager) -> ProtectionOrchestrator:
    return ProtectionOrchestrator(provider=provider, attributes=attributes)


def _snapshot(paths: InstallPaths) -> dict[str, object]:
    return {
        "config": paths.config_file.read_bytes(),
        "product_info": (paths.product_info.stat().st_size, paths.product_info.stat().st_mode),
        "update": (paths.update_blocker.stat().st_size, paths.update_blocker.stat().st_mode),
    }


class TestApply:
    """Tests for ProtectionOrchestrator.apply."""

    def test_full_protection(self, install: InstallPaths, orchestrator: ProtectionOrchestrator):
        result = orchestrator.apply(ProtectionOptions(lock_config=True, create_blockers=True))

        assert result.success is True
        assert result.logs == [
            "Modifying config...",
            "[OK] Configuration locked",
            "Creating blockers...",
            "[OK] Update blockers created",
        ]
        assert install.config_file.read_text() == "[Configure]\nlast_version=1.0.0.0\nchannel=stable"
        assert install.product_info.stat().st_size == 0
        assert install.update_blocker.exists()

    def test_idempotent(self, install: InstallPaths, orchestrator: ProtectionOrchestrator):
        orchestrator.apply()
        first = _snapshot(install)
        orchestrator.apply()

        assert _snapshot(install) == first

    def test_options_disabled(self, install: InstallPaths, orchestrator: ProtectionOrchestrator):
        before = install.config_file.read_text()

        result = orchestrator.apply(ProtectionOptions(lock_config=False, create_blockers=False))

        assert result.success is True
        assert result.logs == [
            "Skipping config lock (disabled)",
            "Skipping blocker creation (disabled)",
        ]
        assert install.config_file.read_text() == before
        assert not install.update_blocker.exists()

    def test_blocker_failure_keeps_config_lock(
        self, install: InstallPaths, orchestrator: ProtectionOrchestrator
    ):
        with patch.object(
            orchestrator.attributes.backend, "set_readonly", side_effect=OSError("denied")
        ):
            result = orchestrator.apply()

        assert result.success is False
        assert result.error_kind is ErrorKind.IO_ERROR
        assert result.logs == [
            "Modifying config...",
            "[OK] Configuration locked",
            "Creating blockers...",
        ]
        assert orchestrator.status().config_locked is True

    def test_non_utf8_config(self, install: InstallPaths, orchestrator: ProtectionOrchestrator):
        install.config_file.write_bytes(b"[Configure]\npath=\xb2\xe2\nlast_version=4.0.0.200")

        result = orchestrator.apply(ProtectionOptions(lock_config=True, create_blockers=False))

        assert result.success is True
        assert install.config_file.read_bytes() == (
            b"[Configure]\npath=\xb2\xe2\nlast_version=1.0.0.0"
        )
        assert orchestrator.status().config_locked is True

    def test_config_write_failure(self, install: InstallPaths, orchestrator: ProtectionOrchestrator):
        with patch.object(Path, "write_text", side_effect=PermissionError("access denied")):
            result = orchestrator.apply()

        assert result.success is False
        assert result.error_kind is ErrorKind.IO_ERROR
        assert result.logs == ["Modifying config..."]
        assert not install.update_blocker.exists()

    def test_unresolved_environment(self, install: InstallPaths, attributes: AttributeManager):
        orchestrator = ProtectionOrchestrator(
            provider=FixedEnvironmentProvider(None), attributes=attributes
        )
        before = install.config_file.read_text()

        result = orchestrator.apply()

        assert result.success is False
        assert result.error_kind is ErrorKind.ENVIRONMENT_UNRESOLVED
        assert result.logs == []
        assert install.config_file.read_text() == before


class TestRemove:
    """Tests for ProtectionOrchestrator.remove."""

    def test_round_trip(self, install: InstallPaths, orchestrator: ProtectionOrchestrator):
        orchestrator.apply()
        result = orchestrator.remove()

        assert result.success is True
        assert orchestrator.status() == ProtectionStatus(config_locked=False, blockers_exist=False)
        assert orchestrator.status().is_protected is False
        assert install.config_file.read_text() == "[Configure]\nchannel=stable"
        assert result.logs[-1] == "[OK] Protection removed - CapCut can now auto-update"

    def test_nothing_to_remove(self, local_app_data: Path, orchestrator: ProtectionOrchestrator):
        result = orchestrator.remove()

        assert result.success is True
        assert result.logs == ["[OK] Protection removed - CapCut can now auto-update"]

    def test_removal_failure_is_not_fatal(
        self, install: InstallPaths, orchestrator: ProtectionOrchestrator
    ):
        orchestrator.apply()

        with patch.object(Path, "unlink", side_effect=PermissionError("in use")):
            result = orchestrator.remove()

        assert result.success is True
        assert any(line.startswith("[!] Could not remove") for line in result.logs)
        assert "[OK] configure.ini reset" in result.logs

    def test_config_reset_failure_is_not_fatal(
        self, install: InstallPaths, orchestrator: ProtectionOrchestrator
    ):
        orchestrator.apply()

        with patch(
            "version_guard.core.protection.ConfigPatcher.remove_key",
            side_effect=PermissionError("access denied"),
        ):
            result = orchestrator.remove()

        assert result.success is True
        assert "[!] Could not reset configure.ini: access denied" in result.logs
        assert "[OK] configure.ini reset" not in result.logs
        assert result.logs[-1] == "[OK] Protection removed - CapCut can now auto-update"
        assert orchestrator.status().blockers_exist is False

    def test_non_utf8_config(self, install: InstallPaths, orchestrator: ProtectionOrchestrator):
        install.config_file.write_bytes(b"[Configure]\npath=\xb2\xe2\nlast_version=1.0.0.0")

        result = orchestrator.remove()

        assert result.success is True
        assert "[OK] configure.ini reset" in result.logs
        assert install.config_file.read_bytes() == b"[Configure]\npath=\xb2\xe2"

    def test_unresolved_environment(self, attributes: AttributeManager):
        orchestrator = ProtectionOrchestrator(
            provider=FixedEnvironmentProvider(None), attributes=attributes
        )

        result = orchestrator.remove()

        assert result.success is False
        assert result.error == "Failed to get LOCALAPPDATA"


class TestStatus:
    """Tests for ProtectionOrchestrator.status."""

    def test_unprotected_install(self, install: InstallPaths, orchestrator: ProtectionOrchestrator):
        assert orchestrator.status() == ProtectionStatus(False, False)

    def test_unresolved_environment(self, attributes: AttributeManager):
        orchestrator = ProtectionOrchestrator(
            provider=FixedEnvironmentProvider(None), attributes=attributes
        )
        assert orchestrator.status().to_dict() == {
            "is_protected": False,
            "config_locked": False,
            "blockers_exist": False,
        }

    def test_config_lock_only(self, install: InstallPaths, orchestrator: ProtectionOrchestrator):
        install.config_file.write_text("last_version=1.0.0.0")

        status = orchestrator.status()

        assert status.config_locked is True
        assert status.blockers_exist is False
        assert status.is_protected is True

    @pytest.mark.parametrize(
        ("content", "readonly", "expected"),
        [
            (b"", True, True),
            (b"", False, False),
            (b"<xml/>", True, False),
            (b"<xml/>", False, False),
        ],
    )
    def test_update_blocker_fixtures(
        self,
        install: InstallPaths,
        orchestrator: ProtectionOrchestrator,
        content: bytes,
        readonly: bool,
        expected: bool,
    ):
        install.product_info.unlink()
        install.update_blocker.parent.mkdir(parents=True)
        install.update_blocker.write_bytes(content)
        if readonly:
            orchestrator.attributes.set_readonly(install.update_blocker)

        status = orchestrator.status()

        assert status.blockers_exist is expected
        assert status.is_protected is expected
        assert status.config_locked is False

    def test_product_info_blocker_only(
        self, install: InstallPaths, orchestrator: ProtectionOrchestrator
    ):
        install.product_info.write_bytes(b"")
        orchestrator.attributes.set_readonly(install.product_info)

        assert orchestrator.status().blockers_exist is True

    def test_custom_sentinel(self, install: InstallPaths, provider, attributes: AttributeManager):
        orchestrator = ProtectionOrchestrator(
            provider=provider, sentinel_version="9.9.9.9", attributes=attributes
        )
        orchestrator.apply(ProtectionOptions(lock_config=True, create_blockers=False))

        assert "last_version=9.9.9.9" in install.config_file.read_text()
        assert orchestrator.status().config_locked is True
