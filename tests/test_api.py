"""Tests for the record-level command surface."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from version_guard import api
from version_guard.api import GuardService
from version_guard.core.results import ProtectionOptions, ProtectionParams
from version_guard.platform.detect import FixedEnvironmentProvider, InstallPaths


@pytest.fixture
def service(provider, attributes) -> GuardService:
    return GuardService(provider=provider, attributes=attributes)


class TestGuardService:
    """Tests for GuardService wiring."""

    def test_apply_then_remove(self, install: InstallPaths, service: GuardService):
        assert service.apply_protection(ProtectionOptions()).success is True
        assert service.check_protection_status().is_protected is True

        assert service.remove_protection().success is True
        assert service.check_protection_status().to_dict() == {
            "is_protected": False,
            "config_locked": False,
            "blockers_exist": False,
        }

    def test_run_full_protection_from_mapping(self, install: InstallPaths, service: GuardService):
        params = {
            "versions_to_delete": [str(install.apps / "3.1.0.100")],
            "clean_cache": False,
            "lock_config": True,
            "create_blockers": False,
            "unknown": "ignored",
        }

        with patch.object(GuardService, "is_app_running", return_value=False):
            result = service.run_full_protection(params)

        assert result.success is True
        assert not (install.apps / "3.1.0.100").exists()
        assert service.check_protection_status().config_locked is True
        assert service.check_protection_status().blockers_exist is False

    def test_run_full_protection_blocked_by_running_app(
        self, install: InstallPaths, service: GuardService
    ):
        with patch.object(GuardService, "is_app_running", return_value=True):
            record = service.run_full_protection({"versions_to_delete": []}).to_dict()

        assert record["success"] is False
        assert record["error_kind"] == "precondition_failed"
        assert record["logs"] == ["Checking system state..."]

    def test_scan_versions_unresolved(self, attributes):
        service = GuardService(provider=FixedEnvironmentProvider(None), attributes=attributes)
        assert service.scan_versions() == []
        assert service.calculate_cache_size() == 0

    def test_clean_cache_unresolved(self, attributes):
        service = GuardService(provider=FixedEnvironmentProvider(None), attributes=attributes)
        result = service.clean_cache()
        assert result.success is False
        assert result.error_kind.value == "environment_unresolved"


class TestModuleFunctions:
    """Tests for the plain-record module functions."""

    def test_delete_versions_empty(self, provider):
        record = api.delete_versions([], provider=provider)
        assert record == {
            "success": True,
            "error": None,
            "error_kind": None,
            "logs": ["[OK] No versions to delete"],
        }

    def test_switch_version_missing(self, install: InstallPaths, provider):
        record = api.switch_version("/nonexistent/9.9.9.9", provider=provider)
        assert record["success"] is False
        assert record["message"] == "Target version not found"
        assert record["error_kind"] == "target_not_found"

    def test_check_status_unresolved(self):
        record = api.check_protection_status(provider=FixedEnvironmentProvider(None))
        assert record == {"is_protected": False, "config_locked": False, "blockers_exist": False}

    def test_scan_versions_records(self, install: InstallPaths, provider):
        records = api.scan_versions(provider=provider)
        assert [r["name"] for r in records] == ["4.0.0.200", "3.1.0.100"]

    def test_apply_protection_ignores_unknown_keys(self, install: InstallPaths, provider):
        record = api.apply_protection(
            {"lock_config": True, "create_blockers": False, "extra": 1}, provider=provider
        )

        assert record["success"] is True
        assert record["logs"][-1] == "Skipping blocker creation (disabled)"
        status = api.check_protection_status(provider=provider)
        assert status["config_locked"] is True
        assert status["blockers_exist"] is False


class TestRecordsFromMapping:
    """Tests for building request records from plain mappings."""

    def test_options_ignore_unknown_keys(self):
        options = ProtectionOptions.from_dict({"create_blockers": False, "extra": 1})
        assert options == ProtectionOptions(lock_config=True, create_blockers=False)

    def test_params_ignore_unknown_keys(self):
        params = ProtectionParams.from_dict({"clean_cache": True, "extra": 1})
        assert params == ProtectionParams(clean_cache=True)
