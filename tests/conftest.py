"""Pytest configuration and fixtures."""

from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from version_guard.core.attributes import AttributeManager
from version_guard.platform.attributes import PosixReadOnlyBackend
from version_guard.platform.detect import FixedEnvironmentProvider, InstallPaths


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def local_app_data(temp_dir: Path) -> Path:
    lad = temp_dir / "LocalAppData"
    lad.mkdir()
    return lad


@pytest.fixture
def provider(local_app_data: Path) -> FixedEnvironmentProvider:
    return FixedEnvironmentProvider(local_app_data)


@pytest.fixture
def attributes() -> AttributeManager:
    """Attribute manager using permission bits, independent of the host OS."""
    return AttributeManager(PosixReadOnlyBackend())


@pytest.fixture
def install(local_app_data: Path) -> InstallPaths:
    """Create a mock installation with two versions and a config file."""
    paths = InstallPaths(root=local_app_data / "CapCut", apps=local_app_data / "CapCut" / "Apps")
    paths.apps.mkdir(parents=True)

    for version in ("3.1.0.100", "4.0.0.200"):
        version_dir = paths.apps / version
        (version_dir / "Resources").mkdir(parents=True)
        (version_dir / "CapCut.exe").write_bytes(b"MZ" + b"\x00" * 98)
        (version_dir / "Resources" / "data.bin").write_bytes(b"x" * 400)

    paths.config_file.write_text("[Configure]\nlast_version=4.0.0.200\nchannel=stable")
    paths.product_info.write_text("<ProductInfo><Version>4.0.0.200</Version></ProductInfo>")

    yield paths
