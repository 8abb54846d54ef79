"""Core protection and version-switching functionality."""

from __future__ import annotations

from .attributes import AttributeManager
from .blockers import BlockerFileManager
from .config_file import ConfigPatcher
from .deletion import DeletionManager
from .protection import ProtectionOrchestrator
from .sequence import ProtectionSequence
from .switcher import VersionSwitcher

__all__ = [
    "AttributeManager",
    "BlockerFileManager",
    "ConfigPatcher",
    "DeletionManager",
    "ProtectionOrchestrator",
    "ProtectionSequence",
    "VersionSwitcher",
]
