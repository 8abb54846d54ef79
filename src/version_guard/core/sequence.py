"""The full protection workflow: precheck, delete, clean, protect."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

from version_guard.core.deletion import DeletionManager
from version_guard.core.protection import ProtectionOrchestrator
from version_guard.core.results import OperationResult, ProtectionParams
from version_guard.errors import ErrorKind, PreconditionFailed

logger = logging.getLogger(__name__)


def _deleted_before_failure(result: OperationResult) -> bool:
    """Deletion stops at the first failure, so every earlier attempt succeeded."""
    return sum(line.startswith("Deleting: ") for line in result.logs) > 1


@dataclass
class Stage:
    """One step of the pipeline."""

    name: str
    run: Callable[[], OperationResult]
    mutating: bool = True
    # Whether a failed run had already changed something on disk
    progressed: Optional[Callable[[OperationResult], bool]] = None


class ProtectionSequence:
    """
    Runs the protection stages in a fixed order.

    Logs from every stage are concatenated into one list. The first failing
    stage ends the run and earlier stages are not undone. A failure after a
    mutating stage has completed, or after the failing stage itself changed
    something on disk, is reported as a partial failure.
    """

    def __init__(
        self,
        deletion: DeletionManager,
        orchestrator: ProtectionOrchestrator,
        is_running: Callable[[], bool],
        clean_cache: Optional[Callable[[], OperationResult]] = None,
        app_name: Optional[str] = None,
    ):
        self.deletion = deletion
        self.orchestrator = orchestrator
        self.is_running = is_running
        self.clean_cache = clean_cache
        self.app_name = app_name or orchestrator.app_name

    def stages(self, params: ProtectionParams) -> list[Stage]:
        return [
            Stage("precheck", self._precheck, mutating=False),
            Stage(
                "delete",
                lambda: self.deletion.delete_versions(params.versions_to_delete),
                mutating=bool(params.versions_to_delete),
                progressed=_deleted_before_failure,
            ),
            Stage("cache", lambda: self._clean(params.clean_cache), mutating=params.clean_cache),
            Stage("protect", lambda: self._protect(params)),
        ]

    def run(self, params: ProtectionParams) -> OperationResult:
        logs: list[str] = []
        mutated = False

        for stage in self.stages(params):
            result = stage.run()
            logs.extend(result.logs)

            if not result.success:
                logger.warning("Protection sequence stopped at %s: %s", stage.name, result.error)
                if stage.progressed is not None and stage.progressed(result):
                    mutated = True
                kind = ErrorKind.PARTIAL_FAILURE if mutated else result.error_kind
                return OperationResult(
                    success=False,
                    error=result.error,
                    error_kind=kind,
                    logs=logs,
                )
            mutated = mutated or stage.mutating

        return OperationResult.ok(logs)

    def _precheck(self) -> OperationResult:
        logs = ["Checking system state..."]
        if self.is_running():
            error = PreconditionFailed(f"{self.app_name} is still running. Please close it.")
            return OperationResult.failed(error, logs)
        logs.append("[OK] No running instances")
        return OperationResult.ok(logs)

    def _clean(self, enabled: bool) -> OperationResult:
        if not enabled:
            return OperationResult.ok(["Skipping cache cleaning (disabled)"])

        logs = ["Cleaning cache directories..."]
        if self.clean_cache is not None:
            logs.extend(self.clean_cache().logs)
        return OperationResult.ok(logs)

    def _protect(self, params: ProtectionParams) -> OperationResult:
        options = params.options
        if not options.any_enabled:
            return OperationResult.ok(["Skipping protection (all options disabled)"])
        return self.orchestrator.apply(options)
