"""Import pipeline: plan in, ImportReport out.

Identifiers for every resource are computed first (in parallel), then the
import commands run strictly one at a time in address order.
"""

from __future__ import annotations

import logging
from pathlib import Path

from planimport.executor import ImportCommand, ImportExecutor, ImportOutcome
from planimport.inference import InferenceEngine, InferenceFailure
from planimport.plan import ModuleMeta, PlanDocument, resolve_module_dir
from planimport.reporting import ImportReport, ResourceEntry, ResourceStatus
from planimport.terragrunt import DEFAULT_BINARY

logger = logging.getLogger(__name__)

_OUTCOME_STATUS = {
    ImportOutcome.IMPORTED: ResourceStatus.IMPORTED,
    ImportOutcome.DRY_RUN: ResourceStatus.WOULD_IMPORT,
    ImportOutcome.ALREADY_TRACKED: ResourceStatus.ALREADY_TRACKED,
    ImportOutcome.TIMED_OUT: ResourceStatus.SKIPPED_TIMEOUT,
    ImportOutcome.FAILED: ResourceStatus.FAILED,
}


def run_imports(
    plan: PlanDocument,
    modules: list[ModuleMeta],
    module_root: str | Path,
    engine: InferenceEngine,
    executor: ImportExecutor,
    binary: str = DEFAULT_BINARY,
    max_workers: int = 4,
) -> ImportReport:
    report = ImportReport(dry_run=executor.dry_run)

    candidates = []
    for resource in plan.resources():
        if resource.is_tracked:
            report.add(
                ResourceEntry(
                    resource.address,
                    resource.resource_type,
                    ResourceStatus.ALREADY_TRACKED,
                    reason=f"plan actions: {', '.join(resource.actions)}",
                )
            )
        else:
            candidates.append(resource)

    inferred = engine.infer_all(candidates, max_workers=max_workers)

    commands: list[tuple[ImportCommand, ResourceEntry]] = []
    for resource, result in zip(candidates, inferred):
        if isinstance(result, InferenceFailure):
            report.add(ResourceEntry(resource.address, resource.resource_type, ResourceStatus.FAILED, reason=result.error))
            continue

        if not result.found:
            tried = ", ".join(a for a, _ in result.rejected) or "none"
            report.add(
                ResourceEntry(
                    resource.address,
                    resource.resource_type,
                    ResourceStatus.SKIPPED_NO_IDENTIFIER,
                    reason=f"no identifier ({result.status.value}; tried: {tried})",
                    inference=result,
                )
            )
            continue

        working_dir = resolve_module_dir(resource, modules, module_root)
        if working_dir is None:
            report.add(
                ResourceEntry(
                    resource.address,
                    resource.resource_type,
                    ResourceStatus.SKIPPED_NO_MODULE,
                    identifier=result.identifier,
                    reason="no matching module mapping found",
                    inference=result,
                )
            )
            continue

        command = ImportCommand(working_dir, resource.address, result.identifier or "", resource.resource_type, binary)
        entry = ResourceEntry(
            resource.address,
            resource.resource_type,
            ResourceStatus.WOULD_IMPORT,
            identifier=result.identifier,
            command=command.render(),
            inference=result,
        )
        commands.append((command, entry))

    outcomes = executor.execute_all([command for command, _ in commands])
    for (_, entry), outcome in zip(commands, outcomes):
        entry.status = _OUTCOME_STATUS[outcome.outcome]
        entry.reason = outcome.error
        report.add(entry)

    report.entries.sort(key=lambda e: e.address)
    return report
