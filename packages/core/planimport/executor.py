"""Import command building and strictly sequential execution.

Terraform state does not tolerate concurrent writers, so commands run one at
a time. A timeout or failure on one resource never stops the batch.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from planimport.terragrunt import DEFAULT_BINARY, run_terragrunt

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 300.0

_ALREADY_MANAGED_MARKERS = ("Resource already managed by Terraform", "already managed by Terraform")

Runner = Callable[..., subprocess.CompletedProcess]


@dataclass(frozen=True)
class ImportCommand:
    working_dir: Path
    address: str
    identifier: str
    resource_type: str = ""
    binary: str = DEFAULT_BINARY

    @property
    def argv(self) -> list[str]:
        return [self.binary, "import", self.address, self.identifier]

    def render(self) -> str:
        return f"cd {shlex.quote(str(self.working_dir))} && {shlex.join(self.argv)}"


class ImportOutcome(str, Enum):
    IMPORTED = "imported"
    ALREADY_TRACKED = "already_tracked"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    DRY_RUN = "dry_run"


@dataclass
class ImportResult:
    address: str
    outcome: ImportOutcome
    command: str
    duration_s: float = 0.0
    exit_code: int | None = None
    error: str = ""


class ImportExecutor:
    def __init__(
        self,
        timeout: float | None = DEFAULT_TIMEOUT,
        dry_run: bool = False,
        runner: Runner | None = None,
    ) -> None:
        self.timeout = timeout
        self.dry_run = dry_run
        self._runner = runner or run_terragrunt

    def execute(self, command: ImportCommand) -> ImportResult:
        rendered = command.render()
        if self.dry_run:
            return ImportResult(command.address, ImportOutcome.DRY_RUN, rendered)

        if not command.working_dir.is_dir():
            return ImportResult(
                command.address,
                ImportOutcome.FAILED,
                rendered,
                error=f"Working directory does not exist: {command.working_dir}",
            )

        start = time.monotonic()
        try:
            proc = self._runner(
                "import",
                command.address,
                command.identifier,
                cwd=command.working_dir,
                timeout=self.timeout,
                binary=command.binary,
            )
        except subprocess.TimeoutExpired:
            logger.warning("Import of %s timed out after %ss", command.address, self.timeout)
            return ImportResult(
                command.address,
                ImportOutcome.TIMED_OUT,
                rendered,
                duration_s=time.monotonic() - start,
                error=f"timed out after {self.timeout}s",
            )
        except OSError as exc:
            return ImportResult(command.address, ImportOutcome.FAILED, rendered, error=f"Failed to run {command.binary}: {exc}")

        duration = time.monotonic() - start
        if proc.returncode == 0:
            return ImportResult(command.address, ImportOutcome.IMPORTED, rendered, duration, proc.returncode)

        output = (proc.stderr or "").strip() or (proc.stdout or "").strip() or "no error output captured"
        if any(marker in output for marker in _ALREADY_MANAGED_MARKERS):
            return ImportResult(command.address, ImportOutcome.ALREADY_TRACKED, rendered, duration, proc.returncode)
        return ImportResult(
            command.address,
            ImportOutcome.FAILED,
            rendered,
            duration,
            proc.returncode,
            error=f"exit code {proc.returncode}: {output}",
        )

    def execute_all(self, commands: list[ImportCommand]) -> list[ImportResult]:
        results = []
        for command in commands:
            result = self.execute(command)
            logger.info("%s: %s", command.address, result.outcome.value)
            results.append(result)
        return results
