"""Thin wrapper around the terragrunt/terraform binaries."""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any

from planimport.errors import TerragruntError

logger = logging.getLogger(__name__)

DEFAULT_BINARY = "terragrunt"


def run_terragrunt(
    *args: str,
    cwd: str | Path,
    timeout: float | None = None,
    binary: str = DEFAULT_BINARY,
) -> subprocess.CompletedProcess[str]:
    """Run `binary *args` in `cwd` with captured text output.

    Does not check the exit code; callers decide what failure means.
    Raises FileNotFoundError when the binary is missing and
    subprocess.TimeoutExpired when `timeout` elapses.
    """
    argv = [binary, *args]
    logger.debug("Running %s in %s", " ".join(argv), cwd)
    return subprocess.run(argv, cwd=str(cwd), capture_output=True, text=True, timeout=timeout)


def provider_schema_json(cwd: str | Path, binary: str = DEFAULT_BINARY, timeout: float | None = 300) -> dict[str, Any]:
    """Dump the provider schemas for the unit in `cwd` as parsed JSON."""
    args = ["providers", "schema", "-json"]
    result = run_terragrunt(*args, cwd=cwd, timeout=timeout, binary=binary)
    if result.returncode != 0:
        raise TerragruntError([binary, *args], result.returncode, result.stderr, result.stdout)
    try:
        return json.loads(result.stdout)
    except json.JSONDecodeError as exc:
        raise TerragruntError([binary, *args], result.returncode, f"invalid JSON output: {exc}") from exc


def init(cwd: str | Path, binary: str = DEFAULT_BINARY, timeout: float | None = 600) -> None:
    """Run `init` so the providers needed for a schema dump are installed."""
    args = ["init", "-input=false", "-no-color"]
    result = run_terragrunt(*args, cwd=cwd, timeout=timeout, binary=binary)
    if result.returncode != 0:
        raise TerragruntError([binary, *args], result.returncode, result.stderr, result.stdout)
