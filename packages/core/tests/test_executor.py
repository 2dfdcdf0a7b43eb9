"""Tests for import command rendering and sequential execution."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

from planimport.executor import ImportCommand, ImportExecutor, ImportOutcome


def _completed(returncode: int = 0, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


def _command(working_dir: Path, address: str = "google_storage_bucket.assets", identifier: str = "my-bucket"):
    return ImportCommand(working_dir, address, identifier, "google_storage_bucket")


class TestImportCommand:
    def test_argv(self, tmp_path: Path):
        assert _command(tmp_path).argv == ["terragrunt", "import", "google_storage_bucket.assets", "my-bucket"]

    def test_render_quotes(self, tmp_path: Path):
        cmd = ImportCommand(tmp_path / "my dir", 'module.a["x"].aws_s3_bucket.b', "bucket", binary="terraform")
        rendered = cmd.render()
        assert rendered.startswith(f"cd '{tmp_path / 'my dir'}' && terraform import ")
        assert "'module.a[\"x\"].aws_s3_bucket.b'" in rendered


class TestExecute:
    def test_dry_run_never_runs(self, tmp_path: Path):
        runner = MagicMock()
        result = ImportExecutor(dry_run=True, runner=runner).execute(_command(tmp_path))
        assert result.outcome is ImportOutcome.DRY_RUN
        assert "terragrunt import" in result.command
        runner.assert_not_called()

    def test_success(self, tmp_path: Path):
        runner = MagicMock(return_value=_completed(0, stdout="Import successful!"))
        result = ImportExecutor(timeout=12, runner=runner).execute(_command(tmp_path))
        assert result.outcome is ImportOutcome.IMPORTED
        assert result.exit_code == 0
        runner.assert_called_once_with(
            "import",
            "google_storage_bucket.assets",
            "my-bucket",
            cwd=tmp_path,
            timeout=12,
            binary="terragrunt",
        )

    def test_already_managed(self, tmp_path: Path):
        stderr = "Error: Resource already managed by Terraform\n\nTerraform is already managing a remote object"
        runner = MagicMock(return_value=_completed(1, stderr=stderr))
        result = ImportExecutor(runner=runner).execute(_command(tmp_path))
        assert result.outcome is ImportOutcome.ALREADY_TRACKED

    def test_failure_captures_output(self, tmp_path: Path):
        runner = MagicMock(return_value=_completed(1, stderr="Error: Cannot import non-existent remote object"))
        result = ImportExecutor(runner=runner).execute(_command(tmp_path))
        assert result.outcome is ImportOutcome.FAILED
        assert result.exit_code == 1
        assert "non-existent" in result.error

    def test_failure_without_output(self, tmp_path: Path):
        runner = MagicMock(return_value=_completed(2))
        result = ImportExecutor(runner=runner).execute(_command(tmp_path))
        assert "no error output" in result.error

    def test_timeout(self, tmp_path: Path):
        runner = MagicMock(side_effect=subprocess.TimeoutExpired(["terragrunt"], 5))
        result = ImportExecutor(timeout=5, runner=runner).execute(_command(tmp_path))
        assert result.outcome is ImportOutcome.TIMED_OUT
        assert "5" in result.error

    def test_missing_binary(self, tmp_path: Path):
        runner = MagicMock(side_effect=FileNotFoundError("terragrunt"))
        result = ImportExecutor(runner=runner).execute(_command(tmp_path))
        assert result.outcome is ImportOutcome.FAILED
        assert "Failed to run terragrunt" in result.error

    def test_missing_working_dir(self, tmp_path: Path):
        runner = MagicMock()
        result = ImportExecutor(runner=runner).execute(_command(tmp_path / "ghost"))
        assert result.outcome is ImportOutcome.FAILED
        runner.assert_not_called()

    def test_default_runner_uses_subprocess(self, tmp_path: Path):
        with patch("planimport.terragrunt.subprocess.run", return_value=_completed(0)) as run:
            result = ImportExecutor(timeout=30).execute(_command(tmp_path))
        assert result.outcome is ImportOutcome.IMPORTED
        assert run.call_args.args[0] == ["terragrunt", "import", "google_storage_bucket.assets", "my-bucket"]
        assert run.call_args.kwargs["timeout"] == 30


class TestExecuteAll:
    def test_sequential_and_continues_after_timeout(self, tmp_path: Path):
        calls: list[str] = []
        active = {"n": 0}

        def runner(*args, **kwargs):
            active["n"] += 1
            assert active["n"] == 1
            calls.append(args[1])
            try:
                if args[1] == "b.b":
                    raise subprocess.TimeoutExpired(["terragrunt"], 1)
                return _completed(0)
            finally:
                active["n"] -= 1

        commands = [_command(tmp_path, address=a) for a in ("a.a", "b.b", "c.c")]
        results = ImportExecutor(runner=runner).execute_all(commands)
        assert calls == ["a.a", "b.b", "c.c"]
        assert [r.outcome for r in results] == [ImportOutcome.IMPORTED, ImportOutcome.TIMED_OUT, ImportOutcome.IMPORTED]
