"""Infer identifiers for a plan and import the untracked resources."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from planimport_cli.utils import build_engine, handle_error

console = Console()

_STATUS_STYLE = {
    "imported": "green",
    "would_import": "cyan",
    "already_tracked": "dim",
    "failed": "red",
}


def run(
    ctx: typer.Context,
    plan_file: Annotated[str, typer.Argument(help="Path to `terraform show -json` plan output")],
    modules_file: Annotated[
        str | None,
        typer.Option("--modules", "-m", help="Path to modules.json (default: <module-root>/.terraform/modules/modules.json)"),
    ] = None,
    module_root: Annotated[str | None, typer.Option("--module-root", help="Directory module paths are relative to")] = None,
    schema: Annotated[str | None, typer.Option("--schema", help="Provider schema JSON file")] = None,
    generate_schema: Annotated[
        bool, typer.Option("--generate-schema", help="Dump the provider schema if no cached copy exists")
    ] = False,
    project: Annotated[str | None, typer.Option("--project", help="GCP project for path-style identifiers")] = None,
    location: Annotated[str | None, typer.Option("--location", help="GCP location for path-style identifiers")] = None,
    timeout: Annotated[float | None, typer.Option("--timeout", help="Per-import timeout in seconds")] = None,
    binary: Annotated[str | None, typer.Option("--binary", help="terragrunt or terraform executable")] = None,
    workers: Annotated[int | None, typer.Option("--workers", help="Parallel inference workers")] = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Print import commands without running them")] = False,
) -> None:
    """Import every not-yet-tracked resource in a plan."""
    try:
        from planimport.executor import ImportExecutor
        from planimport.importer import run_imports
        from planimport.plan import load_modules, load_plan

        from planimport_cli.project import resolve_settings

        settings = resolve_settings(
            module_root=module_root,
            schema_path=schema,
            project=project,
            location=location,
            timeout=timeout,
            binary=binary,
            workers=workers,
        )
        plan = load_plan(plan_file)

        modules = []
        modules_path = Path(modules_file) if modules_file else default_modules_path(settings.module_root)
        if modules_file or modules_path.is_file():
            modules = load_modules(modules_path)

        engine = build_engine(settings, plan, generate_schema=generate_schema)
        executor = ImportExecutor(timeout=settings.timeout, dry_run=dry_run)
        report = run_imports(
            plan,
            modules,
            settings.module_root,
            engine,
            executor,
            binary=settings.binary,
            max_workers=settings.workers,
        )

        verbose = bool(ctx.obj and ctx.obj.get("verbose"))
        if ctx.obj and ctx.obj.get("json"):
            print(json.dumps(report.to_dict(verbose=verbose), indent=2))
        else:
            _render(report, verbose)

        if not report.ok:
            raise typer.Exit(1)

    except typer.Exit:
        raise
    except Exception as e:
        handle_error(ctx, e)


def default_modules_path(module_root: str) -> Path:
    return Path(module_root) / ".terraform" / "modules" / "modules.json"


def _render(report, verbose: bool) -> None:
    table = Table(title="Dry Run" if report.dry_run else "Import Results")
    table.add_column("Address", style="cyan")
    table.add_column("Status")
    table.add_column("Identifier")
    table.add_column("Details")

    for entry in report.entries:
        style = _STATUS_STYLE.get(entry.status.value, "yellow")
        details = (entry.command if report.dry_run and entry.command else entry.reason) or ""
        table.add_row(
            entry.address,
            f"[{style}]{entry.status.value}[/{style}]",
            entry.identifier or "",
            details if verbose else details[:120],
        )
    console.print(table)

    s = report.summary()
    label = "Would import" if report.dry_run else "Imported"
    border = "green" if report.ok else "red"
    console.print(
        Panel(
            f"{label}: [bold]{s['imported']}[/bold]  Already tracked: {s['already_tracked']}  "
            f"Skipped: {s['skipped']} ({s['skipped_no_identifier']} without identifier)  "
            f"Failed: [bold]{s['failed']}[/bold]",
            title=f"{s['total']} resources",
            border_style=border,
        )
    )
