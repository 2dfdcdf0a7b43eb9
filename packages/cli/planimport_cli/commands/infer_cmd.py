"""Show the identifier chosen for each planned resource, without importing."""

from __future__ import annotations

import json
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from planimport_cli.utils import build_engine, handle_error

console = Console()


def infer(
    ctx: typer.Context,
    plan_file: Annotated[str, typer.Argument(help="Path to `terraform show -json` plan output")],
    schema: Annotated[str | None, typer.Option("--schema", help="Provider schema JSON file")] = None,
    module_root: Annotated[str | None, typer.Option("--module-root", help="Directory holding the cached schema")] = None,
    project: Annotated[str | None, typer.Option("--project", help="GCP project for path-style identifiers")] = None,
    location: Annotated[str | None, typer.Option("--location", help="GCP location for path-style identifiers")] = None,
    include_tracked: Annotated[
        bool, typer.Option("--all", help="Also infer for resources already in state")
    ] = False,
) -> None:
    """Explain which attribute would identify each resource."""
    try:
        from planimport.inference import InferenceFailure
        from planimport.plan import load_plan

        from planimport_cli.project import resolve_settings

        settings = resolve_settings(module_root=module_root, schema_path=schema, project=project, location=location)
        plan = load_plan(plan_file)
        engine = build_engine(settings, plan)

        resources = [r for r in plan.resources() if include_tracked or r.is_creatable]
        results = engine.infer_all(resources, max_workers=settings.workers)

        if ctx.obj and ctx.obj.get("json"):
            out = [
                {"address": r.address, "resource_type": r.resource_type, "error": r.error}
                if isinstance(r, InferenceFailure)
                else r.to_dict()
                for r in results
            ]
            print(json.dumps(out, indent=2))
            return

        table = Table(title=f"Identifier Inference ({'schema' if engine.schema_store else 'heuristic only'})")
        table.add_column("Address", style="cyan")
        table.add_column("Strategy")
        table.add_column("Attribute")
        table.add_column("Score", justify="right")
        table.add_column("Identifier")
        table.add_column("Rejected")

        for r in results:
            if isinstance(r, InferenceFailure):
                table.add_row(r.address, "", "", "", f"[red]error: {r.error}[/red]", "")
                continue
            identifier = r.identifier if r.found else f"[yellow]not found ({r.status.value})[/yellow]"
            table.add_row(
                r.address,
                r.strategy.label,
                r.attribute or "",
                f"{r.score:.1f}" if r.score is not None else "",
                identifier,
                ", ".join(f"{a}: {why}" for a, why in r.rejected[:3]),
            )
        console.print(table)

    except typer.Exit:
        raise
    except Exception as e:
        handle_error(ctx, e)
