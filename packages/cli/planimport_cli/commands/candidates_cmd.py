"""Rank a resource type's schema attributes as identifier candidates."""

from __future__ import annotations

import json
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from planimport_cli.utils import handle_error

console = Console()


def candidates(
    ctx: typer.Context,
    resource_type: Annotated[str, typer.Argument(help="Resource type, e.g. google_storage_bucket")],
    schema: Annotated[str | None, typer.Option("--schema", help="Provider schema JSON file")] = None,
    module_root: Annotated[str | None, typer.Option("--module-root", help="Directory holding the cached schema")] = None,
    limit: Annotated[int, typer.Option("--limit", "-n", help="Show at most this many candidates")] = 10,
) -> None:
    """List the top-scoring identifier candidates for a resource type."""
    try:
        from planimport.schema import load_schema_store
        from planimport.scoring import select_strategy

        from planimport_cli.project import resolve_settings

        settings = resolve_settings(module_root=module_root, schema_path=schema)
        store = load_schema_store(settings.schema_path, working_dir=settings.module_root, binary=settings.binary)
        if store is None:
            raise ValueError("No provider schema available; pass --schema or run `planimport schema` first")

        strategy = select_strategy(resource_type)
        ranked = store.candidate_identifiers(resource_type, strategy)
        if not ranked:
            raise ValueError(f"Resource type {resource_type!r} is not in the provider schema")

        if ctx.obj and ctx.obj.get("json"):
            print(
                json.dumps(
                    {
                        "resource_type": resource_type,
                        "strategy": strategy.value,
                        "candidates": [{"attribute": c.attribute, "score": c.score} for c in ranked[:limit]],
                    },
                    indent=2,
                )
            )
            return

        table = Table(title=f"{resource_type} ({strategy.label})")
        table.add_column("#", justify="right")
        table.add_column("Attribute", style="cyan")
        table.add_column("Score", justify="right")
        table.add_column("Type")
        table.add_column("Flags")

        for i, c in enumerate(ranked[:limit], 1):
            meta = c.metadata
            flags = [f for f in ("required", "optional", "computed") if meta and getattr(meta, f)]
            table.add_row(str(i), c.attribute, f"{c.score:.1f}", meta.attribute_type if meta else "", ", ".join(flags))
        console.print(table)

    except typer.Exit:
        raise
    except Exception as e:
        handle_error(ctx, e)
