"""Generate and inspect the cached provider schema."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from planimport_cli.utils import handle_error

console = Console()


def schema(
    ctx: typer.Context,
    working_dir: Annotated[str | None, typer.Argument(help="Terragrunt unit to dump the schema from")] = None,
    refresh: Annotated[bool, typer.Option("--refresh", help="Regenerate even if a cached schema exists")] = False,
    init_first: Annotated[bool, typer.Option("--init", help="Run init before dumping the schema")] = False,
    list_types: Annotated[bool, typer.Option("--list-types", help="List resource types in the schema")] = False,
    binary: Annotated[str | None, typer.Option("--binary", help="terragrunt or terraform executable")] = None,
) -> None:
    """Cache `providers schema -json` output for later runs."""
    try:
        from planimport import terragrunt
        from planimport.schema import SCHEMA_CACHE_FILE, SchemaStore, generate_schema

        from planimport_cli.project import resolve_settings

        settings = resolve_settings(module_root=working_dir, binary=binary)
        root = Path(settings.module_root)
        cached = Path(settings.schema_path) if settings.schema_path else root / SCHEMA_CACHE_FILE

        if refresh or not cached.is_file():
            if init_first:
                terragrunt.init(root, binary=settings.binary)
            cached = generate_schema(root, binary=settings.binary)
            if not (ctx.obj and ctx.obj.get("json")):
                console.print(f"[green]Wrote[/green] {cached}")

        store = SchemaStore.load(cached)
        types = store.resource_types()

        if ctx.obj and ctx.obj.get("json"):
            out: dict = {"path": str(cached), "providers": store.providers, "resource_type_count": len(types)}
            if list_types:
                out["resource_types"] = types
            print(json.dumps(out, indent=2))
            return

        console.print(f"[bold]{cached}[/bold]: {len(store.providers)} providers, {len(types)} resource types")
        if list_types:
            for t in types:
                console.print(f"  {t}")

    except typer.Exit:
        raise
    except Exception as e:
        handle_error(ctx, e)
