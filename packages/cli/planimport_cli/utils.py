from __future__ import annotations

import json
import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

_err_console = Console(stderr=True)


def configure_logging(verbose: bool) -> None:
    """Route library logging to stderr; DEBUG shows per-resource reasoning."""
    root = logging.getLogger("planimport")
    root.handlers[:] = [RichHandler(console=_err_console, show_path=False, show_time=False)]
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)


def handle_error(ctx: typer.Context, e: Exception) -> None:
    """Print a clean error message and exit 1."""
    from planimport.errors import ConfigError, PlanParseError, SchemaError, TerragruntError

    verbose = ctx.obj.get("verbose", False) if ctx.obj else False
    json_mode = ctx.obj.get("json", False) if ctx.obj else False

    if isinstance(e, PlanParseError):
        msg = f"Invalid plan: {e}"
    elif isinstance(e, SchemaError):
        msg = f"Invalid schema: {e}"
    elif isinstance(e, ConfigError):
        msg = f"Invalid config: {e}"
    elif isinstance(e, TerragruntError):
        msg = str(e)
    elif isinstance(e, FileNotFoundError):
        msg = f"File not found: {e}"
    elif isinstance(e, ValueError):
        msg = str(e)
    else:
        msg = f"Error: {e}"

    if json_mode:
        print(json.dumps({"error": msg}))
    else:
        _err_console.print(f"[red]Error:[/red] {msg}")

    if verbose:
        _err_console.print_exception()

    raise typer.Exit(1)


def build_engine(settings, plan=None, generate_schema: bool = False):
    """Load the schema once and wire it into an InferenceEngine."""
    from planimport.inference import InferenceEngine
    from planimport.schema import load_schema_store

    store = load_schema_store(
        settings.schema_path,
        working_dir=settings.module_root,
        generate=generate_schema,
        binary=settings.binary,
    )
    return InferenceEngine(store, settings.gcp_context(plan))
