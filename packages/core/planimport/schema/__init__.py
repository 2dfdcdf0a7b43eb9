"""Provider schema loading.

The schema is optional: every failure here degrades to heuristic-only
inference instead of stopping the run.
"""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path

from planimport.errors import PlanImportError
from planimport.schema.store import SchemaStore
from planimport.terragrunt import DEFAULT_BINARY, provider_schema_json

logger = logging.getLogger(__name__)

SCHEMA_CACHE_FILE = ".terragrunt-provider-schema.json"


def generate_schema(working_dir: str | Path, binary: str = DEFAULT_BINARY) -> Path:
    """Dump provider schemas for `working_dir` and write the cache file.

    A dump without a `provider_schemas` mapping raises SchemaInvalidFormatError
    and leaves any existing cache untouched.
    """
    document = provider_schema_json(working_dir, binary=binary)
    SchemaStore(document, source=f"{binary} providers schema -json")
    path = Path(working_dir) / SCHEMA_CACHE_FILE
    path.write_text(json.dumps(document))
    logger.info("Wrote provider schema to %s", path)
    return path


def load_schema_store(
    path: str | Path | None = None,
    working_dir: str | Path = ".",
    generate: bool = False,
    binary: str = DEFAULT_BINARY,
) -> SchemaStore | None:
    """Resolve and load the schema once per run, or return None.

    Resolution order: explicit `path`, the cached schema file in
    `working_dir`, then (if `generate`) a fresh dump via the binary.
    """
    try:
        if path is not None:
            return SchemaStore.load(path)

        cached = Path(working_dir) / SCHEMA_CACHE_FILE
        if cached.is_file():
            return SchemaStore.load(cached)

        if generate:
            return SchemaStore.load(generate_schema(working_dir, binary=binary))
    except (PlanImportError, OSError, subprocess.SubprocessError) as exc:
        logger.warning("Provider schema unavailable, using heuristic inference only: %s", exc)
        return None

    logger.info("No provider schema found in %s, using heuristic inference only", working_dir)
    return None


__all__ = ["SCHEMA_CACHE_FILE", "SchemaStore", "generate_schema", "load_schema_store"]
