"""Project directory support: finds and loads .planimport/ configuration."""

from __future__ import annotations

from pathlib import Path

from planimport.config import ImportSettings

CONFIG_DIR = ".planimport"


def find_project_root(start: Path | None = None) -> Path | None:
    """Walk up from start (default: cwd) looking for .planimport/ directory."""
    current = (start or Path.cwd()).resolve()
    for parent in [current, *current.parents]:
        if (parent / CONFIG_DIR).is_dir():
            return parent
    return None


def load_project_settings(start: Path | None = None) -> ImportSettings:
    """Load .planimport/config.yaml from the nearest project, or defaults.

    A relative `module_root` or `schema` in the config resolves against the
    project root, not the current directory.
    """
    root = find_project_root(start)
    if root is None:
        return ImportSettings()
    config_path = root / CONFIG_DIR / "config.yaml"
    if not config_path.exists():
        return ImportSettings()

    settings = ImportSettings.from_file(config_path)
    update: dict = {"module_root": str(root / settings.module_root)}
    if settings.schema_path:
        update["schema_path"] = str(root / settings.schema_path)
    return settings.model_copy(update=update)


def resolve_settings(**overrides) -> ImportSettings:
    """Project settings with CLI options (non-None) taking precedence."""
    return load_project_settings().merged(**overrides)
