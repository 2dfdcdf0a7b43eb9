"""Run settings: values from `.planimport/config.yaml` merged with CLI options."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from planimport.errors import ConfigError
from planimport.executor import DEFAULT_TIMEOUT
from planimport.inference import GcpContext
from planimport.plan import PlanDocument
from planimport.terragrunt import DEFAULT_BINARY


class ImportSettings(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    project: str | None = None
    location: str | None = None
    module_root: str = "."
    schema_path: str | None = Field(default=None, alias="schema")
    binary: str = DEFAULT_BINARY
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    workers: int = Field(default=4, ge=1)

    @classmethod
    def from_yaml(cls, text: str) -> ImportSettings:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in config: {exc}") from exc
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Any) -> ImportSettings:
        if not isinstance(data, dict):
            raise ConfigError("Config must be a mapping")
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc

    @classmethod
    def from_file(cls, path: str | Path) -> ImportSettings:
        return cls.from_yaml(Path(path).read_text())

    def merged(self, **overrides: Any) -> ImportSettings:
        """Copy with every non-None override applied."""
        update = {k: v for k, v in overrides.items() if v is not None}
        return self.model_copy(update=update)

    def gcp_context(self, plan: PlanDocument | None = None) -> GcpContext:
        """Configured project/location, falling back to the plan's variables."""
        project, location = self.project, self.location
        if plan is not None:
            project = project or plan.variable("project_id", "project")
            location = location or plan.variable("location", "region")
        return GcpContext(project=project, location=location)
