"""Plan and module loading for `terraform show -json` output.

Two plan shapes are accepted: the flat `resource_changes` list and the nested
`planned_values.root_module` tree. Both become PlannedResource entries.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from planimport.errors import PlanParseError

logger = logging.getLogger(__name__)

_MODULE_SEGMENT = re.compile(r"module\.([A-Za-z0-9_-]+)")


class PlannedResource(BaseModel):
    """One managed resource from the plan. `values` is kept raw on purpose:
    a non-object value is a per-resource error raised at inference time."""

    model_config = ConfigDict(frozen=True)

    address: str
    resource_type: str
    name: str = ""
    mode: str = "managed"
    module_address: str | None = None
    values: Any = None
    actions: tuple[str, ...] = ()

    @property
    def is_tracked(self) -> bool:
        """True when the plan shows the resource already exists in state."""
        return bool(self.actions) and self.actions != ("create",)

    @property
    def is_creatable(self) -> bool:
        # Nested plans carry no action info; every resource there is a candidate
        return not self.is_tracked


class ModuleMeta(BaseModel):
    """Entry of `.terraform/modules/modules.json`."""

    model_config = ConfigDict(populate_by_name=True)

    key: str = Field(alias="Key")
    source: str = Field(default="", alias="Source")
    dir: str = Field(alias="Dir")


class PlanDocument:
    def __init__(self, data: dict[str, Any], source: str = "<memory>") -> None:
        if not isinstance(data, dict):
            raise PlanParseError(f"{source}: plan must be a JSON object")
        self.data = data
        self.source = source

    def resources(self) -> list[PlannedResource]:
        """Managed resources sorted by address; data sources are dropped."""
        if "resource_changes" in self.data:
            parsed = self._from_resource_changes(self.data["resource_changes"])
        else:
            parsed = self._from_planned_values(self.data.get("planned_values"))
        return sorted((r for r in parsed if r.mode != "data"), key=lambda r: r.address)

    def variable(self, *names: str) -> str | None:
        """First non-empty string value among the named plan variables."""
        variables = _require_object(self.data.get("variables") or {}, self.source, "variables")
        for name in names:
            entry = variables.get(name)
            value = entry.get("value") if isinstance(entry, dict) else None
            if isinstance(value, str) and value:
                return value
        return None

    def _from_resource_changes(self, changes: Any) -> list[PlannedResource]:
        if changes is None:
            return []
        if not isinstance(changes, list):
            raise PlanParseError(f"{self.source}: 'resource_changes' must be a list")

        resources = []
        for entry in changes:
            change = _require_object(entry, self.source).get("change") or {}
            if not isinstance(change, dict):
                raise PlanParseError(f"{self.source}: 'change' of {entry.get('address')!r} must be an object")
            actions = change.get("actions") or []
            if not isinstance(actions, list) or not all(isinstance(a, str) for a in actions):
                raise PlanParseError(f"{self.source}: 'actions' of {entry.get('address')!r} must be a list of strings")
            resources.append(
                _build(
                    entry,
                    self.source,
                    values=change.get("after"),
                    module_address=entry.get("module_address"),
                    actions=tuple(actions),
                )
            )
        return resources

    def _from_planned_values(self, planned_values: Any) -> list[PlannedResource]:
        if not planned_values:
            return []
        root = _require_object(planned_values, self.source).get("root_module")
        if root is None:
            return []
        resources: list[PlannedResource] = []
        self._walk_module(_require_object(root, self.source), resources)
        return resources

    def _walk_module(self, module: dict[str, Any], out: list[PlannedResource]) -> None:
        module_address = module.get("address")
        for entry in module.get("resources") or []:
            out.append(_build(entry, self.source, values=entry.get("values"), module_address=module_address))
        for child in module.get("child_modules") or []:
            self._walk_module(_require_object(child, self.source), out)


def _require_object(value: Any, source: str, what: str = "entry") -> dict[str, Any]:
    if not isinstance(value, dict):
        raise PlanParseError(f"{source}: expected {what} to be an object, got {type(value).__name__}")
    return value


def _build(entry: Any, source: str, values: Any, module_address: str | None, actions: tuple = ()) -> PlannedResource:
    entry = _require_object(entry, source)
    address, resource_type = entry.get("address"), entry.get("type")
    if not isinstance(address, str) or not isinstance(resource_type, str):
        raise PlanParseError(f"{source}: resource entry is missing 'address' or 'type'")
    try:
        return PlannedResource(
            address=address,
            resource_type=resource_type,
            name=entry.get("name") or "",
            mode=entry.get("mode") or "managed",
            module_address=module_address or None,
            values=values,
            actions=actions,
        )
    except ValidationError as exc:
        raise PlanParseError(f"{source}: invalid resource entry {address!r}: {exc}") from exc


def load_plan(path: str | Path) -> PlanDocument:
    p = Path(path)
    if not p.is_file():
        raise PlanParseError(f"Plan file not found: {p}")
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise PlanParseError(f"Failed to parse plan JSON in {p}: {exc}") from exc
    return PlanDocument(data, source=str(p))


def load_modules(path: str | Path) -> list[ModuleMeta]:
    p = Path(path)
    if not p.is_file():
        raise PlanParseError(f"Modules file not found: {p}")
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
        return [ModuleMeta.model_validate(m) for m in data.get("Modules") or []]
    except (json.JSONDecodeError, UnicodeDecodeError, AttributeError, ValidationError) as exc:
        raise PlanParseError(f"Failed to parse modules JSON in {p}: {exc}") from exc


def module_key(module_address: str) -> str:
    """`module.app["x"].module.db` -> `app.db`, the modules.json key format."""
    return ".".join(_MODULE_SEGMENT.findall(module_address))


def resolve_module_dir(
    resource: PlannedResource, modules: list[ModuleMeta], module_root: str | Path
) -> Path | None:
    """Directory to run the import in, or None when the module is unknown.

    Root-module resources run in `module_root` itself.
    """
    root = Path(module_root)
    if not resource.module_address:
        return root
    key = module_key(resource.module_address)
    for meta in modules:
        if meta.key == key:
            return root / meta.dir
    logger.warning("No module mapping for %s (key %r)", resource.address, key)
    return None
