"""One schema-declared attribute of a resource type."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from planimport.errors import AttributeTypeMismatch

SCALAR_TYPES = frozenset({"string", "number", "bool"})
COMPOSITE_TYPES = frozenset({"list", "set", "map", "object", "tuple"})
_PRIMITIVE_TYPES = SCALAR_TYPES | {"dynamic"}


class AttributeMetadata(BaseModel):
    """Immutable view of how Terraform treats a single attribute."""

    model_config = ConfigDict(frozen=True)

    required: bool = False
    optional: bool = False
    computed: bool = False
    attribute_type: str = "unknown"
    description: str | None = None
    sensitive: bool = False

    @property
    def is_scalar(self) -> bool:
        return self.attribute_type in SCALAR_TYPES

    @property
    def is_composite(self) -> bool:
        return self.attribute_type in COMPOSITE_TYPES

    @classmethod
    def from_schema(cls, name: str, definition: Any) -> AttributeMetadata:
        """Build metadata from a `block.attributes.<name>` schema entry.

        Raises AttributeTypeMismatch when the entry is not an object, a flag is
        not a boolean, or the `type` descriptor has an unexpected shape.
        """
        if not isinstance(definition, dict):
            raise AttributeTypeMismatch(name, f"definition must be an object, got {type(definition).__name__}")

        flags: dict[str, bool] = {}
        for flag in ("required", "optional", "computed", "sensitive"):
            value = definition.get(flag, False)
            if value is None:
                value = False
            if not isinstance(value, bool):
                raise AttributeTypeMismatch(name, f"{flag!r} must be a boolean, got {value!r}")
            flags[flag] = value

        description = definition.get("description")
        if description is not None and not isinstance(description, str):
            description = None

        return cls(
            attribute_type=_parse_type(name, definition.get("type")),
            description=description,
            **flags,
        )


def _parse_type(name: str, descriptor: Any) -> str:
    # Terraform encodes primitives as "string" and collections as ["map", "string"]
    if descriptor is None:
        return "unknown"
    if isinstance(descriptor, str):
        if descriptor not in _PRIMITIVE_TYPES:
            raise AttributeTypeMismatch(name, f"unknown primitive type {descriptor!r}")
        return descriptor
    if isinstance(descriptor, list) and descriptor and isinstance(descriptor[0], str):
        kind = descriptor[0]
        if kind not in COMPOSITE_TYPES:
            raise AttributeTypeMismatch(name, f"unknown collection type {kind!r}")
        return kind
    raise AttributeTypeMismatch(name, f"cannot parse type descriptor {descriptor!r}")
