"""SchemaStore — read-only query surface over a provider schema document."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from planimport.errors import AttributeTypeMismatch, SchemaInvalidFormatError, SchemaNotFoundError
from planimport.metadata import AttributeMetadata
from planimport.scoring import ScoredCandidate, ScoringStrategy, rank

logger = logging.getLogger(__name__)


class SchemaStore:
    """Parsed output of `terraform providers schema -json`.

    The document is validated once on construction and never mutated, so a
    single store can be shared by concurrent readers.
    """

    def __init__(self, document: dict[str, Any], source: str = "<memory>") -> None:
        self._providers = _validate(document, source)
        self.source = source

    @classmethod
    def load(cls, path: str | Path) -> SchemaStore:
        p = Path(path)
        if not p.is_file():
            raise SchemaNotFoundError(f"Schema file not found: {p}")
        try:
            document = json.loads(p.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise SchemaInvalidFormatError(f"Failed to parse schema JSON in {p}: {exc}") from exc
        return cls(document, source=str(p))

    @classmethod
    def from_document(cls, document: Any) -> SchemaStore:
        return cls(document)

    @property
    def providers(self) -> list[str]:
        return sorted(self._providers)

    def resource_types(self) -> list[str]:
        types: set[str] = set()
        for resource_schemas in self._providers.values():
            types.update(resource_schemas)
        return sorted(types)

    def resource_attributes(self, resource_type: str) -> dict[str, AttributeMetadata]:
        """All attributes declared for `resource_type`, or {} when unlisted.

        Attributes whose definitions don't parse are dropped with a warning.
        """
        block = self._find_block(resource_type)
        if block is None:
            return {}

        attributes = block.get("attributes")
        if not isinstance(attributes, dict):
            return {}

        parsed: dict[str, AttributeMetadata] = {}
        for name in sorted(attributes):
            try:
                parsed[name] = AttributeMetadata.from_schema(name, attributes[name])
            except AttributeTypeMismatch as exc:
                logger.warning("Skipping attribute of %s: %s", resource_type, exc)
        return parsed

    def candidate_identifiers(
        self, resource_type: str, strategy: ScoringStrategy | None = None
    ) -> list[ScoredCandidate]:
        return rank(resource_type, self.resource_attributes(resource_type), strategy)

    def _find_block(self, resource_type: str) -> dict[str, Any] | None:
        for provider in self._search_order(resource_type):
            resource = self._providers[provider].get(resource_type)
            if isinstance(resource, dict):
                block = resource.get("block")
                return block if isinstance(block, dict) else None
        return None

    def _search_order(self, resource_type: str) -> list[str]:
        # Providers whose local name matches the type prefix go first, e.g.
        # "google_compute_instance" -> ".../hashicorp/google", ".../google-beta"
        prefix = resource_type.split("_", 1)[0]
        matching, rest = [], []
        for provider in sorted(self._providers):
            local = provider.rsplit("/", 1)[-1]
            if local == prefix or local.startswith(prefix + "-"):
                matching.append(provider)
            else:
                rest.append(provider)
        return matching + rest


def _validate(document: Any, source: str) -> dict[str, dict[str, Any]]:
    if not isinstance(document, dict) or not isinstance(document.get("provider_schemas"), dict):
        raise SchemaInvalidFormatError(f"{source}: expected an object with a 'provider_schemas' mapping")

    providers: dict[str, dict[str, Any]] = {}
    for provider, body in document["provider_schemas"].items():
        resource_schemas = body.get("resource_schemas") if isinstance(body, dict) else None
        if resource_schemas is None:
            providers[provider] = {}
        elif isinstance(resource_schemas, dict):
            providers[provider] = resource_schemas
        else:
            raise SchemaInvalidFormatError(f"{source}: 'resource_schemas' of {provider!r} must be an object")
    return providers
