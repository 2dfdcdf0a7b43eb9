"""Pick the import identifier for a planned resource.

Schema-backed ranking is used when a SchemaStore knows the resource type;
otherwise a fixed heuristic scans the planned values directly. A resource
with no usable value is reported as not found, never guessed.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from planimport.errors import MalformedResourceError
from planimport.plan import PlannedResource
from planimport.schema.store import SchemaStore
from planimport.scoring import LOCATION_ATTRIBUTES, ScoredCandidate, ScoringStrategy, select_strategy

logger = logging.getLogger(__name__)

AZURE_ID_PREFIX = "/subscriptions/"
ARN_PREFIX = "arn:"

# Path segment used in projects/<p>/locations/<l>/<segment>/<value>. Only types
# whose import format is known go here; anything else keeps the raw value.
GCP_LOCATION_COLLECTIONS: dict[str, str] = {
    "google_artifact_registry_repository": "repositories",
    "google_cloud_run_v2_service": "services",
    "google_cloudfunctions2_function": "functions",
    "google_kms_key_ring": "keyRings",
    "google_workflows_workflow": "workflows",
}


class InferenceMode(str, Enum):
    SCHEMA = "schema"
    HEURISTIC = "heuristic"


class IdentifierStatus(str, Enum):
    FOUND = "found"
    NO_VALUE = "no_value"  # candidates existed but none had a usable value
    NO_CANDIDATES = "no_candidates"  # nothing plausible to look at


class GcpContext(BaseModel):
    """Project/location supplied by the environment for GCP path composition."""

    model_config = ConfigDict(frozen=True)

    project: str | None = None
    location: str | None = None

    @property
    def complete(self) -> bool:
        return bool(self.project and self.location)


@dataclass
class InferredIdentifier:
    address: str
    resource_type: str
    status: IdentifierStatus
    mode: InferenceMode
    strategy: ScoringStrategy
    identifier: str | None = None
    raw_value: str | None = None
    attribute: str | None = None
    score: float | None = None
    rejected: list[tuple[str, str]] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.status is IdentifierStatus.FOUND

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"identifier": self.identifier} if self.found else {"not_found": True}
        data.update(
            {
                "address": self.address,
                "resource_type": self.resource_type,
                "status": self.status.value,
                "mode": self.mode.value,
                "strategy": self.strategy.value,
                "attribute": self.attribute,
                "score": round(self.score, 1) if self.score is not None else None,
                "rejected": [{"attribute": a, "reason": r} for a, r in self.rejected],
            }
        )
        return data


@dataclass
class InferenceFailure:
    """A resource whose planned values could not be read at all."""

    address: str
    resource_type: str
    error: str


class InferenceEngine:
    """Stateless per call; the optional SchemaStore is only read."""

    def __init__(self, schema_store: SchemaStore | None = None, context: GcpContext | None = None) -> None:
        self.schema_store = schema_store
        self.context = context or GcpContext()

    def infer(self, resource: PlannedResource) -> InferredIdentifier:
        values = resource.values
        if not isinstance(values, dict):
            raise MalformedResourceError(
                resource.address, f"planned values must be a JSON object, got {type(values).__name__}"
            )

        strategy = select_strategy(resource.resource_type)
        candidates: list[ScoredCandidate] = []
        if self.schema_store is not None:
            candidates = self.schema_store.candidate_identifiers(resource.resource_type, strategy)

        if candidates:
            result = self._from_candidates(resource, values, strategy, candidates)
        else:
            result = _heuristic_scan(resource, values, strategy)

        if result.found:
            result.identifier = format_identifier(resource.resource_type, result.raw_value or "", self.context)
            logger.debug(
                "[%s] %s via %s (%s, score=%s)",
                resource.address,
                result.identifier,
                result.attribute,
                result.mode.value,
                result.score,
            )
        else:
            logger.debug("[%s] no identifier (%s); rejected: %s", resource.address, result.status.value, result.rejected)
        return result

    def infer_all(
        self, resources: list[PlannedResource], max_workers: int = 4
    ) -> list[InferredIdentifier | InferenceFailure]:
        """Infer identifiers concurrently; results keep the input order."""

        def _one(resource: PlannedResource) -> InferredIdentifier | InferenceFailure:
            try:
                return self.infer(resource)
            except MalformedResourceError as exc:
                logger.warning("Cannot infer identifier: %s", exc)
                return InferenceFailure(resource.address, resource.resource_type, exc.detail)

        with ThreadPoolExecutor(max_workers=max(1, max_workers)) as pool:
            return list(pool.map(_one, resources))

    def _from_candidates(
        self,
        resource: PlannedResource,
        values: dict[str, Any],
        strategy: ScoringStrategy,
        candidates: list[ScoredCandidate],
    ) -> InferredIdentifier:
        result = InferredIdentifier(
            address=resource.address,
            resource_type=resource.resource_type,
            status=IdentifierStatus.NO_VALUE,
            mode=InferenceMode.SCHEMA,
            strategy=strategy,
        )
        for candidate in candidates:
            if candidate.attribute in LOCATION_ATTRIBUTES:
                result.rejected.append((candidate.attribute, f"location field (score {candidate.score:.1f})"))
                continue
            value, reason = usable_value(values, candidate.attribute)
            if value is None:
                result.rejected.append((candidate.attribute, f"{reason} (score {candidate.score:.1f})"))
                continue
            result.status = IdentifierStatus.FOUND
            result.raw_value = value
            result.attribute = candidate.attribute
            result.score = candidate.score
            return result
        return result


def usable_value(values: dict[str, Any], attribute: str) -> tuple[str | None, str]:
    """(value, "") for a usable identifier value, else (None, reason)."""
    if attribute not in values:
        return None, "absent from planned values"
    value = values[attribute]
    if value is None:
        return None, "null (known after apply)"
    if isinstance(value, bool):
        return None, "boolean"
    if isinstance(value, int):
        return str(value), ""
    if isinstance(value, str):
        if not value.strip():
            return None, "empty string"
        return value, ""
    return None, f"not a scalar ({type(value).__name__})"


# Fixed priority for schema-less inference; "*azure_path*" and "*_id" are
# matched by value shape and name suffix respectively.
_HEURISTIC_ORDER = ("arn", "*azure_path*", "name", "repository_id", "bucket", "id", "*_id")


def _heuristic_scan(resource: PlannedResource, values: dict[str, Any], strategy: ScoringStrategy) -> InferredIdentifier:
    result = InferredIdentifier(
        address=resource.address,
        resource_type=resource.resource_type,
        status=IdentifierStatus.NO_CANDIDATES,
        mode=InferenceMode.HEURISTIC,
        strategy=strategy,
    )

    for rule in _HEURISTIC_ORDER:
        for attribute in _rule_attributes(rule, values):
            value, reason = usable_value(values, attribute)
            if value is None:
                result.status = IdentifierStatus.NO_VALUE
                result.rejected.append((attribute, reason))
                continue
            result.status = IdentifierStatus.FOUND
            result.raw_value = value
            result.attribute = attribute
            result.score = strategy.score(attribute, None, resource.resource_type)
            return result
    return result


def _rule_attributes(rule: str, values: dict[str, Any]) -> list[str]:
    if rule == "*azure_path*":
        shaped = sorted(k for k, v in values.items() if isinstance(v, str) and v.startswith(AZURE_ID_PREFIX))
        # "id" is the canonical home of the full path when several fields carry one
        if "id" in shaped:
            shaped.remove("id")
            shaped.insert(0, "id")
        return shaped
    if rule == "*_id":
        return sorted(k for k in values if k.endswith("_id") and k != "repository_id")
    return [rule] if rule in values else []


def is_qualified(value: str) -> bool:
    """Whether the value already looks like a full provider path or ARN."""
    return value.startswith((ARN_PREFIX, AZURE_ID_PREFIX, "projects/", "//", "https://")) or "/" in value


def format_identifier(resource_type: str, value: str, context: GcpContext) -> str:
    """Apply provider formatting; ARNs and Azure paths are returned verbatim."""
    if is_qualified(value):
        return value
    if select_strategy(resource_type) is not ScoringStrategy.GOOGLE_CLOUD or not context.complete:
        return value
    collection = GCP_LOCATION_COLLECTIONS.get(resource_type)
    if collection is None:
        return value
    return f"projects/{context.project}/locations/{context.location}/{collection}/{value}"
