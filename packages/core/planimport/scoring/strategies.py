"""Provider-aware scoring of attributes as import-identifier candidates.

Scores are additive: a name-pattern base, metadata bonuses, a small
per-resource-type override table and a description bonus. They are only
comparable within one resource type's candidate set.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from planimport.metadata import AttributeMetadata

BASELINE = 50.0
COMPOSITE_BASE = 30.0

REQUIRED_BONUS = 15.0
COMPUTED_BONUS = 10.0
STRING_BONUS = 5.0
DESCRIPTION_BONUS = 10.0

_UNIQUENESS_PHRASES = ("unique identifier", "uniquely identifies", "unique id", "unique name")
# Placement fields, never an import identifier on their own
LOCATION_ATTRIBUTES = frozenset({"location", "region", "zone", "project"})


@dataclass(frozen=True)
class ScoredCandidate:
    attribute: str
    score: float
    metadata: AttributeMetadata | None = None


# Exact-name bases shared by every strategy; provider tables below win on conflict
_COMMON_NAMES: dict[str, float] = {
    "self_link": 95.0,
    "id": 90.0,
    "name": 85.0,
}

_GCP_NAMES: dict[str, float] = {
    **_COMMON_NAMES,
    **{n: 40.0 for n in LOCATION_ATTRIBUTES},
}

_AZURE_NAMES: dict[str, float] = {
    **_COMMON_NAMES,
    "id": 100.0,  # azurerm imports always take the full /subscriptions/... id
    "resource_id": 95.0,
    "resource_group_name": 40.0,
    "location": 40.0,
    "subscription_id": 40.0,
    "tenant_id": 40.0,
}

_GENERIC_NAMES: dict[str, float] = {
    **_COMMON_NAMES,
    **{n: 40.0 for n in LOCATION_ATTRIBUTES},
}

# Additive (resource_type, attribute) overrides. Each entry exists because the
# generic rules picked a valid-looking but wrong attribute for that type.
_GCP_OVERRIDES: dict[tuple[str, str], float] = {
    ("google_artifact_registry_repository", "repository_id"): 20.0,
    ("google_artifact_registry_repository", "name"): -10.0,
    ("google_storage_bucket", "name"): 15.0,
    ("google_bigquery_dataset", "dataset_id"): 18.0,
    ("google_bigquery_table", "table_id"): 18.0,
}

_AZURE_OVERRIDES: dict[tuple[str, str], float] = {
    ("azuread_group", "object_id"): 15.0,
    ("azuread_user", "object_id"): 15.0,
    ("azuread_service_principal", "object_id"): 15.0,
}

_GENERIC_OVERRIDES: dict[tuple[str, str], float] = {
    ("aws_s3_bucket", "bucket"): 45.0,
    ("aws_sns_topic", "arn"): 45.0,
    ("aws_iam_policy", "arn"): 45.0,
    ("aws_lb", "arn"): 45.0,
    ("aws_lb_target_group", "arn"): 45.0,
    ("aws_lb_listener", "arn"): 45.0,
    ("aws_lambda_function", "function_name"): 15.0,
}


class ScoringStrategy(Enum):
    """Closed set of scoring strategies, selected by resource-type prefix."""

    GENERIC = "generic"
    GOOGLE_CLOUD = "google_cloud"
    AZURE = "azure"

    @property
    def label(self) -> str:
        return _LABELS[self]

    def score(self, attribute: str, metadata: AttributeMetadata | None, resource_type: str) -> float:
        """Desirability of `attribute` as the import identifier for `resource_type`.

        Pure and total: unknown names score at baseline, never raise.
        """
        if metadata is not None and metadata.is_composite:
            # Lists and maps can't be flat identifier strings
            score = COMPOSITE_BASE
            if metadata.required:
                score += REQUIRED_BONUS
            if metadata.computed:
                score += COMPUTED_BONUS
            return score

        score = self._name_base(attribute)

        if metadata is not None:
            if metadata.required:
                score += REQUIRED_BONUS
            if metadata.computed:
                score += COMPUTED_BONUS
            if metadata.attribute_type == "string":
                score += STRING_BONUS

        score += _OVERRIDES[self].get((resource_type, attribute), 0.0)

        if metadata is not None and metadata.description:
            text = metadata.description.lower()
            if any(phrase in text for phrase in _UNIQUENESS_PHRASES):
                score += DESCRIPTION_BONUS

        return score

    def _name_base(self, attribute: str) -> float:
        exact = _NAMES[self].get(attribute)
        if exact is not None:
            return exact
        if attribute.endswith("_id"):
            return 80.0
        if attribute.endswith("_name"):
            return 75.0
        if self is ScoringStrategy.GENERIC and "identifier" in attribute:
            return 78.0
        return BASELINE


_NAMES = {
    ScoringStrategy.GENERIC: _GENERIC_NAMES,
    ScoringStrategy.GOOGLE_CLOUD: _GCP_NAMES,
    ScoringStrategy.AZURE: _AZURE_NAMES,
}

_OVERRIDES = {
    ScoringStrategy.GENERIC: _GENERIC_OVERRIDES,
    ScoringStrategy.GOOGLE_CLOUD: _GCP_OVERRIDES,
    ScoringStrategy.AZURE: _AZURE_OVERRIDES,
}

_LABELS = {
    ScoringStrategy.GENERIC: "Generic",
    ScoringStrategy.GOOGLE_CLOUD: "Google Cloud",
    ScoringStrategy.AZURE: "Microsoft Azure",
}

_PREFIXES: list[tuple[tuple[str, ...], ScoringStrategy]] = [
    (("google_", "google-beta_"), ScoringStrategy.GOOGLE_CLOUD),
    (("azurerm_", "azuread_"), ScoringStrategy.AZURE),
]


def select_strategy(resource_type: str) -> ScoringStrategy:
    for prefixes, strategy in _PREFIXES:
        if resource_type.startswith(prefixes):
            return strategy
    return ScoringStrategy.GENERIC


def rank(
    resource_type: str,
    attributes: dict[str, AttributeMetadata],
    strategy: ScoringStrategy | None = None,
) -> list[ScoredCandidate]:
    """Score every attribute and sort by descending score, then name."""
    strategy = strategy or select_strategy(resource_type)
    scored = [ScoredCandidate(name, strategy.score(name, meta, resource_type), meta) for name, meta in attributes.items()]
    scored.sort(key=lambda c: (-c.score, c.attribute))
    return scored
