"""planimport — infer import identifiers for Terraform/Terragrunt plans."""

from planimport.errors import (
    AttributeTypeMismatch,
    ConfigError,
    MalformedResourceError,
    PlanImportError,
    PlanParseError,
    SchemaError,
    SchemaInvalidFormatError,
    SchemaNotFoundError,
    TerragruntError,
)
from planimport.metadata import AttributeMetadata
from planimport.scoring import ScoredCandidate, ScoringStrategy, select_strategy

__version__ = "0.3.0"

__all__ = [
    "AttributeMetadata",
    "AttributeTypeMismatch",
    "ConfigError",
    "GcpContext",
    "ImportExecutor",
    "ImportReport",
    "ImportSettings",
    "InferenceEngine",
    "InferredIdentifier",
    "MalformedResourceError",
    "PlanImportError",
    "PlanParseError",
    "PlannedResource",
    "ScoredCandidate",
    "ScoringStrategy",
    "SchemaError",
    "SchemaInvalidFormatError",
    "SchemaNotFoundError",
    "SchemaStore",
    "TerragruntError",
    "load_plan",
    "run_imports",
    "select_strategy",
]


def __getattr__(name: str):
    # Lazy imports keep `import planimport` cheap for the CLI
    if name == "SchemaStore":
        from planimport.schema import SchemaStore

        return SchemaStore
    if name in ("InferenceEngine", "InferredIdentifier", "GcpContext"):
        from planimport import inference

        return getattr(inference, name)
    if name in ("PlannedResource", "load_plan"):
        from planimport import plan

        return getattr(plan, name)
    if name == "ImportExecutor":
        from planimport.executor import ImportExecutor

        return ImportExecutor
    if name == "ImportReport":
        from planimport.reporting import ImportReport

        return ImportReport
    if name == "ImportSettings":
        from planimport.config import ImportSettings

        return ImportSettings
    if name == "run_imports":
        from planimport.importer import run_imports

        return run_imports
    raise AttributeError(f"module 'planimport' has no attribute {name!r}")
