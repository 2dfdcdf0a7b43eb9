"""Error definitions for planimport.

Only whole-document failures stop a run. Everything scoped to a single
resource or attribute is caught by the caller and reported instead.
"""

from __future__ import annotations


class PlanImportError(Exception):
    """Base exception for all planimport errors."""


class ConfigError(PlanImportError, ValueError):
    """Raised when the project configuration file is invalid."""


class SchemaError(PlanImportError):
    """Raised when a provider schema document cannot be loaded."""


class SchemaNotFoundError(SchemaError, FileNotFoundError):
    """Raised when the schema file does not exist."""


class SchemaInvalidFormatError(SchemaError, ValueError):
    """Raised when the schema file is not valid JSON or has the wrong shape."""


class AttributeTypeMismatch(PlanImportError, ValueError):
    """Raised when a schema attribute definition has an unexpected shape."""

    def __init__(self, attribute: str, detail: str):
        super().__init__(f"Attribute {attribute!r}: {detail}")
        self.attribute = attribute
        self.detail = detail


class PlanParseError(PlanImportError, ValueError):
    """Raised when a plan or modules document cannot be parsed."""


class MalformedResourceError(PlanParseError):
    """Raised when one resource's planned values are not a JSON object."""

    def __init__(self, address: str, detail: str):
        super().__init__(f"{address}: {detail}")
        self.address = address
        self.detail = detail


class TerragruntError(PlanImportError):
    """Raised when an external terragrunt/terraform invocation fails."""

    def __init__(self, args: list[str], exit_code: int, stderr: str = "", stdout: str = ""):
        output = stderr.strip() or stdout.strip() or "no output captured"
        super().__init__(f"{' '.join(args)} failed with exit code {exit_code}: {output}")
        self.args_list = args
        self.exit_code = exit_code
        self.stderr = stderr
        self.stdout = stdout
