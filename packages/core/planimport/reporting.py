"""Import run summary."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from planimport.inference import InferredIdentifier


class ResourceStatus(str, Enum):
    IMPORTED = "imported"
    WOULD_IMPORT = "would_import"
    ALREADY_TRACKED = "already_tracked"
    SKIPPED_NO_IDENTIFIER = "skipped_no_identifier"
    SKIPPED_NO_MODULE = "skipped_no_module"
    SKIPPED_TIMEOUT = "skipped_timeout"
    FAILED = "failed"


_SKIPPED = {
    ResourceStatus.SKIPPED_NO_IDENTIFIER,
    ResourceStatus.SKIPPED_NO_MODULE,
    ResourceStatus.SKIPPED_TIMEOUT,
}


@dataclass
class ResourceEntry:
    address: str
    resource_type: str
    status: ResourceStatus
    identifier: str | None = None
    reason: str = ""
    command: str | None = None
    inference: InferredIdentifier | None = None

    def to_dict(self, verbose: bool = False) -> dict[str, Any]:
        data: dict[str, Any] = {
            "address": self.address,
            "resource_type": self.resource_type,
            "status": self.status.value,
        }
        if self.identifier is not None:
            data["identifier"] = self.identifier
        if self.reason:
            data["reason"] = self.reason
        if self.command:
            data["command"] = self.command
        if verbose and self.inference is not None:
            data["inference"] = self.inference.to_dict()
        return data


@dataclass
class ImportReport:
    dry_run: bool = False
    entries: list[ResourceEntry] = field(default_factory=list)

    def add(self, entry: ResourceEntry) -> None:
        self.entries.append(entry)

    def count(self, status: ResourceStatus) -> int:
        return sum(1 for e in self.entries if e.status is status)

    @property
    def imported(self) -> int:
        return self.count(ResourceStatus.IMPORTED) + self.count(ResourceStatus.WOULD_IMPORT)

    @property
    def already_tracked(self) -> int:
        return self.count(ResourceStatus.ALREADY_TRACKED)

    @property
    def skipped(self) -> int:
        return sum(1 for e in self.entries if e.status in _SKIPPED)

    @property
    def skipped_no_identifier(self) -> int:
        return self.count(ResourceStatus.SKIPPED_NO_IDENTIFIER)

    @property
    def failed(self) -> int:
        return self.count(ResourceStatus.FAILED)

    @property
    def total(self) -> int:
        return len(self.entries)

    @property
    def ok(self) -> bool:
        return self.failed == 0

    def summary(self) -> dict[str, int]:
        return {
            "imported": self.imported,
            "already_tracked": self.already_tracked,
            "skipped": self.skipped,
            "skipped_no_identifier": self.skipped_no_identifier,
            "failed": self.failed,
            "total": self.total,
        }

    def to_dict(self, verbose: bool = False) -> dict[str, Any]:
        return {
            "dry_run": self.dry_run,
            "summary": self.summary(),
            "by_status": dict(sorted(Counter(e.status.value for e in self.entries).items())),
            "resources": [e.to_dict(verbose=verbose) for e in self.entries],
        }
