"""Tests for ImportReport counting and serialization."""

from __future__ import annotations

from planimport.inference import InferenceEngine
from planimport.plan import PlannedResource
from planimport.reporting import ImportReport, ResourceEntry, ResourceStatus


def _report(*statuses: ResourceStatus, dry_run: bool = False) -> ImportReport:
    report = ImportReport(dry_run=dry_run)
    for i, status in enumerate(statuses):
        report.add(ResourceEntry(f"r.{i}", "r", status))
    return report


class TestCounts:
    def test_summary(self):
        report = _report(
            ResourceStatus.IMPORTED,
            ResourceStatus.IMPORTED,
            ResourceStatus.ALREADY_TRACKED,
            ResourceStatus.SKIPPED_NO_IDENTIFIER,
            ResourceStatus.SKIPPED_NO_MODULE,
            ResourceStatus.SKIPPED_TIMEOUT,
            ResourceStatus.FAILED,
        )
        assert report.summary() == {
            "imported": 2,
            "already_tracked": 1,
            "skipped": 3,
            "skipped_no_identifier": 1,
            "failed": 1,
            "total": 7,
        }
        assert not report.ok

    def test_dry_run_counts_as_imported(self):
        report = _report(ResourceStatus.WOULD_IMPORT, ResourceStatus.WOULD_IMPORT, dry_run=True)
        assert report.imported == 2
        assert report.ok

    def test_empty(self):
        report = ImportReport()
        assert report.total == 0
        assert report.ok


class TestToDict:
    def test_shape(self):
        report = _report(ResourceStatus.IMPORTED, ResourceStatus.FAILED, ResourceStatus.IMPORTED)
        data = report.to_dict()
        assert data["dry_run"] is False
        assert data["by_status"] == {"failed": 1, "imported": 2}
        assert [r["status"] for r in data["resources"]] == ["imported", "failed", "imported"]

    def test_entry_optional_fields(self):
        entry = ResourceEntry("a.b", "a", ResourceStatus.FAILED, reason="boom")
        assert entry.to_dict() == {"address": "a.b", "resource_type": "a", "status": "failed", "reason": "boom"}

    def test_inference_only_when_verbose(self):
        resource = PlannedResource(address="aws_s3_bucket.b", resource_type="aws_s3_bucket", values={"bucket": "b"})
        inferred = InferenceEngine().infer(resource)
        entry = ResourceEntry(
            resource.address, resource.resource_type, ResourceStatus.IMPORTED, identifier="b", inference=inferred
        )
        assert "inference" not in entry.to_dict()
        verbose = entry.to_dict(verbose=True)
        assert verbose["inference"]["attribute"] == "bucket"
        assert verbose["identifier"] == "b"
