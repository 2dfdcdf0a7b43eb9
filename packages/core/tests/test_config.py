"""Tests for ImportSettings loading and precedence."""

from __future__ import annotations

from pathlib import Path

import pytest
from planimport.config import ImportSettings
from planimport.errors import ConfigError
from planimport.plan import PlanDocument


class TestDefaults:
    def test_defaults(self):
        settings = ImportSettings()
        assert settings.binary == "terragrunt"
        assert settings.timeout == 300
        assert settings.workers == 4
        assert settings.module_root == "."
        assert settings.schema_path is None


class TestLoading:
    def test_from_yaml(self):
        settings = ImportSettings.from_yaml(
            "project: my-project\nlocation: europe-west1\nschema: schema.json\ntimeout: 60\nbinary: terraform\n"
        )
        assert settings.project == "my-project"
        assert settings.schema_path == "schema.json"
        assert settings.timeout == 60
        assert settings.binary == "terraform"

    def test_empty_yaml(self):
        assert ImportSettings.from_yaml("") == ImportSettings()

    def test_invalid_yaml(self):
        with pytest.raises(ConfigError, match="Invalid YAML"):
            ImportSettings.from_yaml("project: [unclosed")

    def test_not_a_mapping(self):
        with pytest.raises(ConfigError):
            ImportSettings.from_yaml("- a\n- b\n")

    def test_unknown_key(self):
        with pytest.raises(ConfigError):
            ImportSettings.from_dict({"projcet": "typo"})

    @pytest.mark.parametrize("data", [{"timeout": 0}, {"timeout": -5}, {"workers": 0}, {"timeout": "soon"}])
    def test_invalid_values(self, data):
        with pytest.raises(ConfigError):
            ImportSettings.from_dict(data)

    def test_from_file(self, tmp_path: Path):
        p = tmp_path / "config.yaml"
        p.write_text("workers: 8\n")
        assert ImportSettings.from_file(p).workers == 8

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            ImportSettings.from_dict([])


class TestPrecedence:
    def test_merged_ignores_none(self):
        base = ImportSettings(project="from-config", timeout=60)
        merged = base.merged(project=None, timeout=10, binary=None)
        assert merged.project == "from-config"
        assert merged.timeout == 10
        assert merged.binary == "terragrunt"
        assert base.timeout == 60

    def test_merged_schema_field_name(self):
        assert ImportSettings().merged(schema_path="x.json").schema_path == "x.json"

    def test_gcp_context_from_settings(self):
        plan = PlanDocument({"variables": {"project_id": {"value": "plan-project"}, "region": {"value": "us-east1"}}})
        context = ImportSettings(project="cfg-project").gcp_context(plan)
        assert context.project == "cfg-project"
        assert context.location == "us-east1"
        assert context.complete

    def test_gcp_context_plan_fallbacks(self):
        plan = PlanDocument({"variables": {"project": {"value": "p"}, "location": {"value": "l"}}})
        context = ImportSettings().gcp_context(plan)
        assert (context.project, context.location) == ("p", "l")

    def test_gcp_context_without_plan(self):
        context = ImportSettings().gcp_context()
        assert not context.complete
