"""Shared fixtures for core tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from planimport.plan import load_modules, load_plan
from planimport.schema import SchemaStore

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def schema_path() -> Path:
    return FIXTURES / "provider_schema.json"


@pytest.fixture
def schema_store(schema_path: Path) -> SchemaStore:
    return SchemaStore.load(schema_path)


@pytest.fixture
def schema_document(schema_path: Path) -> dict:
    return json.loads(schema_path.read_text())


@pytest.fixture
def flat_plan():
    return load_plan(FIXTURES / "plan_resource_changes.json")


@pytest.fixture
def nested_plan():
    return load_plan(FIXTURES / "plan_planned_values.json")


@pytest.fixture
def modules():
    return load_modules(FIXTURES / "modules.json")
