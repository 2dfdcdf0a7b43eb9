"""Packaging acceptance tests — verify the package is usable after install."""

from __future__ import annotations

from pathlib import Path

import planimport
import pytest


class TestImports:
    """Verify all public API symbols are importable."""

    def test_eager_exports(self):
        from planimport import AttributeMetadata, PlanImportError, ScoringStrategy, select_strategy

        assert AttributeMetadata is not None
        assert issubclass(PlanImportError, Exception)
        assert select_strategy("google_x") is ScoringStrategy.GOOGLE_CLOUD

    def test_lazy_imports(self):
        from planimport import ImportExecutor, ImportReport, ImportSettings, InferenceEngine, SchemaStore, run_imports

        assert InferenceEngine is not None
        assert SchemaStore is not None
        assert ImportExecutor is not None
        assert ImportReport is not None
        assert ImportSettings is not None
        assert callable(run_imports)

    def test_all_resolvable(self):
        for name in planimport.__all__:
            assert getattr(planimport, name) is not None

    def test_invalid_import_raises(self):
        with pytest.raises(AttributeError):
            _ = planimport.NoSuchThing  # type: ignore[attr-defined]


class TestVersion:
    def test_version_is_string(self):
        assert isinstance(planimport.__version__, str)

    def test_version_is_semver(self):
        parts = planimport.__version__.split(".")
        assert len(parts) >= 2
        assert all(p.isdigit() for p in parts[:2])


class TestPyTyped:
    def test_core_py_typed_exists(self):
        marker = Path(planimport.__file__).parent / "py.typed"
        assert marker.exists(), "Missing py.typed marker in core package"
