"""Tests for dialogue engine startup."""

from __future__ import annotations

from pathlib import Path

import pytest

from cs_common.config import Settings

from dialogue import builtin_catalog
from dialogue.catalog_loader import CatalogLoadError
from dialogue.main import build_engine


class TestBuildEngine:

    def test_builtin_without_path(self) -> None:
        engine = build_engine(Settings(catalog_path=""))
        assert engine.catalog.get_global_patterns() == builtin_catalog.GLOBAL_PATTERNS

    def test_configured_document(self, tmp_path: Path) -> None:
        path = tmp_path / "catalog.json"
        path.write_text('{"templates": {"closing": "失礼いたします。"}}', encoding="utf-8")
        engine = build_engine(Settings(catalog_path=str(path)))
        assert engine.catalog.get_default_template("closing") == "失礼いたします。"

    def test_missing_document_raises(self, tmp_path: Path) -> None:
        with pytest.raises(CatalogLoadError):
            build_engine(Settings(catalog_path=str(tmp_path / "missing.json")))
