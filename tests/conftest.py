"""Shared pytest fixtures for ecoreceipt tests."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date
from pathlib import Path

import pytest

from ecoreceipt.receipt.item_categories import CategoryRuleTable, get_default_rule_table
from ecoreceipt.runtime.item_category_rules import load_category_rule_table
from ecoreceipt.runtime.paths import reset_paths


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point ECORECEIPT_HOME at an empty directory so local overrides never leak in."""
    monkeypatch.setenv("ECORECEIPT_HOME", str(tmp_path))
    reset_paths()
    load_category_rule_table.cache_clear()
    yield tmp_path
    reset_paths()
    load_category_rule_table.cache_clear()


@pytest.fixture
def today() -> date:
    return date(2024, 6, 1)


@pytest.fixture
def rule_table() -> CategoryRuleTable:
    return get_default_rule_table()
