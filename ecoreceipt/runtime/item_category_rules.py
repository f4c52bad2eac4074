"""Runtime loader for receipt category rules."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from ecoreceipt.receipt.item_categories import (
    CategoryRuleTable,
    build_category_rule_table,
    load_default_rule_config,
)
from ecoreceipt.runtime.logging import get_logger
from ecoreceipt.runtime.paths import get_paths

logger = get_logger(__name__)


def _load_toml(path: Path) -> dict[str, Any]:
    """Load TOML file and return parsed dict; missing files map to empty dict."""
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    if not path.exists():
        return {}

    with open(path, "rb") as f:
        data = tomllib.load(f)
    return data if isinstance(data, dict) else {}


@lru_cache(maxsize=8)
def load_category_rule_table(override_paths: tuple[str, ...] | None = None) -> CategoryRuleTable:
    """
    Build the rule table from the packaged defaults plus project overrides.

    Args:
        override_paths: Override TOML files, lowest priority first. Defaults
            to config/receipt_rules.toml under the runtime home.

    Returns:
        The merged, immutable rule table (cached per override_paths).
    """
    if override_paths is None:
        override_files = [get_paths().receipt_rules]
    else:
        override_files = [Path(path) for path in override_paths]

    configs = [load_default_rule_config()]
    for path in override_files:
        config = _load_toml(path)
        if config:
            logger.debug("Loaded receipt rule overrides from %s", path)
            configs.append(config)

    return build_category_rule_table(configs)
