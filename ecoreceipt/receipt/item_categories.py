"""Category rules for receipt line items and whole receipts.

This module maps item descriptions and store names to one of the fixed
category labels (see ``ecoreceipt.domain.CATEGORY_LABELS``).

Rules are ordered regex groups; the first group that matches wins and
anything unmatched falls to "Other". Defaults live in
``receipt/rules/default_rules.toml``. Project overrides are layered on top
by ``ecoreceipt.runtime.load_category_rule_table``.

To add new rules:
1. Add a ``[[category_rules]]`` entry to a rules TOML file
2. Earlier entries take priority over later ones
3. Patterns are matched against the lower-cased name
"""

import re
from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from typing import Any

from ecoreceipt.domain.receipt import CATEGORY_LABELS, DEFAULT_CATEGORY, ExtractedItem

DEFAULT_RULES_RESOURCE = "default_rules.toml"

CategoryRule = tuple[re.Pattern[str], str]
StoreRule = tuple[tuple[str, ...], str]


@dataclass(frozen=True)
class CategoryRuleTable:
    """In-memory classification tables shared by the parser components."""

    category_rules: tuple[CategoryRule, ...]
    store_rules: tuple[StoreRule, ...]
    known_retailers: tuple[re.Pattern[str], ...]
    sustainable_stores: tuple[str, ...]
    grocery_keywords: tuple[str, ...]


def _load_toml_text(text: str) -> dict[str, Any]:
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    data = tomllib.loads(text)
    return data if isinstance(data, dict) else {}


def _normalize_strings(raw: Any) -> tuple[str, ...]:
    """Normalize a TOML string-or-list value into a tuple of non-empty strings."""
    if isinstance(raw, str):
        value = raw.strip()
        return (value,) if value else tuple()
    if isinstance(raw, list):
        return tuple(str(v).strip() for v in raw if str(v).strip())
    return tuple()


def _checked_category(raw: Any) -> str | None:
    category = str(raw or "").strip()
    if category not in CATEGORY_LABELS:
        return None
    return category


def build_category_rule_table(configs: Sequence[Mapping[str, Any]] | None = None) -> CategoryRuleTable:
    """Merge rule configs into one table.

    Configs are given lowest priority first. Category and store rules from a
    later config are tested before those of earlier configs; list-valued
    settings (retailers, sustainable stores, grocery keywords) are unioned in
    order of first appearance.
    """
    category_layers: list[list[CategoryRule]] = []
    store_layers: list[list[StoreRule]] = []
    retailers: list[str] = []
    sustainable: list[str] = []
    grocery: list[str] = []

    for config in configs or ():
        layer_rules: list[CategoryRule] = []
        for rule in config.get("category_rules", []):
            if not isinstance(rule, Mapping):
                continue
            category = _checked_category(rule.get("category"))
            pattern = str(rule.get("pattern") or "").strip()
            if category is None or not pattern:
                continue
            layer_rules.append((re.compile(pattern, re.IGNORECASE), category))
        category_layers.append(layer_rules)

        layer_store_rules: list[StoreRule] = []
        for rule in config.get("store_rules", []):
            if not isinstance(rule, Mapping):
                continue
            category = _checked_category(rule.get("category"))
            keywords = tuple(kw.lower() for kw in _normalize_strings(rule.get("keywords")))
            if category is None or not keywords:
                continue
            layer_store_rules.append((keywords, category))
        store_layers.append(layer_store_rules)

        list_settings = (
            (retailers, "known_retailers"),
            (sustainable, "sustainable_stores"),
            (grocery, "grocery_keywords"),
        )
        for target, key in list_settings:
            for value in _normalize_strings(config.get(key)):
                if value not in target:
                    target.append(value)

    return CategoryRuleTable(
        category_rules=tuple(rule for layer in reversed(category_layers) for rule in layer),
        store_rules=tuple(rule for layer in reversed(store_layers) for rule in layer),
        known_retailers=tuple(re.compile(pattern, re.IGNORECASE) for pattern in retailers),
        sustainable_stores=tuple(s.lower() for s in sustainable),
        grocery_keywords=tuple(k.lower() for k in grocery),
    )


def load_default_rule_config() -> dict[str, Any]:
    """Read the packaged default rules TOML."""
    resource = resources.files("ecoreceipt.receipt").joinpath("rules").joinpath(DEFAULT_RULES_RESOURCE)
    return _load_toml_text(resource.read_text(encoding="utf-8"))


@lru_cache(maxsize=1)
def get_default_rule_table() -> CategoryRuleTable:
    """Packaged default rules only (no project overrides)."""
    return build_category_rule_table([load_default_rule_config()])


def classify_item(name: str, rule_table: CategoryRuleTable | None = None) -> str:
    """
    Return the category label for an item or store name.

    Args:
        name: Item description as printed on the receipt (e.g., "ORGANIC APPLES")
        rule_table: Preloaded rules; the packaged defaults when omitted.

    Returns:
        One of the category labels, "Other" if no rule matches.
    """
    table = rule_table or get_default_rule_table()
    lowered = name.lower()
    for pattern, category in table.category_rules:
        if pattern.search(lowered):
            return category
    return DEFAULT_CATEGORY


def classify_store(store_name: str, rule_table: CategoryRuleTable | None = None) -> str | None:
    """Return the category implied by the store name alone, if any."""
    table = rule_table or get_default_rule_table()
    lowered = store_name.lower()
    for keywords, category in table.store_rules:
        if any(keyword in lowered for keyword in keywords):
            return category
    return None


def categorize_receipt(
    store_name: str,
    items: Sequence[ExtractedItem],
    rule_table: CategoryRuleTable | None = None,
) -> str:
    """
    Roll a receipt up into a single category.

    Store-name rules win; otherwise the most common item category. Ties
    in the vote go to the alphabetically first label so the result does
    not depend on item order.
    """
    store_category = classify_store(store_name, rule_table)
    if store_category is not None:
        return store_category

    if not items:
        return DEFAULT_CATEGORY

    counts = Counter(item.category for item in items)
    return min(counts, key=lambda category: (-counts[category], category))


def is_sustainable_store(store_name: str, rule_table: CategoryRuleTable | None = None) -> bool:
    table = rule_table or get_default_rule_table()
    lowered = store_name.lower()
    return any(store in lowered for store in table.sustainable_stores)
