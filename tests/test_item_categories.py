"""Tests for receipt item and store category matching."""

from decimal import Decimal
from pathlib import Path

import pytest

from ecoreceipt.domain.receipt import CATEGORY_LABELS, ExtractedItem
from ecoreceipt.receipt.item_categories import (
    build_category_rule_table,
    categorize_receipt,
    classify_item,
    classify_store,
    is_sustainable_store,
)
from ecoreceipt.runtime.item_category_rules import load_category_rule_table


def _item(name: str, category: str) -> ExtractedItem:
    return ExtractedItem(name=name, price=Decimal("1.00"), category=category)


@pytest.mark.parametrize(
    ("name", "category"),
    [
        ("ORGANIC APPLES", "Groceries"),
        ("COFFEE BEANS", "Dining"),
        ("DISH DETERGENT", "Household"),
        ("SHAMPOO", "Personal Care"),
        ("VITAMIN D", "Health"),
        ("USB CABLE", "Electronics"),
        ("JACKET", "Clothing"),
        ("RANDOM THING", "Other"),
    ],
)
def test_classify_item_examples(name: str, category: str) -> None:
    assert classify_item(name) == category


def test_classify_item_first_rule_group_wins() -> None:
    # "milk tea" hits both Dining and Groceries; Dining is tested first
    assert classify_item("MILK TEA") == "Dining"


def test_every_default_rule_maps_to_a_known_label(rule_table) -> None:
    labels = {category for _, category in rule_table.category_rules}
    labels |= {category for _, category in rule_table.store_rules}

    assert labels <= set(CATEGORY_LABELS)


def test_classify_store_uses_store_rules(rule_table) -> None:
    assert classify_store("Starbucks", rule_table) == "Dining"
    assert classify_store("Whole Foods", rule_table) == "Groceries"
    assert classify_store("Best Buy", rule_table) == "Electronics"
    assert classify_store("Walmart", rule_table) is None


def test_classify_store_food_keyword_does_not_claim_whole_foods(rule_table) -> None:
    assert classify_store("Whole Foods Market", rule_table) == "Groceries"
    assert classify_store("Coffee Market", rule_table) == "Dining"
    assert classify_store("Food Court", rule_table) == "Dining"
    assert classify_store("Farmers Market", rule_table) == "Groceries"


def test_categorize_receipt_store_rule_beats_items(rule_table) -> None:
    items = [_item("USB CABLE", "Electronics"), _item("CHARGER", "Electronics")]

    assert categorize_receipt("Starbucks", items, rule_table) == "Dining"


def test_categorize_receipt_majority_vote(rule_table) -> None:
    items = [
        _item("MILK", "Groceries"),
        _item("BREAD", "Groceries"),
        _item("SOAP", "Household"),
    ]

    assert categorize_receipt("Walmart", items, rule_table) == "Groceries"


def test_categorize_receipt_breaks_ties_alphabetically(rule_table) -> None:
    items = [_item("SOAP", "Household"), _item("MILK", "Groceries")]

    assert categorize_receipt("Corner Shop", items, rule_table) == "Groceries"


def test_categorize_receipt_without_items_is_other(rule_table) -> None:
    assert categorize_receipt("Unknown Store", [], rule_table) == "Other"


def test_sustainable_store_detection(rule_table) -> None:
    assert is_sustainable_store("Whole Foods", rule_table)
    assert is_sustainable_store("Trader Joe", rule_table)
    assert not is_sustainable_store("Walmart", rule_table)


def test_build_category_rule_table_later_layers_take_priority() -> None:
    table = build_category_rule_table(
        [
            {"category_rules": [{"category": "Groceries", "pattern": "kombucha"}]},
            {"category_rules": [{"category": "Dining", "pattern": "kombucha"}]},
        ]
    )

    assert classify_item("KOMBUCHA", table) == "Dining"


def test_build_category_rule_table_drops_unknown_labels_and_empty_patterns() -> None:
    table = build_category_rule_table(
        [
            {
                "category_rules": [
                    {"category": "Snacks", "pattern": "chips"},
                    {"category": "Groceries", "pattern": ""},
                    "not a table",
                ],
                "store_rules": [{"category": "Dining", "keywords": []}],
            }
        ]
    )

    assert table.category_rules == ()
    assert table.store_rules == ()


def test_build_category_rule_table_unions_list_settings() -> None:
    table = build_category_rule_table(
        [
            {"sustainable_stores": ["Co-op"], "grocery_keywords": ["milk"]},
            {"sustainable_stores": "Green Grocer", "grocery_keywords": ["milk", "tofu"]},
        ]
    )

    assert table.sustainable_stores == ("co-op", "green grocer")
    assert table.grocery_keywords == ("milk", "tofu")


def test_runtime_overrides_are_layered_over_defaults(isolated_home: Path) -> None:
    config_dir = isolated_home / "config"
    config_dir.mkdir()
    (config_dir / "receipt_rules.toml").write_text(
        """
known_retailers = ["corner\\\\s*shop"]

[[category_rules]]
category = "Health"
pattern = "kombucha|organic"
""",
        encoding="utf-8",
    )

    table = load_category_rule_table()

    assert classify_item("KOMBUCHA", table) == "Health"
    assert classify_item("ORGANIC APPLES", table) == "Health"
    # Defaults still apply below the override
    assert classify_item("USB CABLE", table) == "Electronics"
    assert any(pattern.search("CORNER SHOP") for pattern in table.known_retailers)
    assert any(pattern.search("WALMART") for pattern in table.known_retailers)


def test_runtime_loader_without_overrides_matches_defaults(rule_table) -> None:
    assert load_category_rule_table() == rule_table


def test_runtime_loader_accepts_explicit_paths(tmp_path: Path) -> None:
    override = tmp_path / "extra.toml"
    override.write_text('[[category_rules]]\ncategory = "Clothing"\npattern = "scarf"\n', encoding="utf-8")

    table = load_category_rule_table((str(override),))

    assert classify_item("WOOL SCARF", table) == "Clothing"
