"""Heuristic sustainability ("eco") scoring for receipt items.

The enhanced scorer is the default: each item starts from a category base
score, collects keyword adjustments, and the receipt score is the
price-weighted mean clamped to [10, 90]. The legacy scorer (unweighted
keyword tiers) is kept as a selectable mode.
"""

import re
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from ecoreceipt.domain.receipt import ExtractedItem

from .item_categories import CategoryRuleTable, is_sustainable_store

NEUTRAL_SCORE = 50
ENHANCED_MIN_SCORE = 10
ENHANCED_MAX_SCORE = 90

# Higher base = lower impact for the category.
CATEGORY_BASE_SCORES: dict[str, int] = {
    "Groceries": 65,
    "Personal Care": 55,
    "Household": 45,
    "Electronics": 25,
    "Clothing": 35,
    "Dining": 50,
    "Other": 50,
}

# First match wins.
PRODUCT_ADJUSTMENTS: tuple[tuple[re.Pattern[str], int], ...] = (
    (re.compile(r"beef|steak|lamb|meat", re.IGNORECASE), -15),
    (re.compile(r"plastic|disposable", re.IGNORECASE), -10),
    (re.compile(r"battery|electronics", re.IGNORECASE), -12),
    (re.compile(r"vegetable|fruit|plant|grain|bean|lentil", re.IGNORECASE), 10),
    (re.compile(r"bicycle|bike|walk", re.IGNORECASE), 15),
    (re.compile(r"solar|renewable|eco|green", re.IGNORECASE), 20),
)

ORGANIC_PATTERN = re.compile(
    r"organic|bio|natural|sustainable|eco|green|fair.trade|rainforest.alliance", re.IGNORECASE
)
ORGANIC_BONUS = 15
LOCAL_PATTERN = re.compile(r"local|farm|fresh", re.IGNORECASE)
LOCAL_BONUS = 8

EXCESS_PACKAGING_PATTERN = re.compile(r"wrapped|packaged|individual|single.use", re.IGNORECASE)
MINIMAL_PACKAGING_PATTERN = re.compile(r"bulk|loose|recyclable|biodegradable|compostable", re.IGNORECASE)
PACKAGING_ADJUSTMENT = 5

SUSTAINABLE_STORE_BONUS = 5

# (category, price threshold, bonus)
PRICE_ADJUSTMENTS: tuple[tuple[str, Decimal, int], ...] = (
    ("Groceries", Decimal("10"), 3),
    ("Personal Care", Decimal("15"), 2),
)

# Legacy keyword tiers, first match wins.
LEGACY_KEYWORD_TIERS: tuple[tuple[re.Pattern[str], int], ...] = (
    (
        re.compile(r"organic|eco|sustainable|green|natural|biodegradable|fresh|local|farm|vegetable|fruit"),
        35,
    ),
    (re.compile(r"whole|grain|natural|unprocessed|water|plant|herb"), 15),
    (re.compile(r"plastic|disposable|synthetic|artificial|processed|packaged|fast|instant|frozen"), -25),
    (re.compile(r"styrofoam|single.use|non.recyclable|chemical|preservative"), -35),
)
LEGACY_CATEGORY_ADJUSTMENTS: dict[str, int] = {
    "Groceries": 10,
    "Household": -5,
    "Electronics": -15,
}


class ScoringMode(str, Enum):
    """Which eco-score formula to apply."""

    ENHANCED = "enhanced"
    LEGACY = "legacy"


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _product_adjustment(name: str) -> int:
    for pattern, adjustment in PRODUCT_ADJUSTMENTS:
        if pattern.search(name):
            return adjustment
    return 0


def _certification_bonus(name: str) -> int:
    if ORGANIC_PATTERN.search(name):
        return ORGANIC_BONUS
    if LOCAL_PATTERN.search(name):
        return LOCAL_BONUS
    return 0


def _packaging_adjustment(name: str) -> int:
    if EXCESS_PACKAGING_PATTERN.search(name):
        return -PACKAGING_ADJUSTMENT
    if MINIMAL_PACKAGING_PATTERN.search(name):
        return PACKAGING_ADJUSTMENT
    return 0


def _price_adjustment(price: Decimal, category: str) -> int:
    for target_category, threshold, bonus in PRICE_ADJUSTMENTS:
        if category == target_category and price > threshold:
            return bonus
    return 0


def score_item(item: ExtractedItem, store_bonus: int = 0) -> int:
    """Enhanced (unweighted, unclamped) score for a single item."""
    name = item.name.lower()
    score = CATEGORY_BASE_SCORES.get(item.category, NEUTRAL_SCORE)
    score += _product_adjustment(name)
    score += _certification_bonus(name)
    score += _packaging_adjustment(name)
    score += store_bonus
    score += _price_adjustment(item.price, item.category)
    return score


def calculate_enhanced_sustainability_score(
    items: Sequence[ExtractedItem],
    store_name: str = "",
    rule_table: CategoryRuleTable | None = None,
) -> int:
    """
    Price-weighted eco score for a receipt.

    Each item's score is weighted by max(price, 1) so pricier items move the
    result more. The result is rounded and clamped to [10, 90]; an empty
    item list scores a neutral 50.
    """
    if not items:
        return NEUTRAL_SCORE

    store_bonus = SUSTAINABLE_STORE_BONUS if store_name and is_sustainable_store(store_name, rule_table) else 0

    total_score = Decimal("0")
    total_weight = Decimal("0")
    for item in items:
        weight = max(item.price, Decimal("1"))
        total_score += score_item(item, store_bonus) * weight
        total_weight += weight

    return _clamp(_round_half_up(total_score / total_weight), ENHANCED_MIN_SCORE, ENHANCED_MAX_SCORE)


def calculate_legacy_sustainability_score(items: Sequence[ExtractedItem]) -> int:
    """Unweighted keyword-tier eco score, clamped to [0, 100]."""
    if not items:
        return NEUTRAL_SCORE

    total = 0
    for item in items:
        name = item.name.lower()
        item_score = NEUTRAL_SCORE
        for pattern, adjustment in LEGACY_KEYWORD_TIERS:
            if pattern.search(name):
                item_score += adjustment
                break
        item_score += LEGACY_CATEGORY_ADJUSTMENTS.get(item.category, 0)
        total += _clamp(item_score, 0, 100)

    return _clamp(_round_half_up(Decimal(total) / len(items)), 0, 100)


def calculate_sustainability_score(
    items: Sequence[ExtractedItem],
    store_name: str = "",
    mode: ScoringMode = ScoringMode.ENHANCED,
    rule_table: CategoryRuleTable | None = None,
) -> int:
    if mode is ScoringMode.LEGACY:
        return calculate_legacy_sustainability_score(items)
    return calculate_enhanced_sustainability_score(items, store_name, rule_table)


def eco_grade(score: int) -> str:
    """Letter grade for display: A >= 80, B >= 60, C >= 40, else D."""
    if score >= 80:
        return "A"
    if score >= 60:
        return "B"
    if score >= 40:
        return "C"
    return "D"
