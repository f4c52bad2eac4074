"""Pure receipt parsing core: no I/O, no logging."""

from .item_categories import (
    CategoryRuleTable,
    build_category_rule_table,
    categorize_receipt,
    classify_item,
    get_default_rule_table,
)
from .ocr_result_parser import parse_ocr_result, parse_receipt
from .sustainability import ScoringMode, calculate_sustainability_score, eco_grade

__all__ = [
    "CategoryRuleTable",
    "ScoringMode",
    "build_category_rule_table",
    "calculate_sustainability_score",
    "categorize_receipt",
    "classify_item",
    "eco_grade",
    "get_default_rule_table",
    "parse_ocr_result",
    "parse_receipt",
]
