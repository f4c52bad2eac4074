"""Text-line based receipt item extraction."""

import re
from collections.abc import Sequence
from decimal import Decimal

from ecoreceipt.domain.receipt import ExtractedItem

from ..item_categories import CategoryRuleTable, classify_item
from .common import (
    MULTILINE_KEYWORD_EXCLUSIONS,
    is_acceptable_item,
    parse_amount,
    sanitize_item_name,
    to_cents,
)

# Header/footer/summary lines that are never items
SKIP_PATTERNS = [
    re.compile(
        r"^(total|subtotal|tax|balance|change|payment|cash|credit|debit|receipt|"
        r"thank|you|store|address|phone|date|time)",
        re.IGNORECASE,
    ),
    re.compile(r"^\s*$"),
    # Just dates/times
    re.compile(r"^[\d\-/\s:]+$"),
    # Just symbols
    re.compile(r"^[#*\-=]+$"),
]

_NAME = r"[A-Z][A-Z\s*\-'&.]"

# Single-line item formats, most specific first. Patterns with three groups
# carry (name, quantity, unit price); two groups carry (name, price).
ITEM_PATTERNS = [
    # "ITEM NAME 2 @ $3.25 EACH" or "ITEM NAME 2 @ 3.25"
    re.compile(r"^(" + _NAME + r"{2,40})\s+(\d+)\s*@\s*\$?([\d,]+\.\d{1,2})"),
    # "ITEM NAME 2 x $3.99"
    re.compile(r"^(" + _NAME + r"{2,40})\s+(\d+)\s*[xX]\s*\$?([\d,]+\.\d{1,2})"),
    # "ITEM NAME $12.99"
    re.compile(r"^(" + _NAME + r"{3,40})\s+\$\s*([\d,]+\.\d{1,2})$"),
    # "ITEM NAME    12.99"
    re.compile(r"^(" + _NAME + r"{3,40})\s{2,}([\d,]+\.\d{1,2})$"),
    # "ITEM NAME<TAB>12.99"
    re.compile(r"^(" + _NAME + r"{3,40})\t+([\d,]+\.\d{1,2})$"),
    # "ITEM NAME 12.99" (name must not end with digits)
    re.compile(r"^([A-Z][A-Z\s*\-'&.]*[A-Z][A-Z\s*\-'&.]{2,35})\s+([\d,]+\.\d{1,2})$"),
]

# Two-line format: name on one line, bare price on the next
MULTILINE_NAME_PATTERN = re.compile(r"^[A-Z\s*\-'&.0-9]{3,50}$")
MULTILINE_PRICE_PATTERN = re.compile(r"^(\d+\.\d{1,2})$")


def _should_skip_line(line: str) -> bool:
    return any(pattern.search(line) for pattern in SKIP_PATTERNS)


def _match_single_line(line: str, rule_table: CategoryRuleTable | None) -> ExtractedItem | None:
    """Parse one line with the first matching item pattern; None if it is not an item."""
    for pattern in ITEM_PATTERNS:
        match = pattern.match(line)
        if not match:
            continue

        groups = match.groups()
        quantity = 1
        if len(groups) == 3:
            quantity = int(groups[1]) or 1
            unit_price = parse_amount(groups[2])
            price = unit_price * quantity if unit_price is not None else None
        else:
            price = parse_amount(groups[1])

        name = sanitize_item_name(groups[0])
        if price is None or not is_acceptable_item(name, price):
            return None
        return ExtractedItem(
            name=name,
            price=to_cents(price),
            quantity=quantity,
            category=classify_item(name, rule_table),
        )
    return None


def _match_two_lines(name_line: str, price_line: str, rule_table: CategoryRuleTable | None) -> ExtractedItem | None:
    """Parse an item whose price is printed alone on the following line."""
    if not MULTILINE_NAME_PATTERN.match(name_line):
        return None
    price_match = MULTILINE_PRICE_PATTERN.match(price_line)
    if not price_match:
        return None

    name = sanitize_item_name(name_line)
    price = Decimal(price_match.group(1))
    if not is_acceptable_item(name, price, exclusions=MULTILINE_KEYWORD_EXCLUSIONS):
        return None
    return ExtractedItem(
        name=name,
        price=to_cents(price),
        category=classify_item(name, rule_table),
    )


def extract_items(lines: Sequence[str], rule_table: CategoryRuleTable | None = None) -> list[ExtractedItem]:
    """
    Extract line items from receipt text lines.

    This is heuristic-based. Each line is matched against ITEM_PATTERNS in
    order; the first pattern that matches decides the line. Lines that do
    not yield an item may still start a two-line item (name, then a bare
    price on the next line), in which case the price line is consumed.

    Args:
        lines: Stripped, non-empty text lines from the receipt
        rule_table: Category rules used to label each item
    """
    items: list[ExtractedItem] = []
    i = 0
    while i < len(lines):
        line = lines[i].strip()

        if _should_skip_line(line):
            i += 1
            continue

        item = _match_single_line(line, rule_table)
        if item is not None:
            items.append(item)
            i += 1
            continue

        if i + 1 < len(lines):
            item = _match_two_lines(line, lines[i + 1].strip(), rule_table)
            if item is not None:
                items.append(item)
                i += 2
                continue

        i += 1

    return items
