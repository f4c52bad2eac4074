"""Spatial (bbox-based) receipt item extraction."""

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from ecoreceipt.domain.receipt import MAX_NAME_LENGTH, ExtractedItem, WordAnnotation

from ..item_categories import CategoryRuleTable, classify_item, get_default_rule_table
from .common import MAX_ITEM_PRICE, parse_amount, to_cents

# Bbox-based parsing constants
Y_TOLERANCE = 10  # Pixels; words closer than this vertically share a line
MIN_WORD_ANNOTATIONS = 2
MAX_SPATIAL_ITEMS = 20

BASE_CONFIDENCE = 0.5

SKIP_LINE_PATTERNS = [
    # Just numbers/dates/dashes
    re.compile(r"^[\d\s\-/]+$"),
    re.compile(r"store|receipt|thank|you|visit|again|cashier|register", re.IGNORECASE),
    re.compile(r"subtotal|tax|total|balance|change|tender|payment", re.IGNORECASE),
    re.compile(r"phone|address|www\.|\.com|email", re.IGNORECASE),
    # Just prices and spaces
    re.compile(r"^[$\d.\s\-]+$"),
]

NON_ITEM_PATTERNS = [
    re.compile(
        r"^(total|subtotal|tax|balance|change|payment|cash|credit|debit|receipt|thank|you|"
        r"store|address|phone|date|time|served|by|register|cashier)$",
        re.IGNORECASE,
    ),
    re.compile(r"^\d+$"),
    re.compile(r"^[\d\s\-/]+$"),
    re.compile(r"^[#*\-=]+$"),
    re.compile(r"^(www\.|\.com|email|phone|address)", re.IGNORECASE),
]

PRICE_WORD_PATTERN = re.compile(r"^\$?(\d+\.?\d*)$")
QUANTITY_PATTERN = re.compile(r"(\d+)\s*x\s", re.IGNORECASE)


@dataclass
class _SpatialLine:
    """Words sharing (approximately) one Y coordinate."""

    anchor_y: float
    words: list[WordAnnotation] = field(default_factory=list)

    @property
    def text(self) -> str:
        return " ".join(word.text for word in self.words)


def group_words_into_lines(words: Sequence[WordAnnotation], y_tolerance: float = Y_TOLERANCE) -> list[_SpatialLine]:
    """
    Cluster word annotations into text lines.

    A word joins the first line whose anchor Y (the average Y of the word
    that started it) is within y_tolerance of the word's own average Y.
    Lines come back top to bottom, words left to right.
    """
    lines: list[_SpatialLine] = []
    for word in words:
        text = word.text.strip()
        if not text or not word.bounding_box:
            continue
        avg_y = word.avg_y
        line = next((candidate for candidate in lines if abs(candidate.anchor_y - avg_y) <= y_tolerance), None)
        if line is None:
            line = _SpatialLine(anchor_y=avg_y)
            lines.append(line)
        line.words.append(WordAnnotation(text=text, bounding_box=word.bounding_box))

    lines.sort(key=lambda line: line.anchor_y)
    for line in lines:
        line.words.sort(key=lambda word: word.avg_x)
    return lines


def _should_skip_line(text: str) -> bool:
    stripped = text.strip()
    return any(pattern.search(stripped) for pattern in SKIP_LINE_PATTERNS)


def _is_common_non_item(name: str) -> bool:
    stripped = name.strip()
    return any(pattern.search(stripped) for pattern in NON_ITEM_PATTERNS)


def calculate_item_confidence(name: str, price: float, grocery_keywords: Sequence[str] = ()) -> float:
    """Score how much a spatially-paired name/price looks like a real item (0.5 to 1.0)."""
    confidence = BASE_CONFIDENCE
    if 3 <= len(name) <= 50:
        confidence += 0.2
    if re.match(r"^[a-zA-Z]", name):
        confidence += 0.1
    if not re.match(r"^\d+$", name):
        confidence += 0.1
    if 0.50 <= price <= 100:
        confidence += 0.2
    lowered = name.lower()
    if any(keyword in lowered for keyword in grocery_keywords):
        confidence += 0.3
    return min(round(confidence, 2), 1.0)


def extract_items_with_bbox(
    words: Sequence[WordAnnotation],
    rule_table: CategoryRuleTable | None = None,
) -> list[ExtractedItem]:
    """
    Extract items using word bounding boxes.

    Strategy:
    1. Rebuild text lines from word positions
    2. Skip header/footer/summary lines
    3. The first price-shaped word on a line is the price; words before it are the name
    4. Score each item, keep the most confident ones

    Returns:
        Up to MAX_SPATIAL_ITEMS items, most confident first
    """
    if len(words) < MIN_WORD_ANNOTATIONS:
        return []

    table = rule_table or get_default_rule_table()
    scored: list[ExtractedItem] = []

    for line in group_words_into_lines(words):
        line_text = line.text
        if _should_skip_line(line_text):
            continue

        price_index = next(
            (
                index
                for index, word in enumerate(line.words)
                if PRICE_WORD_PATTERN.match(word.text.replace(",", "").replace("$", ""))
            ),
            None,
        )
        if price_index is None:
            continue

        price = parse_amount(re.sub(r"[^0-9.]", "", line.words[price_index].text))
        if price is None:
            continue
        price = to_cents(price)
        if not 0 < price < MAX_ITEM_PRICE:
            continue

        name_words = line.words[:price_index]
        if not name_words:
            continue
        name = " ".join(word.text for word in name_words).strip()
        if len(name) <= 2 or _is_common_non_item(name):
            continue

        quantity = 1
        quantity_match = QUANTITY_PATTERN.search(line_text)
        if quantity_match:
            quantity = max(int(quantity_match.group(1)), 1)

        name = name[:MAX_NAME_LENGTH]
        scored.append(
            ExtractedItem(
                name=name,
                price=price,
                quantity=quantity,
                category=classify_item(name, table),
                confidence=calculate_item_confidence(name, float(price), table.grocery_keywords),
            )
        )

    # Stable sort: equally confident items keep top-to-bottom order
    scored.sort(key=lambda item: item.confidence or 0.0, reverse=True)
    return scored[:MAX_SPATIAL_ITEMS]
