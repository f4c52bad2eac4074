"""Tests for bounding-box based item extraction."""

from decimal import Decimal

from ecoreceipt.domain.receipt import WordAnnotation
from ecoreceipt.receipt.ocr_parser.items_spatial_parser import (
    MAX_SPATIAL_ITEMS,
    calculate_item_confidence,
    extract_items_with_bbox,
    group_words_into_lines,
)


def _word(text: str, x: float, y: float, width: float = 40, height: float = 10) -> WordAnnotation:
    return WordAnnotation(
        text=text,
        bounding_box=((x, y), (x + width, y), (x + width, y + height), (x, y + height)),
    )


def test_group_words_into_lines_clusters_by_y_and_orders_by_x() -> None:
    words = [
        _word("3.50", 200, 102),
        _word("MILK", 10, 100),
        _word("BREAD", 10, 130),
        _word("2.00", 200, 131),
    ]

    lines = group_words_into_lines(words)

    assert [line.text for line in lines] == ["MILK 3.50", "BREAD 2.00"]


def test_group_words_into_lines_drops_blank_words() -> None:
    lines = group_words_into_lines([_word("   ", 10, 100), _word("MILK", 60, 100)])

    assert [line.text for line in lines] == ["MILK"]


def test_extract_items_with_bbox_pairs_names_and_prices(rule_table) -> None:
    words = [
        _word("WALMART", 10, 40),
        _word("MILK", 10, 100),
        _word("3.50", 200, 100),
        _word("BREAD", 10, 130),
        _word("2.00", 200, 131),
        _word("TOTAL", 10, 160),
        _word("5.50", 200, 160),
    ]

    items = extract_items_with_bbox(words, rule_table)

    assert [(item.name, item.price, item.category) for item in items] == [
        ("MILK", Decimal("3.50"), "Groceries"),
        ("BREAD", Decimal("2.00"), "Groceries"),
    ]
    assert all(item.confidence == 1.0 for item in items)


def test_extract_items_with_bbox_sorts_by_confidence() -> None:
    words = [
        _word("WIDGET", 10, 100),
        _word("150.00", 200, 100),
        _word("MILK", 10, 130),
        _word("3.50", 200, 130),
    ]

    items = extract_items_with_bbox(words)

    assert [item.name for item in items] == ["MILK", "WIDGET"]
    assert items[1].confidence == 0.9


def test_extract_items_with_bbox_skips_summary_and_footer_lines() -> None:
    words = [
        _word("SUBTOTAL", 10, 100),
        _word("5.50", 200, 100),
        _word("THANK", 10, 130),
        _word("YOU", 60, 130),
        _word("$12.00", 200, 130),
        _word("CASH", 10, 160),
        _word("20.00", 200, 160),
    ]

    assert extract_items_with_bbox(words) == []


def test_extract_items_with_bbox_rejects_out_of_range_prices() -> None:
    words = [_word("SOFA", 10, 100), _word("1500.00", 200, 100), _word("GUM", 10, 130), _word("0.00", 200, 130)]

    assert extract_items_with_bbox(words) == []


def test_extract_items_with_bbox_needs_two_annotations() -> None:
    assert extract_items_with_bbox([_word("MILK", 10, 100)]) == []


def test_extract_items_with_bbox_caps_item_count() -> None:
    words: list[WordAnnotation] = []
    for i in range(MAX_SPATIAL_ITEMS + 5):
        y = 100 + i * 30
        words.append(_word(f"ITEM{chr(65 + i)}", 10, y))
        words.append(_word("1.00", 200, y))

    items = extract_items_with_bbox(words)

    assert len(items) == MAX_SPATIAL_ITEMS
    assert items[0].name == "ITEMA"


def test_calculate_item_confidence_components() -> None:
    assert calculate_item_confidence("WIDGET", 150.0) == 0.9
    assert calculate_item_confidence("WIDGET", 5.0) == 1.0
    assert calculate_item_confidence("12345", 0.1) == 0.7
    assert calculate_item_confidence("RICE", 0.1, ("rice",)) == 1.0
