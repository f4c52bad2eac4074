from decimal import Decimal

import pytest

from ecoreceipt.receipt.ocr_parser.items_text_parser import extract_items


def test_extract_items_reads_simple_name_price_lines() -> None:
    lines = ["WALMART", "MILK 3.50", "BREAD 2.00", "TOTAL: 5.50"]

    items = extract_items(lines)

    assert [(item.name, item.price, item.category) for item in items] == [
        ("MILK", Decimal("3.50"), "Groceries"),
        ("BREAD", Decimal("2.00"), "Groceries"),
    ]
    assert all(item.quantity == 1 for item in items)
    assert all(item.confidence is None for item in items)


def test_extract_items_multiplies_at_quantity() -> None:
    items = extract_items(["BANANAS 2 @ 0.59"])

    assert len(items) == 1
    assert items[0].name == "BANANAS"
    assert items[0].quantity == 2
    assert items[0].price == Decimal("1.18")


def test_extract_items_multiplies_x_quantity() -> None:
    items = extract_items(["SODA 3 x $1.25"])

    assert len(items) == 1
    assert items[0].quantity == 3
    assert items[0].price == Decimal("3.75")
    assert items[0].category == "Dining"


@pytest.mark.parametrize(
    ("line", "name", "price", "category"),
    [
        ("HAND SOAP $4.99", "HAND SOAP", Decimal("4.99"), "Household"),
        ("PAPER TOWELS    12.99", "PAPER TOWELS", Decimal("12.99"), "Household"),
        ("SHAMPOO\t6.49", "SHAMPOO", Decimal("6.49"), "Personal Care"),
        ("SOFA 1000.00", "SOFA", Decimal("1000.00"), "Other"),
    ],
)
def test_extract_items_supports_single_line_layouts(line: str, name: str, price: Decimal, category: str) -> None:
    items = extract_items([line])

    assert len(items) == 1
    assert items[0].name == name
    assert items[0].price == price
    assert items[0].category == category


def test_extract_items_pairs_name_with_price_on_next_line() -> None:
    items = extract_items(["PAPER PLATES", "3.99", "MILK 3.50"])

    assert [(item.name, item.price) for item in items] == [
        ("PAPER PLATES", Decimal("3.99")),
        ("MILK", Decimal("3.50")),
    ]


def test_two_line_fallback_rejects_staff_lines() -> None:
    assert extract_items(["SERVED BY ANNA", "5.00"]) == []


@pytest.mark.parametrize(
    "lines",
    [
        ["TOTAL 5.50", "SUBTOTAL 5.00", "TAX 0.50"],
        ["THANK YOU FOR SHOPPING"],
        ["01/15/2024 12:30"],
        ["********"],
        ["DISCOUNT TOTAL 3.00"],
        ["TV STAND 1200.00"],
        ["milk 3.50"],
    ],
)
def test_extract_items_ignores_non_item_lines(lines: list[str]) -> None:
    assert extract_items(lines) == []


def test_extract_items_uses_injected_rule_table(rule_table) -> None:
    items = extract_items(["ORGANIC APPLES 4.99"], rule_table)

    assert items[0].category == "Groceries"
