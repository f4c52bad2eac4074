"""Format ExtractedReceipt data for display and persistence."""

from decimal import Decimal
from typing import Any

from ecoreceipt.domain.receipt import ExtractedReceipt

from .sustainability import eco_grade


def _format_item_rows(
    rows: list[tuple[str, str, str | None]],
    indent: str = "  ",
) -> list[str]:
    """
    Format item rows with aligned names, amounts and notes.

    Args:
        rows: List of (name, amount_with_currency, note_or_none) tuples
        indent: Indentation prefix for each line

    Returns:
        List of formatted lines with aligned columns
    """
    if not rows:
        return []

    max_name_len = max(len(name) for name, _, _ in rows)
    max_amount_len = max(len(amount) for _, amount, _ in rows)

    lines = []
    for name, amount, note in rows:
        base = f"{indent}{name.ljust(max_name_len)}  {amount.rjust(max_amount_len)}"
        if note:
            lines.append(f"{base}  ; {note}")
        else:
            lines.append(base)
    return lines


def format_receipt_summary(receipt: ExtractedReceipt) -> str:
    """
    Format a receipt as a plain-text summary for review.

    The output lists the parsed header fields, one aligned row per item
    and the eco score with its letter grade. Placeholder values and totals
    that do not add up are flagged with FIXME markers.
    """
    lines = []

    lines.append(f"Store:    {receipt.store_name}")
    if receipt.date_is_default:
        lines.append(f"Date:     {receipt.purchase_date.isoformat()}  ; FIXME: no date found, defaulted to today")
    else:
        lines.append(f"Date:     {receipt.purchase_date.isoformat()}")
    lines.append(f"Total:    {receipt.total_amount:.2f} {receipt.currency}")
    lines.append(f"Category: {receipt.category}")
    lines.append(f"Eco:      {receipt.sustainability_score} ({eco_grade(receipt.sustainability_score)})")
    lines.append("")

    rows: list[tuple[str, str, str | None]] = []
    for item in receipt.items:
        note = item.category
        if item.quantity > 1:
            note = f"{note} (qty {item.quantity})"
        rows.append((item.name, f"{item.price:.2f} {receipt.currency}", note))

    items_total = receipt.items_total
    if receipt.items and items_total != receipt.total_amount and receipt.total_amount > Decimal("0"):
        diff = receipt.total_amount - items_total
        if diff > Decimal("0"):
            rows.append(("FIXME", f"{diff:.2f} {receipt.currency}", "unaccounted amount"))

    if rows:
        lines.append(f"Items ({len(receipt.items)}):")
        lines.extend(_format_item_rows(rows))
    else:
        lines.append("Items: none found")

    return "\n".join(lines)


def to_record(receipt: ExtractedReceipt) -> dict[str, Any]:
    """
    Convert a receipt into the parent/children shape stored by a persistence layer.

    Amounts are rendered as two-decimal strings and the date as ISO 8601,
    so the result is JSON-serializable as is.
    """
    return {
        "store_name": receipt.store_name,
        "total_amount": f"{receipt.total_amount:.2f}",
        "purchase_date": receipt.purchase_date.isoformat(),
        "currency": receipt.currency,
        "category": receipt.category,
        "sustainability_score": receipt.sustainability_score,
        "raw_text": receipt.raw_text,
        "items": [
            {
                "item_name": item.name,
                "category": item.category,
                "price": f"{item.price:.2f}",
                "quantity": item.quantity,
            }
            for item in receipt.items
        ],
    }
