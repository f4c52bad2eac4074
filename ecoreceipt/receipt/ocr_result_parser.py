"""Parse raw OCR text into structured ExtractedReceipt data."""

from collections.abc import Sequence
from datetime import date
from decimal import Decimal

from ecoreceipt.domain.receipt import (
    MAX_RAW_TEXT_LENGTH,
    ExtractedItem,
    ExtractedReceipt,
    RawOcrResult,
    WordAnnotation,
)

from .date_utils import default_receipt_date
from .item_categories import CategoryRuleTable, categorize_receipt, get_default_rule_table
from .ocr_parser import (
    MIN_WORD_ANNOTATIONS,
    extract_date,
    extract_items,
    extract_items_with_bbox,
    extract_store_name,
    extract_total,
)
from .ocr_parser.common import to_cents
from .sustainability import ScoringMode, calculate_sustainability_score


def _split_lines(raw_text: str) -> list[str]:
    return [line.strip() for line in raw_text.split("\n") if line.strip()]


def _select_items(
    lines: list[str],
    word_annotations: Sequence[WordAnnotation],
    rule_table: CategoryRuleTable,
) -> list[ExtractedItem]:
    # Spatial parsing first; fall back to text lines if it finds nothing
    if len(word_annotations) >= MIN_WORD_ANNOTATIONS:
        items = extract_items_with_bbox(word_annotations, rule_table)
        if items:
            return items
    return extract_items(lines, rule_table)


def _total_from_items(items: Sequence[ExtractedItem]) -> Decimal:
    if not items:
        return Decimal("0.00")
    return to_cents(sum((item.price for item in items), Decimal("0")))


def parse_receipt(
    raw_text: str,
    word_annotations: Sequence[WordAnnotation] | None = None,
    *,
    rule_table: CategoryRuleTable | None = None,
    today: date | None = None,
    scoring_mode: ScoringMode = ScoringMode.ENHANCED,
) -> ExtractedReceipt:
    """
    Parse OCR output into an ExtractedReceipt.

    This is a best-effort parser: it never raises on odd input, it falls back
    to defaults ("Unknown Store", today, a total of 0, no items) instead.

    Args:
        raw_text: Full OCR text, in reading order
        word_annotations: Per-word boxes (without the full-text annotation)
        rule_table: Category/retailer rules; the packaged defaults when omitted
        today: Reference date for the recency check and the date fallback
        scoring_mode: Which eco scorer to run over the final items

    Returns:
        ExtractedReceipt with parsed data
    """
    table = rule_table or get_default_rule_table()
    today = default_receipt_date(today)
    raw_text = raw_text or ""
    lines = _split_lines(raw_text)

    store_name = extract_store_name(lines, raw_text, table.known_retailers)

    purchase_date = extract_date(raw_text, today)
    date_is_default = purchase_date is None
    if purchase_date is None:
        purchase_date = today

    items = _select_items(lines, word_annotations or (), table)

    total = extract_total(lines)
    if total is None:
        total = _total_from_items(items)

    return ExtractedReceipt(
        store_name=store_name,
        total_amount=total,
        purchase_date=purchase_date,
        items=tuple(items),
        category=categorize_receipt(store_name, items, table),
        raw_text=raw_text[:MAX_RAW_TEXT_LENGTH],
        sustainability_score=calculate_sustainability_score(items, store_name, scoring_mode, table),
        date_is_default=date_is_default,
    )


def parse_ocr_result(
    ocr: RawOcrResult,
    *,
    rule_table: CategoryRuleTable | None = None,
    today: date | None = None,
    scoring_mode: ScoringMode = ScoringMode.ENHANCED,
) -> ExtractedReceipt:
    """Convenience wrapper around parse_receipt() for a RawOcrResult."""
    return parse_receipt(
        ocr.full_text,
        ocr.word_annotations,
        rule_table=rule_table,
        today=today,
        scoring_mode=scoring_mode,
    )
