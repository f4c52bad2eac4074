"""Shared constants and helpers for OCR receipt parsing."""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENTS = Decimal("0.01")

# Item acceptance bounds
MIN_ITEM_NAME_LENGTH = 2
MAX_ITEM_NAME_LENGTH = 50
MAX_ITEM_PRICE = Decimal("1000")

# Total candidates must fall strictly inside this range
MAX_TOTAL_AMOUNT = Decimal("10000")

# Characters kept in item names
ITEM_NAME_DISALLOWED = re.compile(r"[^\w\s\-'&.]")

# Names containing these are summary/payment lines, not items
ITEM_KEYWORD_EXCLUSIONS = re.compile(r"(total|tax|subtotal|change|payment|cash|credit|debit)")
# Stricter list for the two-line fallback, where the name line stands alone
MULTILINE_KEYWORD_EXCLUSIONS = re.compile(
    r"(total|tax|subtotal|change|payment|cash|credit|debit|"
    r"description|store|phone|manager|served|register|receipt|time)"
)

PURELY_NUMERIC = re.compile(r"^\d+$")


def parse_amount(text: str) -> Decimal | None:
    """Parse a receipt amount like "1,234.56" or "$3.50"; None if unparseable."""
    cleaned = text.replace(",", "").replace("$", "").strip()
    if not cleaned:
        return None
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def to_cents(amount: Decimal) -> Decimal:
    """Round an amount to cents, half-up like a cash register."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def sanitize_item_name(name: str) -> str:
    return ITEM_NAME_DISALLOWED.sub("", name).strip()


def is_acceptable_item(name: str, price: Decimal, exclusions: re.Pattern[str] = ITEM_KEYWORD_EXCLUSIONS) -> bool:
    """Return True if a sanitized name/price pair looks like a real line item."""
    if not MIN_ITEM_NAME_LENGTH <= len(name) <= MAX_ITEM_NAME_LENGTH:
        return False
    if PURELY_NUMERIC.match(name):
        return False
    if exclusions.search(name.lower()):
        return False
    return Decimal("0") < price <= MAX_ITEM_PRICE
