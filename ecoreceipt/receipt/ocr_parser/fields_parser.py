"""Store name, purchase date and total amount extraction helpers."""

import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from ecoreceipt.domain.receipt import MAX_NAME_LENGTH, UNKNOWN_STORE

from ..date_utils import expand_two_digit_year, is_recent
from .common import MAX_TOTAL_AMOUNT, parse_amount, to_cents

STORE_SCAN_LINES = 5
STORE_NAME_DISALLOWED = re.compile(r"[^a-zA-Z0-9\s&'-]")

# Tried in order on every line, bottom of the receipt first
TOTAL_PATTERNS = [
    re.compile(r"(?:grand\s+)?total[:\s]+\$?([\d,]+\.?\d*)", re.IGNORECASE),
    re.compile(r"amount\s+due[:\s]+\$?([\d,]+\.?\d*)", re.IGNORECASE),
    re.compile(r"balance\s+due[:\s]+\$?([\d,]+\.?\d*)", re.IGNORECASE),
    re.compile(r"(?:sub)?total[:\s]+\$?([\d,]+\.?\d*)", re.IGNORECASE),
    re.compile(r"you\s+pay[:\s]+\$?([\d,]+\.?\d*)", re.IGNORECASE),
    re.compile(r"charge[:\s]+\$?([\d,]+\.?\d*)", re.IGNORECASE),
    re.compile(r"paid[:\s]+\$?([\d,]+\.?\d*)", re.IGNORECASE),
    # Any clear dollar amount
    re.compile(r"\$\s*([\d,]+\.\d{2})(?:\s|$)"),
    # Amount at start of line
    re.compile(r"^([\d,]+\.\d{2})(?:\s|$)"),
]
# Candidates at or below this fraction of the receipt count as "bottom third"
BOTTOM_SECTION_RATIO = 0.66

_MONTHS = r"\b(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)"
MONTH_NUMBERS = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

# (pattern, group layout); every match of a pattern is tried before the next pattern
DATE_PATTERNS = [
    # MM/DD/YYYY, MM-DD-YY, MM.DD.YYYY
    (re.compile(r"(?<!\d)(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{2,4})(?!\d)"), "mdy"),
    # YYYY-MM-DD, YYYY/MM/DD, YYYY.MM.DD
    (re.compile(r"(?<!\d)(\d{4})[/\-.](\d{1,2})[/\-.](\d{1,2})(?!\d)"), "ymd"),
    # Jan 15, 2024
    (re.compile(_MONTHS + r"[a-z]*[\s,]+(\d{1,2})[\s,]+(\d{2,4})(?!\d)", re.IGNORECASE), "mon_d_y"),
    # 15 Jan 2024
    (re.compile(r"(?<!\d)(\d{1,2})\s+" + _MONTHS + r"[a-z]*\s+(\d{2,4})(?!\d)", re.IGNORECASE), "d_mon_y"),
    # MM/DD/YY
    (re.compile(r"(?<!\d)(\d{1,2})[/\-](\d{1,2})[/\-](\d{2})(?:\s|$)"), "mdy"),
]


@dataclass(frozen=True)
class TotalCandidate:
    amount: Decimal
    line: str
    index: int


def extract_store_name(
    lines: Sequence[str],
    full_text: str = "",
    known_retailers: Sequence[re.Pattern[str]] = (),
) -> str:
    """
    Extract the store name using multiple strategies.

    Strategy order:
    1. Search for known retailer patterns in the full text
    2. Use the first plausible line among the first few lines
    3. Fall back to "Unknown Store"
    """
    # Strategy 1: known retailers, in table order
    for pattern in known_retailers:
        match = pattern.search(full_text)
        if match:
            return _clean_store_name(match.group(0).title())

    # Strategy 2: first meaningful header line
    for line in lines[:STORE_SCAN_LINES]:
        if not _could_be_store_line(line):
            continue
        cleaned = _clean_store_name(line)
        if len(cleaned) > 2:
            return cleaned

    return UNKNOWN_STORE


def _could_be_store_line(line: str) -> bool:
    lowered = line.lower()
    if re.match(r"^\d", line):
        return False
    if not 2 < len(line) < 50:
        return False
    if "receipt" in lowered or "tax" in lowered or "total" in lowered:
        return False
    # Just numbers and punctuation
    if re.match(r"^[\d\W]+$", line):
        return False
    if line.startswith("$"):
        return False
    return True


def _clean_store_name(name: str) -> str:
    cleaned = " ".join(STORE_NAME_DISALLOWED.sub("", name).split())
    return cleaned[:MAX_NAME_LENGTH]


def extract_total(lines: Sequence[str]) -> Decimal | None:
    """
    Extract the total amount.

    Lines are scanned from the bottom up. The first amount found on a line
    that mentions "total" (but not "subtotal") wins outright. Otherwise the
    best remaining candidate is chosen by _select_total_candidate().

    Returns:
        The total rounded to cents, or None if no amount-like text was found at all
    """
    candidates: list[TotalCandidate] = []
    for index in range(len(lines) - 1, -1, -1):
        line = lines[index]
        lowered = line.lower()
        is_total_line = "total" in lowered and "sub" not in lowered
        for pattern in TOTAL_PATTERNS:
            match = pattern.search(line)
            if not match:
                continue
            amount = parse_amount(match.group(1))
            if amount is None or not Decimal("0") < amount < MAX_TOTAL_AMOUNT:
                continue
            candidates.append(TotalCandidate(amount=amount, line=line, index=index))
            if is_total_line:
                return to_cents(amount)

    return _select_total_candidate(candidates, len(lines))


def _select_total_candidate(candidates: Sequence[TotalCandidate], line_count: int) -> Decimal | None:
    """Prefer candidates from the bottom third of the receipt, then the larger amount."""
    if not candidates:
        return None
    bottom_start = line_count * BOTTOM_SECTION_RATIO
    # sorted() is stable, so equal keys keep bottom-up discovery order
    ranked = sorted(candidates, key=lambda c: (c.index < bottom_start, -c.amount))
    return to_cents(ranked[0].amount)


def extract_date(full_text: str, today: date) -> date | None:
    """
    Extract the purchase date (None if no recent, valid date is present).

    Every match of a pattern is tried before moving to the next pattern.
    A candidate must be a real calendar date within the last year.
    """
    for pattern, layout in DATE_PATTERNS:
        for match in pattern.finditer(full_text):
            candidate = _parse_date_match(match.groups(), layout)
            if candidate is not None and is_recent(candidate, today):
                return candidate
    return None


def _parse_date_match(groups: Sequence[str], layout: str) -> date | None:
    try:
        if layout == "ymd":
            year, month, day = int(groups[0]), int(groups[1]), int(groups[2])
        elif layout == "mon_d_y":
            month = MONTH_NUMBERS[groups[0][:3].lower()]
            day, year = int(groups[1]), _parse_year(groups[2])
        elif layout == "d_mon_y":
            day = int(groups[0])
            month = MONTH_NUMBERS[groups[1][:3].lower()]
            year = _parse_year(groups[2])
        else:
            # Month first, North American order
            month, day, year = int(groups[0]), int(groups[1]), _parse_year(groups[2])
        return date(year, month, day)
    except (ValueError, KeyError):
        return None


def _parse_year(text: str) -> int:
    year = int(text)
    if len(text) == 2:
        return expand_two_digit_year(year)
    return year
