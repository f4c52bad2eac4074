"""Date helpers for receipt parsing."""

from datetime import date

# Two-digit years at or below this pivot are 20xx, above are 19xx.
TWO_DIGIT_YEAR_PIVOT = 30


def default_receipt_date(today: date | None = None) -> date:
    """Return the date used when a receipt has no usable date."""
    return today or date.today()


def one_year_before(day: date) -> date:
    """Same calendar day one year earlier (Feb 29 maps to Feb 28)."""
    try:
        return day.replace(year=day.year - 1)
    except ValueError:
        return day.replace(year=day.year - 1, day=28)


def expand_two_digit_year(year: int) -> int:
    if year >= 100:
        return year
    return 2000 + year if year <= TWO_DIGIT_YEAR_PIVOT else 1900 + year


def is_recent(candidate: date, today: date) -> bool:
    """True when candidate falls within [today - 1 year, today]."""
    return one_year_before(today) <= candidate <= today
