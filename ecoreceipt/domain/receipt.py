"""Data models for receipt parsing."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

CATEGORY_LABELS: tuple[str, ...] = (
    "Groceries",
    "Household",
    "Personal Care",
    "Electronics",
    "Clothing",
    "Dining",
    "Health",
    "Other",
)
DEFAULT_CATEGORY = "Other"
UNKNOWN_STORE = "Unknown Store"
DEFAULT_CURRENCY = "USD"
MAX_RAW_TEXT_LENGTH = 5000
MAX_NAME_LENGTH = 100

Point = tuple[float, float]


@dataclass(frozen=True)
class WordAnnotation:
    """A single OCR-detected word with its pixel-space quadrilateral."""

    text: str
    bounding_box: tuple[Point, ...]

    @property
    def avg_x(self) -> float:
        if not self.bounding_box:
            return 0.0
        return sum(p[0] for p in self.bounding_box) / len(self.bounding_box)

    @property
    def avg_y(self) -> float:
        if not self.bounding_box:
            return 0.0
        return sum(p[1] for p in self.bounding_box) / len(self.bounding_box)


@dataclass(frozen=True)
class RawOcrResult:
    """OCR output consumed by the parser.

    `word_annotations` excludes the leading full-text annotation that
    Google Vision returns first.
    """

    full_text: str
    word_annotations: tuple[WordAnnotation, ...] = ()


@dataclass(frozen=True)
class ExtractedItem:
    """A single line item on a receipt."""

    name: str
    price: Decimal
    quantity: int = 1
    category: str = DEFAULT_CATEGORY
    # Only the spatial strategy scores its items.
    confidence: float | None = None


@dataclass(frozen=True)
class ExtractedReceipt:
    """Parsed receipt data."""

    store_name: str
    total_amount: Decimal
    purchase_date: date
    items: tuple[ExtractedItem, ...] = field(default_factory=tuple)
    category: str = DEFAULT_CATEGORY
    currency: str = DEFAULT_CURRENCY
    raw_text: str = ""
    sustainability_score: int = 50
    date_is_default: bool = False

    @property
    def items_total(self) -> Decimal:
        return sum((item.price for item in self.items), Decimal("0.00"))
