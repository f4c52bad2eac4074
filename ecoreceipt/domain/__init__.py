"""Core domain models for ecoreceipt.

Usage:
    from ecoreceipt.domain import ExtractedReceipt, ExtractedItem, RawOcrResult
"""

from ecoreceipt.domain.receipt import (
    CATEGORY_LABELS,
    DEFAULT_CATEGORY,
    UNKNOWN_STORE,
    ExtractedItem,
    ExtractedReceipt,
    RawOcrResult,
    WordAnnotation,
)

__all__ = [
    "CATEGORY_LABELS",
    "DEFAULT_CATEGORY",
    "UNKNOWN_STORE",
    "ExtractedItem",
    "ExtractedReceipt",
    "RawOcrResult",
    "WordAnnotation",
]
