"""Composable OCR receipt parser components."""

from .fields_parser import extract_date, extract_store_name, extract_total
from .items_spatial_parser import MIN_WORD_ANNOTATIONS, extract_items_with_bbox, group_words_into_lines
from .items_text_parser import extract_items

__all__ = [
    "MIN_WORD_ANNOTATIONS",
    "extract_date",
    "extract_items",
    "extract_items_with_bbox",
    "extract_store_name",
    "extract_total",
    "group_words_into_lines",
]
