"""Runtime infrastructure for ecoreceipt.

This package owns all I/O around the pure parsing core:
- Logging setup via get_logger()
- Path resolution via get_paths(), ProjectPaths
- Rule table loading via load_category_rule_table()
- Google Vision OCR calls via call_ocr_service()

Usage:
    from ecoreceipt.runtime import get_logger, load_category_rule_table

    logger = get_logger(__name__)
    table = load_category_rule_table()
"""

from ecoreceipt.runtime.item_category_rules import load_category_rule_table
from ecoreceipt.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    set_log_level,
)
from ecoreceipt.runtime.paths import ProjectPaths, get_paths, reset_paths
from ecoreceipt.runtime.receipt_pipeline import (
    OCRServiceUnavailable,
    call_ocr_service,
    process_ocr_result,
    scan_receipt,
)

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Rules
    "load_category_rule_table",
    # Paths
    "get_paths",
    "reset_paths",
    "ProjectPaths",
    # OCR pipeline
    "OCRServiceUnavailable",
    "call_ocr_service",
    "process_ocr_result",
    "scan_receipt",
]
