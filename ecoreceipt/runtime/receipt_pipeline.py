"""Runtime helpers for the receipt OCR pipeline (non-HTTP)."""

import base64
import os
import time
from datetime import date
from pathlib import Path
from typing import Any

import httpx

from ecoreceipt.domain.receipt import ExtractedReceipt, RawOcrResult
from ecoreceipt.receipt.item_categories import CategoryRuleTable
from ecoreceipt.receipt.ocr_helpers import first_vision_response, transform_vision_result
from ecoreceipt.receipt.ocr_result_parser import parse_ocr_result
from ecoreceipt.receipt.sustainability import ScoringMode
from ecoreceipt.runtime.item_category_rules import load_category_rule_table
from ecoreceipt.runtime.logging import get_logger

logger = get_logger(__name__)

VISION_API_URL = "https://vision.googleapis.com/v1/images:annotate"
VISION_API_KEY_ENV_VAR = "GOOGLE_VISION_API_KEY"
OCR_TIMEOUT_SECONDS = 60.0


class OCRServiceUnavailable(RuntimeError):
    """Raised when the OCR service cannot be reached or returns an error."""


def get_vision_api_key() -> str:
    """Read the Vision API key from the environment."""
    api_key = os.environ.get(VISION_API_KEY_ENV_VAR, "").strip()
    if not api_key:
        raise OCRServiceUnavailable(f"{VISION_API_KEY_ENV_VAR} is not set")
    return api_key


def build_vision_request(image_bytes: bytes) -> dict[str, Any]:
    """Build an `images:annotate` request body for one image."""
    return {
        "requests": [
            {
                "image": {"content": base64.b64encode(image_bytes).decode("ascii")},
                "features": [{"type": "DOCUMENT_TEXT_DETECTION", "maxResults": 1}],
            }
        ]
    }


def call_ocr_service(
    receipt_path: Path,
    api_key: str,
    api_url: str = VISION_API_URL,
) -> tuple[dict[str, Any], RawOcrResult]:
    """
    Send a receipt image to Google Vision and return both raw and transformed results.

    Returns:
        Tuple of (raw_response_json, RawOcrResult).

    Raises:
        OCRServiceUnavailable: on transport failure, a non-200 status, or an
            error entry in the Vision response.
    """
    logger.info("Sending receipt %s to Google Vision...", receipt_path.name)

    try:
        image_bytes = receipt_path.read_bytes()

        start_time = time.time()
        response = httpx.post(
            api_url,
            params={"key": api_key},
            json=build_vision_request(image_bytes),
            timeout=OCR_TIMEOUT_SECONDS,
        )
        elapsed_time = time.time() - start_time
        logger.info("Vision returned in %.2f seconds", elapsed_time)
    except httpx.RequestError as e:
        logger.error("Failed to connect to Vision: %s", e)
        raise OCRServiceUnavailable(f"Failed to connect to OCR service: {e}") from e

    if response.status_code != 200:
        # Body is not logged: it can echo recognized receipt text
        logger.error("Vision error: HTTP %s", response.status_code)
        raise OCRServiceUnavailable(f"OCR service error: {response.status_code}")

    raw_result = response.json()
    error = first_vision_response(raw_result).get("error")
    if error:
        message = error.get("message", "unknown error") if isinstance(error, dict) else str(error)
        logger.error("Vision rejected the image: %s", message)
        raise OCRServiceUnavailable(f"OCR service error: {message}")

    ocr_result = transform_vision_result(raw_result)
    logger.debug(
        "Vision found %d characters and %d words",
        len(ocr_result.full_text),
        len(ocr_result.word_annotations),
    )
    return raw_result, ocr_result


def process_ocr_result(
    ocr_result: RawOcrResult,
    *,
    rule_table: CategoryRuleTable | None = None,
    today: date | None = None,
    scoring_mode: ScoringMode = ScoringMode.ENHANCED,
) -> ExtractedReceipt:
    """Parse OCR output with the runtime rule table and log a one-line summary."""
    table = rule_table or load_category_rule_table()
    receipt = parse_ocr_result(ocr_result, rule_table=table, today=today, scoring_mode=scoring_mode)
    logger.info(
        "Parsed receipt: store=%s total=%.2f items=%d category=%s eco=%d",
        receipt.store_name,
        receipt.total_amount,
        len(receipt.items),
        receipt.category,
        receipt.sustainability_score,
    )
    if receipt.date_is_default:
        logger.warning("No purchase date found; defaulted to %s", receipt.purchase_date.isoformat())
    if not receipt.items:
        logger.warning("No line items found on receipt from %s", receipt.store_name)
    return receipt


def scan_receipt(receipt_path: Path, api_key: str | None = None, **parse_options: Any) -> ExtractedReceipt:
    """OCR an image with Google Vision, then parse it."""
    _, ocr_result = call_ocr_service(receipt_path, api_key or get_vision_api_key())
    return process_ocr_result(ocr_result, **parse_options)
