"""Receipt command handlers used by the unified CLI."""

import argparse
import json
import sys
from pathlib import Path

from ecoreceipt.domain.receipt import ExtractedReceipt, RawOcrResult
from ecoreceipt.receipt.formatter import format_receipt_summary, to_record
from ecoreceipt.receipt.ocr_helpers import transform_vision_result
from ecoreceipt.receipt.sustainability import ScoringMode, eco_grade
from ecoreceipt.runtime import get_logger

logger = get_logger(__name__)


def _scoring_mode(args: argparse.Namespace) -> ScoringMode:
    return ScoringMode.LEGACY if getattr(args, "legacy_score", False) else ScoringMode.ENHANCED


def _print_receipt(receipt: ExtractedReceipt, as_json: bool) -> None:
    if as_json:
        record = to_record(receipt)
        record["eco_grade"] = eco_grade(receipt.sustainability_score)
        print(json.dumps(record, indent=2))
        return

    print("=" * 60)
    print("PARSED RECEIPT")
    print("=" * 60)
    print(format_receipt_summary(receipt))
    print("=" * 60)


def load_ocr_input(path: Path) -> RawOcrResult:
    """
    Read OCR output saved to disk.

    A file holding a JSON object is treated as a Google Vision response;
    anything else is plain receipt text.
    """
    content = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json" or content.lstrip().startswith("{"):
        try:
            data = json.loads(content)
        except json.JSONDecodeError:
            logger.debug("%s is not JSON; treating it as plain text", path)
        else:
            if isinstance(data, dict):
                return transform_vision_result(data)
    return RawOcrResult(full_text=content)


def cmd_parse(args: argparse.Namespace) -> None:
    """Parse a saved OCR text or Vision JSON file and print the result."""
    from ecoreceipt.runtime.receipt_pipeline import process_ocr_result

    input_path = Path(args.file)
    if not input_path.exists():
        logger.error("Input file not found: %s", input_path)
        print(f"Error: file not found: {input_path}")
        sys.exit(1)

    ocr_result = load_ocr_input(input_path)
    receipt = process_ocr_result(ocr_result, scoring_mode=_scoring_mode(args))
    _print_receipt(receipt, args.json)


def cmd_scan(args: argparse.Namespace) -> None:
    """OCR a receipt image with Google Vision, then parse and print it."""
    from ecoreceipt.runtime.receipt_pipeline import OCRServiceUnavailable, scan_receipt

    receipt_path = Path(args.image)
    if not receipt_path.exists():
        logger.error("Receipt image not found: %s", receipt_path)
        print(f"Error: file not found: {receipt_path}")
        sys.exit(1)

    try:
        receipt = scan_receipt(receipt_path, scoring_mode=_scoring_mode(args))
    except OCRServiceUnavailable as e:
        print(f"OCR service unavailable: {e}")
        print("Check GOOGLE_VISION_API_KEY and network access before scanning receipts.")
        sys.exit(1)

    _print_receipt(receipt, args.json)


def cmd_serve(args: argparse.Namespace) -> None:
    """Start the FastAPI server exposing /parse and /health."""
    from ecoreceipt.runtime.receipt_server import run_server

    print(f"Starting ecoreceipt server on {args.host}:{args.port}")
    print(f"Parse endpoint: http://{args.host}:{args.port}/parse")
    print("Press Ctrl+C to stop")

    run_server(host=args.host, port=args.port)
