"""FastAPI server that parses OCR output posted by the app backend."""

from typing import Any

from fastapi import FastAPI
from pydantic import BaseModel, Field

from ecoreceipt.domain.receipt import RawOcrResult
from ecoreceipt.receipt.formatter import to_record
from ecoreceipt.receipt.ocr_helpers import annotations_from_boxes
from ecoreceipt.receipt.sustainability import eco_grade
from ecoreceipt.runtime.logging import get_logger
from ecoreceipt.runtime.receipt_pipeline import process_ocr_result

logger = get_logger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


class AnnotationIn(BaseModel):
    text: str
    bounding_box: list[tuple[float, float]] = Field(min_length=1)


class ParseRequest(BaseModel):
    text: str
    annotations: list[AnnotationIn] = Field(default_factory=list)


app = FastAPI(title="ecoreceipt")


@app.post("/parse")
def parse(request: ParseRequest) -> dict[str, Any]:
    """Parse OCR text (and optional word boxes) into a receipt record."""
    words = annotations_from_boxes([annotation.model_dump() for annotation in request.annotations])
    logger.debug("Parse request: %d characters, %d annotations", len(request.text), len(words))

    receipt = process_ocr_result(RawOcrResult(full_text=request.text, word_annotations=words))
    record = to_record(receipt)
    record["eco_grade"] = eco_grade(receipt.sustainability_score)
    return record


@app.get("/health")
def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


def run_server(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
    import uvicorn

    logger.info("Serving ecoreceipt API on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port)
