"""Pure OCR transformation helpers for receipt parsing."""

from typing import Any

from ecoreceipt.domain.receipt import Point, RawOcrResult, WordAnnotation


def _vertex_point(vertex: dict[str, Any]) -> Point:
    # Vision omits zero coordinates from the JSON
    return (float(vertex.get("x", 0) or 0), float(vertex.get("y", 0) or 0))


def _to_word_annotation(annotation: dict[str, Any]) -> WordAnnotation | None:
    text = annotation.get("description") or ""
    vertices = (annotation.get("boundingPoly") or {}).get("vertices") or []
    if not text.strip() or not vertices:
        return None
    return WordAnnotation(text=text, bounding_box=tuple(_vertex_point(v) for v in vertices))


def first_vision_response(response_json: dict[str, Any]) -> dict[str, Any]:
    """Return the first entry of a Vision `images:annotate` batch response ({} if absent)."""
    responses = response_json.get("responses") or []
    if not responses:
        return {}
    return responses[0] or {}


def transform_vision_result(response_json: dict[str, Any]) -> RawOcrResult:
    """
    Transform a Google Vision `images:annotate` response into a RawOcrResult.

    Vision returns the whole recognized text as the first entry of
    `textAnnotations`, followed by one entry per word. The first entry
    becomes `full_text`; the rest become word annotations.

    Args:
        response_json: Decoded JSON body, either the batch response
            (with `responses`) or a single response entry.

    Returns:
        RawOcrResult; empty when the response carries no text
    """
    response = first_vision_response(response_json) if "responses" in response_json else response_json
    annotations = response.get("textAnnotations") or []
    if not annotations:
        return RawOcrResult(full_text="")

    full_text = annotations[0].get("description") or ""
    words = [_to_word_annotation(annotation) for annotation in annotations[1:]]
    return RawOcrResult(
        full_text=full_text,
        word_annotations=tuple(word for word in words if word is not None),
    )


def annotations_from_boxes(annotations: list[dict[str, Any]]) -> tuple[WordAnnotation, ...]:
    """
    Build word annotations from plain `{"text", "bounding_box": [[x, y], ...]}` dicts.

    Entries without text or corner points are dropped.
    """
    words: list[WordAnnotation] = []
    for annotation in annotations:
        text = annotation.get("text") or ""
        box = annotation.get("bounding_box") or []
        if not text.strip() or not box:
            continue
        words.append(
            WordAnnotation(
                text=text,
                bounding_box=tuple((float(point[0]), float(point[1])) for point in box),
            )
        )
    return tuple(words)
