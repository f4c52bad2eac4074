"""Tests for the ecoreceipt command-line entry point."""

import json
from pathlib import Path

import pytest

from ecoreceipt.cli.main import main
from ecoreceipt.cli.receipt import load_ocr_input


def test_no_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 1
    assert "usage: ecoreceipt" in capsys.readouterr().out


def test_parse_plain_text_prints_summary(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    receipt_file = tmp_path / "receipt.txt"
    receipt_file.write_text("WALMART\nMILK 3.50\nBREAD 2.00\nTOTAL: 5.50\n", encoding="utf-8")

    assert main(["parse", str(receipt_file)]) == 0

    out = capsys.readouterr().out
    assert "Store:    Walmart" in out
    assert "Category: Groceries" in out


def test_parse_json_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    receipt_file = tmp_path / "receipt.txt"
    receipt_file.write_text("WALMART\nMILK 3.50\nBREAD 2.00\nTOTAL: 5.50\n", encoding="utf-8")

    assert main(["parse", str(receipt_file), "--json"]) == 0

    record = json.loads(capsys.readouterr().out)
    assert record["total_amount"] == "5.50"
    assert record["eco_grade"] == "B"


def test_parse_legacy_score(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    receipt_file = tmp_path / "receipt.txt"
    receipt_file.write_text("SHOP\nORGANIC MILK 3.00\n", encoding="utf-8")

    assert main(["parse", str(receipt_file), "--json", "--legacy-score"]) == 0

    assert json.loads(capsys.readouterr().out)["sustainability_score"] == 95


def test_parse_missing_file_exits_with_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["parse", str(tmp_path / "missing.txt")]) == 1
    assert "file not found" in capsys.readouterr().out


def test_load_ocr_input_reads_vision_json(tmp_path: Path) -> None:
    path = tmp_path / "receipt.json"
    path.write_text(json.dumps({"responses": [{"textAnnotations": [{"description": "SHOP\nMILK 3.50"}]}]}))

    assert load_ocr_input(path).full_text == "SHOP\nMILK 3.50"


def test_load_ocr_input_treats_non_json_as_text(tmp_path: Path) -> None:
    path = tmp_path / "receipt.json"
    path.write_text("{not json\nMILK 3.50")

    assert load_ocr_input(path).full_text == "{not json\nMILK 3.50"


def test_scan_without_api_key_exits_with_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.delenv("GOOGLE_VISION_API_KEY", raising=False)
    image = tmp_path / "receipt.jpg"
    image.write_bytes(b"\xff\xd8")

    assert main(["scan", str(image)]) == 1
    assert "OCR service unavailable" in capsys.readouterr().out
