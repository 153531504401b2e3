"""
Tests for the Tesseract wrapper.

Unit tests stub pytesseract; the integration test needs a real Tesseract
with the eng language pack (run with --run-integration).
"""

import pytesseract
import pytest
from PIL import Image, ImageDraw
from src.core.config import settings
from src.services.errors import OCREngineError
from src.services.ocr_engine import extract_text_from_image
from src.services.receipt_parser import parse_receipt


@pytest.fixture
def receipt_image(tmp_path):
    """Render a small receipt onto a white PNG"""
    image = Image.new("RGB", (480, 260), "white")
    draw = ImageDraw.Draw(image)
    lines = ["SuperMart LLC", "12.03.2024", "Milk          3.50", "Bread         2.20", "Total: 5.70"]
    for i, line in enumerate(lines):
        draw.text((20, 20 + i * 40), line, fill="black")

    path = tmp_path / "receipt.png"
    image.save(path)
    return path


@pytest.fixture
def tesseract_calls(monkeypatch):
    calls = []

    def fake_image_to_string(image, lang=None, **kwargs):
        calls.append({"size": image.size, "lang": lang})
        return "SuperMart LLC\nTotal: 5.70\n\x0c"

    monkeypatch.setattr(pytesseract, "image_to_string", fake_image_to_string)
    return calls


def test_returns_raw_tesseract_text(receipt_image, tesseract_calls):
    text = extract_text_from_image(str(receipt_image))

    assert text == "SuperMart LLC\nTotal: 5.70\n\x0c"
    assert tesseract_calls[0]["size"] == (480, 260)


def test_default_language_set(receipt_image, tesseract_calls):
    extract_text_from_image(str(receipt_image))
    assert tesseract_calls[0]["lang"] == settings.ocr_languages == "eng+rus+ukr+pol+bel"


def test_explicit_language_set(receipt_image, tesseract_calls):
    extract_text_from_image(str(receipt_image), languages="pol")
    assert tesseract_calls[0]["lang"] == "pol"


def test_tesseract_cmd_override(receipt_image, tesseract_calls, monkeypatch):
    monkeypatch.setattr(pytesseract.pytesseract, "tesseract_cmd", "tesseract")
    monkeypatch.setattr(settings, "tesseract_cmd", "/opt/tesseract/bin/tesseract")

    extract_text_from_image(str(receipt_image))
    assert pytesseract.pytesseract.tesseract_cmd == "/opt/tesseract/bin/tesseract"


def test_missing_file_raises_engine_error(tmp_path, tesseract_calls):
    with pytest.raises(OCREngineError, match="OCR extraction failed"):
        extract_text_from_image(str(tmp_path / "nope.png"))
    assert tesseract_calls == []


def test_non_image_raises_engine_error(tmp_path, tesseract_calls):
    path = tmp_path / "receipt.jpg"
    path.write_bytes(b"definitely not an image")

    with pytest.raises(OCREngineError, match="OCR extraction failed"):
        extract_text_from_image(str(path))
    assert tesseract_calls == []


def test_oversized_image_raises_engine_error(receipt_image, tesseract_calls, monkeypatch):
    # 480x260 is more than twice the pixel limit
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

    with pytest.raises(OCREngineError, match="exceeds limit"):
        extract_text_from_image(str(receipt_image))
    assert tesseract_calls == []


def test_tesseract_not_installed(receipt_image, monkeypatch):
    def not_installed(image, lang=None, **kwargs):
        raise pytesseract.TesseractNotFoundError()

    monkeypatch.setattr(pytesseract, "image_to_string", not_installed)

    with pytest.raises(OCREngineError, match="not installed"):
        extract_text_from_image(str(receipt_image))


def test_tesseract_failure(receipt_image, monkeypatch):
    def failing(image, lang=None, **kwargs):
        raise pytesseract.TesseractError(1, "Failed loading language 'xyz'")

    monkeypatch.setattr(pytesseract, "image_to_string", failing)

    with pytest.raises(OCREngineError, match="Failed loading language"):
        extract_text_from_image(str(receipt_image), languages="xyz")


@pytest.mark.integration
def test_real_tesseract_reads_rendered_receipt(receipt_image):
    """Rendered with PIL's bitmap font, so only the coarse structure is checked"""
    text = extract_text_from_image(str(receipt_image), languages="eng")
    result = parse_receipt(text)

    assert "SuperMart" in text
    assert result.vendor.startswith("SuperMart")
    assert result.raw_text == text
