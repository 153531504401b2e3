import pytesseract
from PIL import Image
from loguru import logger
from .errors import OCREngineError
from ..core.config import settings


def extract_text_from_image(image_path: str, languages: str | None = None) -> str:
    """
    Run Tesseract over an image file and return the raw transcription.

    Args:
        image_path: Path to a local image file
        languages: Tesseract language set, e.g. "eng+pol" (default: OCR_LANGUAGES)

    Raises:
        OCREngineError: image unreadable or Tesseract missing/failed
    """
    if settings.tesseract_cmd:
        pytesseract.pytesseract.tesseract_cmd = settings.tesseract_cmd

    lang = languages or settings.ocr_languages
    logger.info("Running OCR", image_path=str(image_path), languages=lang)

    try:
        with Image.open(image_path) as image:
            text = pytesseract.image_to_string(image, lang=lang)
    except pytesseract.TesseractNotFoundError as e:
        logger.error("Tesseract is not installed or not on PATH")
        raise OCREngineError("Tesseract is not installed or not on PATH") from e
    except (pytesseract.TesseractError, Image.DecompressionBombError, OSError) as e:
        logger.error(f"OCR extraction failed: {str(e)}")
        raise OCREngineError(f"OCR extraction failed: {str(e)}") from e

    logger.info("OCR finished", chars=len(text))
    return text
