"""
Receipt OCR service: image -> Tesseract text -> structured receipt.
"""

import tempfile
import uuid
from pathlib import Path

from fastapi.concurrency import run_in_threadpool
from loguru import logger
from .image_fetcher import download_image
from .ocr_engine import extract_text_from_image
from .receipt_parser import parse_receipt
from .receipt_types import ReceiptExtractionResult


class OCRService:
    """
    Runs the OCR engine and hands its text to the receipt parser.

    Tesseract is blocking, so it runs in the threadpool; the parser is
    pure and cheap and runs inline.
    """

    async def process_image(self, image_url: str, language: str | None = None) -> ReceiptExtractionResult:
        """Download an image from a URL and extract receipt data from it"""
        image_path = await download_image(image_url)
        try:
            return await self.process_file(image_path, language)
        finally:
            image_path.unlink(missing_ok=True)

    async def process_bytes(self, content: bytes, language: str | None = None) -> ReceiptExtractionResult:
        """Extract receipt data from an uploaded image body"""
        image_path = Path(tempfile.gettempdir()) / f"ocr_{uuid.uuid4()}.img"
        image_path.write_bytes(content)
        try:
            return await self.process_file(image_path, language)
        finally:
            image_path.unlink(missing_ok=True)

    async def process_file(self, image_path: Path, language: str | None = None) -> ReceiptExtractionResult:
        text = await run_in_threadpool(extract_text_from_image, str(image_path), language)
        return self.parse_text(text)

    def parse_text(self, text: str) -> ReceiptExtractionResult:
        result = parse_receipt(text)
        logger.info(
            "Receipt extracted",
            vendor=result.vendor,
            total=result.total,
            items=len(result.items),
            confidence=result.confidence,
        )
        return result


ocr_service = OCRService()
