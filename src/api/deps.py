from ..services.ocr import OCRService, ocr_service

def get_ocr_service() -> OCRService:
    """Shared OCR service; tests swap it via app.dependency_overrides"""
    return ocr_service
