from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile
from loguru import logger
from ..deps import get_ocr_service
from ...core.config import settings
from ...models.ocr import OCRRequest, ParseRequest
from ...services.errors import InvalidImageURLError, OCRServiceError
from ...services.ocr import OCRService
from ...services.receipt_types import ReceiptExtractionResult

router = APIRouter(prefix="/ocr", tags=["ocr"])


@router.post("/process", response_model=ReceiptExtractionResult)
async def process_image(req: OCRRequest, svc: OCRService = Depends(get_ocr_service)):
    """
    Download a receipt image and extract structured data from it.

    Example request:
    {
        "image_url": "https://storage.example.com/bills/receipt-42.jpg",
        "language": "eng+pol"
    }

    The response carries vendor, date, total, items, confidence and the raw
    OCR text. A receipt that yields nothing still returns 200 with empty
    fields and zero confidence; only download/OCR failures are errors.
    """
    try:
        return await svc.process_image(str(req.image_url), req.language)
    except InvalidImageURLError as e:
        logger.warning(f"Rejected image URL: {str(e)}")
        raise HTTPException(status_code=400, detail=f"Invalid image URL: {str(e)}")
    except OCRServiceError as e:
        logger.error(f"OCR processing failed: {str(e)}")
        raise HTTPException(status_code=500, detail=f"OCR processing failed: {str(e)}")


@router.post("/upload", response_model=ReceiptExtractionResult)
async def upload_image(
    request: Request,
    file: UploadFile = File(None),
    language: str | None = Query(default=None, pattern=r"^[a-z_]+(\+[a-z_]+)*$"),
    svc: OCRService = Depends(get_ocr_service),
):
    """
    Extract structured data from an uploaded receipt image.

    Accepts either:
    - multipart/form-data (file upload via form)
    - image/* or application/octet-stream (raw binary body)
    """
    max_bytes = settings.ocr_max_image_bytes
    content_length = request.headers.get("content-length", "")
    if content_length.isdigit() and int(content_length) > max_bytes:
        raise HTTPException(status_code=413, detail=f"Image too large (max {max_bytes} bytes)")

    if file:
        content = await file.read()
    else:
        content = await request.body()
    if not content:
        raise HTTPException(status_code=422, detail="No image provided (either multipart or raw body)")
    if len(content) > max_bytes:
        raise HTTPException(status_code=413, detail=f"Image too large (max {max_bytes} bytes)")

    try:
        return await svc.process_bytes(content, language)
    except OCRServiceError as e:
        logger.error(f"OCR processing failed: {str(e)}")
        raise HTTPException(status_code=500, detail=f"OCR processing failed: {str(e)}")


@router.post("/parse", response_model=ReceiptExtractionResult)
async def parse_text(req: ParseRequest, svc: OCRService = Depends(get_ocr_service)):
    """Run the receipt parser over text that was already transcribed"""
    return svc.parse_text(req.text)
