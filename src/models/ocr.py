from pydantic import BaseModel, Field, HttpUrl

class OCRRequest(BaseModel):
    image_url: HttpUrl
    # Tesseract language set, e.g. "eng+pol" (default: OCR_LANGUAGES)
    language: str | None = Field(default=None, pattern=r"^[a-z_]+(\+[a-z_]+)*$")

class ParseRequest(BaseModel):
    text: str = ""
