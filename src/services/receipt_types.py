from pydantic import BaseModel, ConfigDict, Field

class LineItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    quantity: float = 1.0
    price: float = Field(gt=0)

class ReceiptExtractionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    raw_text: str = ""  # Unmodified OCR text, kept for debugging
    vendor: str = ""
    date: str = ""  # As printed on the receipt, not normalized
    total: float = Field(default=0.0, ge=0)
    items: list[LineItem] = Field(default_factory=list)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
