from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    app_name: str = Field("receipt-ocr-service", alias="APP_NAME")
    app_env: str = Field("dev", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # CORS allowed origins (comma-separated list for production deployment)
    cors_origins: str = Field("http://localhost:3000,http://127.0.0.1:3000", alias="CORS_ORIGINS")

    # Tesseract
    ocr_languages: str = Field("eng+rus+ukr+pol+bel", alias="OCR_LANGUAGES")
    tesseract_cmd: str | None = Field(default=None, alias="TESSERACT_CMD")

    # Image download limits
    ocr_max_image_bytes: int = Field(10 * 1024 * 1024, alias="OCR_MAX_IMAGE_BYTES")
    ocr_download_timeout: float = Field(30.0, alias="OCR_DOWNLOAD_TIMEOUT")
    ocr_max_redirects: int = Field(10, alias="OCR_MAX_REDIRECTS")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

settings = Settings()
