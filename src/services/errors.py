"""
Failures of the collaborators around receipt parsing (download, OCR).

The parser itself never raises; these exist so the router can tell a bad
request apart from an upstream failure.
"""


class OCRServiceError(Exception):
    """Base class for image download and OCR failures"""


class InvalidImageURLError(OCRServiceError):
    """Image URL is malformed or points at a forbidden host"""


class ImageDownloadError(OCRServiceError):
    """Image could not be fetched (transport error, bad status, too large)"""


class OCREngineError(OCRServiceError):
    """Tesseract could not read the image"""
