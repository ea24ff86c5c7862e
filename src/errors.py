# Exceptions for Invoice Scan Normalizer


class ScanError(Exception):
    """Raised when an invoice cannot be scanned"""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class ImagePayloadError(ScanError):
    """Raised when the uploaded image data is unusable"""
