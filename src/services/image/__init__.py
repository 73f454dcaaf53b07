"""Receipt image services package."""

from src.services.image.receipt_service import (
    ReceiptError,
    ReceiptImageService,
    ReceiptTooLargeError,
    UnsupportedReceiptError,
)

__all__ = [
    "ReceiptError",
    "ReceiptImageService",
    "ReceiptTooLargeError",
    "UnsupportedReceiptError",
]
