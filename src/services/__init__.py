"""Services package."""

from src.services.image import (
    ReceiptError,
    ReceiptImageService,
    ReceiptTooLargeError,
    UnsupportedReceiptError,
)
from src.services.storage import (
    DuplicateError,
    InMemoryTransactionStorage,
    StorageError,
    TransactionStorageInterface,
    sample_transactions,
)

__all__ = [
    # Image services
    "ReceiptError",
    "ReceiptImageService",
    "ReceiptTooLargeError",
    "UnsupportedReceiptError",
    # Storage services
    "DuplicateError",
    "InMemoryTransactionStorage",
    "StorageError",
    "TransactionStorageInterface",
    "sample_transactions",
]
