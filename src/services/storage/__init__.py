"""
Storage Services Package

Provides the abstract ledger storage interface and its in-memory
implementation. The interface keeps the backend swappable.
"""

from src.services.storage.interface import (
    DuplicateError,
    StorageError,
    TransactionStorageInterface,
)
from src.services.storage.memory import (
    InMemoryTransactionStorage,
    sample_transactions,
)

__all__ = [
    # Interfaces
    "TransactionStorageInterface",
    # Exceptions
    "DuplicateError",
    "StorageError",
    # In-memory implementation
    "InMemoryTransactionStorage",
    "sample_transactions",
]
