"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for ledger storage.
This allows us to:
1. Keep business logic decoupled from where the records live
2. Use the in-memory store for the app and for tests alike
3. Swap in a persistent backend later without touching the session

The interface is intentionally small. All operations are synchronous:
every mutation completes before the next user action is processed.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.models.transaction import Transaction


class TransactionStorageInterface(ABC):
    """
    Abstract interface for ledger storage operations.

    Records are kept in insertion order, newest first.
    """

    @abstractmethod
    def add_transaction(self, transaction: Transaction) -> Transaction:
        """
        Add a new transaction at the front of the ledger.

        Args:
            transaction: The transaction to add

        Returns:
            The stored transaction

        Raises:
            DuplicateError: If a transaction with the same id exists
        """
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: UUID) -> Optional[Transaction]:
        """
        Retrieve a transaction by its ID.

        Returns:
            The transaction if found, None otherwise
        """
        pass

    @abstractmethod
    def update_transaction(self, transaction: Transaction) -> bool:
        """
        Replace the stored record that has the same id, in place.

        Returns:
            True if a record was replaced, False if the id is unknown.
            An unknown id is NOT an error and leaves the ledger unchanged.
        """
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: UUID) -> bool:
        """
        Delete a transaction by ID.

        Returns:
            True if a record was removed, False if the id is unknown.
        """
        pass

    @abstractmethod
    def list_transactions(self) -> list[Transaction]:
        """
        Snapshot of all transactions in ledger order.

        The returned list is a copy; mutating it does not touch storage.
        """
        pass

    def __len__(self) -> int:
        return len(self.list_transactions())


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
