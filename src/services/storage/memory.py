"""
In-Memory Ledger Storage

The whole ledger lives in a Python list owned by one browser session.
Nothing is written to disk; a page reload starts from scratch.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional
from uuid import UUID

from src.models.transaction import Transaction, TransactionType
from src.services.storage.interface import (
    DuplicateError,
    TransactionStorageInterface,
)


class InMemoryTransactionStorage(TransactionStorageInterface):
    """
    List-backed ledger storage.

    Index 0 is the most recently added record.
    """

    def __init__(self, transactions: Optional[Iterable[Transaction]] = None):
        self._transactions: list[Transaction] = []
        # Given records are already in ledger order
        for transaction in transactions or ():
            self._ensure_unique(transaction.id)
            self._transactions.append(transaction)

    def _index_of(self, transaction_id: UUID) -> Optional[int]:
        for index, transaction in enumerate(self._transactions):
            if transaction.id == transaction_id:
                return index
        return None

    def _ensure_unique(self, transaction_id: UUID) -> None:
        if self._index_of(transaction_id) is not None:
            raise DuplicateError(f"Transaction {transaction_id} already exists")

    def add_transaction(self, transaction: Transaction) -> Transaction:
        self._ensure_unique(transaction.id)
        self._transactions.insert(0, transaction)
        return transaction

    def get_transaction(self, transaction_id: UUID) -> Optional[Transaction]:
        index = self._index_of(transaction_id)
        if index is None:
            return None
        return self._transactions[index]

    def update_transaction(self, transaction: Transaction) -> bool:
        index = self._index_of(transaction.id)
        if index is None:
            return False
        self._transactions[index] = transaction
        return True

    def delete_transaction(self, transaction_id: UUID) -> bool:
        index = self._index_of(transaction_id)
        if index is None:
            return False
        del self._transactions[index]
        return True

    def list_transactions(self) -> list[Transaction]:
        return list(self._transactions)

    def __len__(self) -> int:
        return len(self._transactions)


def sample_transactions() -> list[Transaction]:
    """The starter ledger shown to a fresh session."""
    return [
        Transaction(
            date=date(2023, 10, 1),
            description="Initial Deposit / رصيد أول المدة",
            amount=Decimal("20000"),
            bill_number="DEP-001",
            category="Deposit",
            type=TransactionType.DEPOSIT,
        ),
        Transaction(
            date=date(2023, 10, 5),
            description="Mindmapp fees / رسوم مايند ماب",
            amount=Decimal("1500"),
            bill_number="INV-102",
            category="Fees",
            type=TransactionType.EXPENSE,
        ),
        Transaction(
            date=date(2023, 10, 10),
            description="Internet bill / فاتورة إنترنت",
            amount=Decimal("650"),
            bill_number="TEL-55",
            category="Internet",
            type=TransactionType.EXPENSE,
        ),
    ]
