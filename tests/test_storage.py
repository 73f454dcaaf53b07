"""Tests for the in-memory ledger storage."""

import pytest
from uuid import uuid4

from src.services.storage import (
    DuplicateError,
    InMemoryTransactionStorage,
    TransactionStorageInterface,
    sample_transactions,
)


class TestInMemoryStorage:
    """List-backed ledger."""

    def test_implements_interface(self):
        assert isinstance(InMemoryTransactionStorage(), TransactionStorageInterface)

    def test_add_puts_newest_first(self, make_transaction):
        storage = InMemoryTransactionStorage()
        first = storage.add_transaction(make_transaction("1"))
        second = storage.add_transaction(make_transaction("2"))
        assert [t.id for t in storage.list_transactions()] == [second.id, first.id]
        assert len(storage) == 2

    def test_add_rejects_duplicate_id(self, make_transaction):
        storage = InMemoryTransactionStorage()
        transaction = storage.add_transaction(make_transaction())
        with pytest.raises(DuplicateError):
            storage.add_transaction(transaction)
        assert len(storage) == 1

    def test_get(self, make_transaction):
        storage = InMemoryTransactionStorage()
        transaction = storage.add_transaction(make_transaction())
        assert storage.get_transaction(transaction.id) == transaction
        assert storage.get_transaction(uuid4()) is None

    def test_update_replaces_in_place(self, make_transaction):
        storage = InMemoryTransactionStorage()
        older = storage.add_transaction(make_transaction("1"))
        storage.add_transaction(make_transaction("2"))

        replacement = older.model_copy(update={"description": "Toner"})
        assert storage.update_transaction(replacement) is True

        listed = storage.list_transactions()
        assert listed[1].id == older.id
        assert listed[1].description == "Toner"

    def test_update_unknown_id_is_noop(self, make_transaction):
        storage = InMemoryTransactionStorage()
        storage.add_transaction(make_transaction())
        before = storage.list_transactions()

        assert storage.update_transaction(make_transaction()) is False
        assert storage.list_transactions() == before

    def test_delete(self, make_transaction):
        storage = InMemoryTransactionStorage()
        transaction = storage.add_transaction(make_transaction())
        assert storage.delete_transaction(transaction.id) is True
        assert len(storage) == 0
        assert storage.delete_transaction(transaction.id) is False

    def test_list_is_a_copy(self, make_transaction):
        storage = InMemoryTransactionStorage()
        storage.add_transaction(make_transaction())
        listed = storage.list_transactions()
        listed.clear()
        assert len(storage) == 1

    def test_empty_storage_is_falsy(self):
        assert not InMemoryTransactionStorage()

    def test_seed_keeps_order(self):
        seed = sample_transactions()
        storage = InMemoryTransactionStorage(seed)
        assert storage.list_transactions() == seed

    def test_seed_rejects_duplicates(self, make_transaction):
        transaction = make_transaction()
        with pytest.raises(DuplicateError):
            InMemoryTransactionStorage([transaction, transaction])


class TestSampleTransactions:

    def test_fresh_ids_per_call(self):
        first = {t.id for t in sample_transactions()}
        second = {t.id for t in sample_transactions()}
        assert first.isdisjoint(second)

    def test_contents(self):
        ledger = sample_transactions()
        assert [t.bill_number for t in ledger] == ["DEP-001", "INV-102", "TEL-55"]
        assert ledger[0].is_deposit
        assert all(t.invoice_image is None for t in ledger)
