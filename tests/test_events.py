"""Tests for structured event logging."""

from uuid import uuid4

from src.events import EventLogger, create_correlation_id
from src.models.events import (
    EventSeverity,
    LedgerEvent,
    LedgerEventBuilder,
    LedgerEventType,
)


class TestLedgerEvents:
    """Tests for event models."""

    def test_event_creation(self):
        """Test LedgerEvent creation."""
        event = LedgerEvent(
            event_type=LedgerEventType.TRANSACTION_CREATED,
            description="Expense recorded",
        )
        assert event.event_id is not None
        assert event.timestamp is not None
        assert event.severity == EventSeverity.INFO

    def test_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        entity_id = uuid4()
        event = LedgerEvent(
            event_type=LedgerEventType.TRANSACTION_DELETED,
            entity_id=entity_id,
            description="Transaction deleted",
        )
        log_dict = event.to_log_dict()

        assert log_dict["event_type"] == "transaction_deleted"
        assert log_dict["entity_id"] == str(entity_id)
        assert log_dict["correlation_id"] is None

    def test_builder_transaction_created(self):
        correlation_id = create_correlation_id()
        transaction_id = uuid4()
        event = LedgerEventBuilder.transaction_created(
            transaction_id=transaction_id,
            transaction_type="Expense",
            amount="1,500",
            correlation_id=correlation_id,
        )
        assert event.entity_id == transaction_id
        assert event.correlation_id == correlation_id
        assert event.details == {"type": "Expense", "amount": "1,500"}
        assert event.is_user_action

    def test_builder_lookup_missed_is_warning(self):
        event = LedgerEventBuilder.lookup_missed(uuid4(), "delete")
        assert event.severity == EventSeverity.WARNING
        assert event.description == "Delete ignored: transaction not found"

    def test_builder_receipt_rejected(self):
        event = LedgerEventBuilder.receipt_rejected("too_large", "Image too large (>2MB)")
        assert event.event_type == LedgerEventType.RECEIPT_REJECTED
        assert event.error_message == "Image too large (>2MB)"
        assert event.details["reason"] == "too_large"

    def test_builder_report_generated_is_debug(self):
        event = LedgerEventBuilder.report_generated("SET-123456", 2, "2,150")
        assert event.severity == EventSeverity.DEBUG
        assert event.details["reference"] == "SET-123456"


class TestEventLogger:

    def test_session_id(self):
        session_id = uuid4()
        assert EventLogger(session_id).session_id == session_id
        assert EventLogger().session_id != EventLogger().session_id

    def test_log_returns_true(self):
        logger = EventLogger()
        event = LedgerEventBuilder.system_error("receipt_decode", "bad payload")
        assert logger.log(event) is True

    def test_helpers_do_not_raise(self):
        logger = EventLogger()
        transaction_id = uuid4()
        logger.log_transaction_created(transaction_id, "Deposit", "20,000")
        logger.log_transaction_updated(transaction_id, ["amount"])
        logger.log_transaction_deleted(transaction_id)
        logger.log_lookup_missed(transaction_id, "update")
        logger.log_validation_failed([{"field": "amount"}])
        logger.log_receipt_attached(1024, "image/png")
        logger.log_receipt_rejected("unsupported", "File is not a readable image")
        logger.log_receipt_discarded(1, 2)
        logger.log_insights_failed("timeout")
        logger.log_report_generated("SET-000001", 0, "0")
        logger.log_error("test", "message")

    def test_oversized_description_is_dropped(self):
        """An event the model rejects is reported as not written."""
        logger = EventLogger()
        written = logger.log_transaction_created(uuid4(), "Deposit", "9" * 600)
        assert written is False

    def test_failing_builder_does_not_raise(self, monkeypatch):
        def broken_builder(**kwargs):
            raise ValueError("cannot build event")

        monkeypatch.setattr(
            LedgerEventBuilder, "transaction_created", staticmethod(broken_builder)
        )
        logger = EventLogger()
        assert logger.log_transaction_created(uuid4(), "Expense", "10") is False
        assert logger.log_transaction_deleted(uuid4()) is True
