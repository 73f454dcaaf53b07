"""
Event Models for the Petty-Cash Ledger

Significant actions are emitted as structured log events. This provides:
1. Traceability while debugging a session
2. A consistent shape for every log line
3. Correlation of the events that belong to one user action

These events go to the log stream only. The ledger keeps no history of
edits or deletes.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class LedgerEventType(str, Enum):
    """Types of events we log."""
    # Ledger mutations
    TRANSACTION_CREATED = "transaction_created"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"
    LOOKUP_MISSED = "lookup_missed"

    # Form handling
    VALIDATION_FAILED = "validation_failed"

    # Receipts
    RECEIPT_ATTACHED = "receipt_attached"
    RECEIPT_REJECTED = "receipt_rejected"
    RECEIPT_DISCARDED = "receipt_discarded"

    # Insights
    INSIGHTS_FAILED = "insights_failed"

    # Reports
    REPORT_GENERATED = "report_generated"

    # System events
    SYSTEM_ERROR = "system_error"


class EventSeverity(str, Enum):
    """Severity level for events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LedgerEvent(BaseModel):
    """A single log event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: LedgerEventType = Field(
        ...,
        description="Type of event"
    )
    severity: EventSeverity = Field(
        default=EventSeverity.INFO,
        description="Event severity"
    )

    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'receipt', 'report')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID shared by all events of one user action"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered directly by the user?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class LedgerEventBuilder:
    """
    Helper class to build events with common patterns.

    Usage:
        event = LedgerEventBuilder.transaction_created(txn_id, "Expense", "1500", cid)
        event = LedgerEventBuilder.receipt_rejected("too_large", "Image too large", cid)
    """

    @staticmethod
    def transaction_created(
        transaction_id: UUID,
        transaction_type: str,
        amount: str,
        correlation_id: Optional[UUID] = None
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.TRANSACTION_CREATED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"{transaction_type} recorded: {amount}",
            details={
                "type": transaction_type,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_updated(
        transaction_id: UUID,
        changed_fields: list[str],
        correlation_id: Optional[UUID] = None
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.TRANSACTION_UPDATED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction updated ({len(changed_fields)} fields changed)",
            details={
                "changed_fields": changed_fields,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_deleted(
        transaction_id: UUID,
        correlation_id: Optional[UUID] = None
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description="Transaction deleted",
            is_user_action=True,
        )

    @staticmethod
    def lookup_missed(
        transaction_id: UUID,
        operation: str,
        correlation_id: Optional[UUID] = None
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LOOKUP_MISSED,
            severity=EventSeverity.WARNING,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"{operation.capitalize()} ignored: transaction not found",
            details={
                "operation": operation,
            },
        )

    @staticmethod
    def validation_failed(
        issues: list[dict],
        correlation_id: Optional[UUID] = None
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.VALIDATION_FAILED,
            severity=EventSeverity.WARNING,
            entity_type="form",
            correlation_id=correlation_id,
            description=f"Form rejected with {len(issues)} issues",
            details={
                "issues": issues,
            },
            is_user_action=True,
        )

    @staticmethod
    def receipt_attached(
        size_bytes: int,
        mime_type: str,
        correlation_id: Optional[UUID] = None
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.RECEIPT_ATTACHED,
            entity_type="receipt",
            correlation_id=correlation_id,
            description="Receipt image attached to form",
            details={
                "size_bytes": size_bytes,
                "mime_type": mime_type,
            },
            is_user_action=True,
        )

    @staticmethod
    def receipt_rejected(
        reason: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.RECEIPT_REJECTED,
            severity=EventSeverity.WARNING,
            entity_type="receipt",
            correlation_id=correlation_id,
            description=f"Receipt image rejected: {reason}",
            error_message=error_message,
            details={
                "reason": reason,
            },
        )

    @staticmethod
    def receipt_discarded(
        requested_generation: int,
        current_generation: int,
        correlation_id: Optional[UUID] = None
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.RECEIPT_DISCARDED,
            entity_type="receipt",
            correlation_id=correlation_id,
            description="Late receipt read discarded: form changed meanwhile",
            details={
                "requested_generation": requested_generation,
                "current_generation": current_generation,
            },
        )

    @staticmethod
    def insights_failed(
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.INSIGHTS_FAILED,
            severity=EventSeverity.WARNING,
            entity_type="insights",
            correlation_id=correlation_id,
            description="Insight generation failed, fallback message used",
            error_message=error_message,
        )

    @staticmethod
    def report_generated(
        reference: str,
        item_count: int,
        total_amount: str,
        correlation_id: Optional[UUID] = None
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.REPORT_GENERATED,
            # Rendered on every rerun of the Reports page
            severity=EventSeverity.DEBUG,
            entity_type="report",
            correlation_id=correlation_id,
            description=f"Settlement report {reference} generated",
            details={
                "reference": reference,
                "item_count": item_count,
                "total_amount": total_amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.SYSTEM_ERROR,
            severity=EventSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
