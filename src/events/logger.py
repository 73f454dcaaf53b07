"""
Event Logger

Every significant action in the ledger is logged as a structured event.
This provides:
1. Traceability of a session while debugging
2. Correlation IDs to tie together the events of one user action

The event logger:
- Is synchronous, like the ledger operations that call it
- Gracefully handles failures (doesn't crash the app if logging fails)
- Only writes to the log stream; nothing is persisted or replayable
"""

from typing import Callable, Optional
from uuid import UUID, uuid4

import structlog

from src.models.events import LedgerEvent, LedgerEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class EventLogger:
    """
    Central event logging service.

    All events go to the structured local log. Every line carries the
    session_id bound at construction; correlation IDs travel on the
    events themselves.

    The log_* helpers build the event inside the guarded section, so a
    value the event model rejects is dropped instead of raised.
    """

    def __init__(self, session_id: Optional[UUID] = None):
        self._session_id = session_id or uuid4()
        self._logger = structlog.get_logger("src.events").bind(
            session_id=str(self._session_id)
        )

    @property
    def session_id(self) -> UUID:
        return self._session_id

    def log(self, event: LedgerEvent) -> bool:
        """
        Log an event.

        Returns True if the event was written.
        """
        try:
            log_dict = event.to_log_dict()

            if event.severity.value == "error":
                self._logger.error("ledger_event", **log_dict)
            elif event.severity.value == "warning":
                self._logger.warning("ledger_event", **log_dict)
            elif event.severity.value == "debug":
                self._logger.debug("ledger_event", **log_dict)
            else:
                self._logger.info("ledger_event", **log_dict)
        except Exception:
            # Logging must never take the UI down
            return False

        return True

    def _build_and_log(self, builder: Callable[..., LedgerEvent], **kwargs) -> bool:
        """Build an event with one of the LedgerEventBuilder helpers and log it."""
        try:
            event = builder(**kwargs)
        except Exception:
            return False
        return self.log(event)

    def log_transaction_created(
        self,
        transaction_id: UUID,
        transaction_type: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """Log a new ledger entry."""
        return self._build_and_log(
            LedgerEventBuilder.transaction_created,
            transaction_id=transaction_id,
            transaction_type=transaction_type,
            amount=amount,
            correlation_id=correlation_id,
        )

    def log_transaction_updated(
        self,
        transaction_id: UUID,
        changed_fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        return self._build_and_log(
            LedgerEventBuilder.transaction_updated,
            transaction_id=transaction_id,
            changed_fields=changed_fields,
            correlation_id=correlation_id,
        )

    def log_transaction_deleted(
        self,
        transaction_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        return self._build_and_log(
            LedgerEventBuilder.transaction_deleted,
            transaction_id=transaction_id,
            correlation_id=correlation_id,
        )

    def log_lookup_missed(
        self,
        transaction_id: UUID,
        operation: str,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """Log an update/delete aimed at an id that is not in the ledger."""
        return self._build_and_log(
            LedgerEventBuilder.lookup_missed,
            transaction_id=transaction_id,
            operation=operation,
            correlation_id=correlation_id,
        )

    def log_validation_failed(
        self,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        return self._build_and_log(
            LedgerEventBuilder.validation_failed,
            issues=issues,
            correlation_id=correlation_id,
        )

    def log_receipt_attached(
        self,
        size_bytes: int,
        mime_type: str,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        return self._build_and_log(
            LedgerEventBuilder.receipt_attached,
            size_bytes=size_bytes,
            mime_type=mime_type,
            correlation_id=correlation_id,
        )

    def log_receipt_rejected(
        self,
        reason: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        return self._build_and_log(
            LedgerEventBuilder.receipt_rejected,
            reason=reason,
            error_message=error_message,
            correlation_id=correlation_id,
        )

    def log_receipt_discarded(
        self,
        requested_generation: int,
        current_generation: int,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        return self._build_and_log(
            LedgerEventBuilder.receipt_discarded,
            requested_generation=requested_generation,
            current_generation=current_generation,
            correlation_id=correlation_id,
        )

    def log_insights_failed(
        self,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        return self._build_and_log(
            LedgerEventBuilder.insights_failed,
            error_message=error_message,
            correlation_id=correlation_id,
        )

    def log_report_generated(
        self,
        reference: str,
        item_count: int,
        total_amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        return self._build_and_log(
            LedgerEventBuilder.report_generated,
            reference=reference,
            item_count=item_count,
            total_amount=total_amount,
            correlation_id=correlation_id,
        )

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """Log an error."""
        return self._build_and_log(
            LedgerEventBuilder.system_error,
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., a form submit).
    Pass it through all subsequent operations.
    """
    return uuid4()
