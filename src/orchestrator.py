"""
Main Orchestrator for the Petty-Cash Ledger

This module ties together all the components and defines every event
handler the UI can trigger:
1. Entry form (fill → attach receipt → validate → create or update)
2. Row actions (edit, delete with confirmation, view receipt)
3. Derived views (dashboard, search list, settlement report)
4. AI insights (one request per click)

DESIGN DECISION: LedgerSession is the ONE owned state container.
It holds the ledger storage and the AppState; the front end keeps a single
instance per browser session and calls its methods. After ANY mutation,
views() recomputes every derived view from the current snapshot, so
nothing shown can lag behind the ledger.
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from src.agents import INSIGHTS_FALLBACK, InsightAgent
from src.config import AppSettings, get_settings
from src.events import EventLogger, create_correlation_id
from src.models.state import AppState, Notice, Page
from src.models.transaction import Transaction, TransactionForm
from src.models.views import LedgerViews, SettlementReport
from src.queries import build_views
from src.reports import build_settlement_report, format_amount
from src.services.image import (
    ReceiptError,
    ReceiptImageService,
    ReceiptTooLargeError,
)
from src.services.storage import (
    InMemoryTransactionStorage,
    TransactionStorageInterface,
    sample_transactions,
)
from src.validation import TransactionValidator


MSG_ADDED = "Added Successfully / تم الحفظ بنجاح"
MSG_UPDATED = "Record Updated / تم التحديث"
MSG_DELETED = "Deleted / تم الحذف"
MSG_RECEIPT_CAPTURED = "Invoice Captured / تم التقاط الفاتورة"


class LedgerSession:
    """
    One user's ledger plus the UI state around it.

    Every public method is an event handler. Handlers run to completion
    before the next user action; the only awaits are the receipt read and
    the insight request.
    """

    def __init__(
        self,
        storage: Optional[TransactionStorageInterface] = None,
        validator: Optional[TransactionValidator] = None,
        receipt_service: Optional[ReceiptImageService] = None,
        insight_agent: Optional[InsightAgent] = None,
        event_logger: Optional[EventLogger] = None,
        settings: Optional[AppSettings] = None,
        state: Optional[AppState] = None,
    ):
        self._settings = settings or get_settings().app

        # An empty storage is falsy (__len__), so compare against None
        if storage is None:
            seed = sample_transactions() if self._settings.seed_sample_data else None
            storage = InMemoryTransactionStorage(seed)
        self._storage = storage

        self._validator = validator or TransactionValidator(self._settings)
        self._receipts = receipt_service or ReceiptImageService(self._settings)
        self._insight_agent = insight_agent
        self._events = event_logger or EventLogger()
        self.state = state or AppState()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @property
    def transactions(self) -> list[Transaction]:
        return self._storage.list_transactions()

    def get_transaction(self, transaction_id: UUID) -> Optional[Transaction]:
        return self._storage.get_transaction(transaction_id)

    def views(self) -> LedgerViews:
        """Every derived view, computed fresh from the current ledger."""
        return build_views(
            self._storage.list_transactions(),
            search_query=self.state.search_query,
            date_from=self.state.report_date_from,
            date_to=self.state.report_date_to,
        )

    def settlement_report(self, now: Optional[datetime] = None) -> SettlementReport:
        """Settlement report for the currently selected period and title."""
        report = build_settlement_report(
            self._storage.list_transactions(),
            date_from=self.state.report_date_from,
            date_to=self.state.report_date_to,
            title=self.state.report_title,
            now=now,
        )
        self._events.log_report_generated(
            reference=report.reference,
            item_count=report.summary.item_count,
            total_amount=format_amount(report.summary.total_amount),
        )
        return report

    # -------------------------------------------------------------------------
    # Notices
    # -------------------------------------------------------------------------

    def _notify(self, message: str, kind: str = "success") -> None:
        self.state.notice = Notice(message=message, kind=kind)

    def current_notice(self, now: Optional[datetime] = None) -> Optional[Notice]:
        """The active notice, dropping it once it has expired."""
        notice = self.state.notice
        if notice and notice.is_expired(self._settings.notice_seconds, now):
            self.state.notice = None
            return None
        return notice

    def take_notice(self) -> Optional[Notice]:
        """Return the pending notice once and clear it."""
        notice = self.current_notice()
        self.state.notice = None
        return notice

    # -------------------------------------------------------------------------
    # Navigation and filters
    # -------------------------------------------------------------------------

    def navigate(self, page: Page) -> None:
        self.state.active_page = page

    def set_search_query(self, query: str) -> None:
        self.state.search_query = query

    def set_report_period(self, date_from: date, date_to: date) -> None:
        # A reversed range is allowed; the report is then simply empty
        self.state.report_date_from = date_from
        self.state.report_date_to = date_to

    def set_report_title(self, title: str) -> None:
        self.state.report_title = title

    # -------------------------------------------------------------------------
    # Entry form
    # -------------------------------------------------------------------------

    def _next_generation(self) -> int:
        return self.state.form.generation + 1

    def reset_form(self) -> None:
        """Blank form. Any receipt read still in flight is now stale."""
        self.state.form = TransactionForm(generation=self._next_generation())

    def update_form(self, **fields) -> None:
        """Copy widget values into the form."""
        if "generation" in fields:
            raise ValueError("Form generation is managed by the session")
        self.state.form = self.state.form.model_copy(update=fields)

    async def attach_receipt(
        self,
        image_bytes: bytes,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """
        Read a receipt image into the form.

        The form generation is captured BEFORE the read. If the form was
        submitted, reset or switched to another record while the read was
        in flight, the result is discarded.

        Returns True if the receipt was attached.
        """
        correlation_id = correlation_id or create_correlation_id()
        requested_generation = self.state.form.generation

        try:
            self._receipts.check_size(len(image_bytes))
            payload = await self._receipts.load_receipt(image_bytes)
        except ReceiptError as e:
            reason = "too_large" if isinstance(e, ReceiptTooLargeError) else "unsupported"
            self._events.log_receipt_rejected(
                reason=reason,
                error_message=str(e),
                correlation_id=correlation_id,
            )
            self._notify(str(e), "error")
            return False

        if requested_generation != self.state.form.generation:
            self._events.log_receipt_discarded(
                requested_generation=requested_generation,
                current_generation=self.state.form.generation,
                correlation_id=correlation_id,
            )
            return False

        self.state.form = self.state.form.model_copy(update={"invoice_image": payload})
        self._events.log_receipt_attached(
            size_bytes=len(image_bytes),
            mime_type=self._receipts.mime_type_of(payload),
            correlation_id=correlation_id,
        )
        self._notify(MSG_RECEIPT_CAPTURED)
        return True

    def is_new_upload(self, name: str, size: int) -> bool:
        """
        True the first time a given file is offered to the current form.

        The uploader widget hands back the same file on every rerun; only
        the first sighting per form generation should be read.
        """
        key = f"{self.state.form.generation}:{name}:{size}"
        if self.state.last_upload_key == key:
            return False
        self.state.last_upload_key = key
        return True

    def clear_receipt(self) -> None:
        self.state.form = self.state.form.model_copy(update={"invoice_image": None})

    def submit_form(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> Optional[Transaction]:
        """
        Save the form: create a new record, or update the one being edited.

        On validation failure an error notice is raised and the ledger is
        untouched. Returns the saved transaction, or None.
        """
        correlation_id = correlation_id or create_correlation_id()
        form = self.state.form

        result = self._validator.validate(form)
        if not result.is_valid:
            self._events.log_validation_failed(
                issues=[issue.model_dump() for issue in result.issues],
                correlation_id=correlation_id,
            )
            self._notify(self._validator.get_user_message(result), "error")
            return None

        fields = {
            "date": form.date,
            "description": form.description,
            "amount": result.amount,
            "bill_number": form.bill_number,
            "category": form.category,
            "type": form.type,
            "invoice_image": form.invoice_image,
        }

        if self.state.editing_id is not None:
            saved = self._apply_edit(self.state.editing_id, fields, correlation_id)
            self.state.editing_id = None
            if saved is not None:
                self._notify(MSG_UPDATED)
        else:
            saved = self._storage.add_transaction(Transaction(**fields))
            self._notify(MSG_ADDED)
            self._events.log_transaction_created(
                transaction_id=saved.id,
                transaction_type=saved.type.value,
                amount=format_amount(saved.amount),
                correlation_id=correlation_id,
            )

        self.reset_form()
        return saved

    def _apply_edit(
        self,
        transaction_id: UUID,
        fields: dict,
        correlation_id: UUID,
    ) -> Optional[Transaction]:
        existing = self._storage.get_transaction(transaction_id)
        if existing is None:
            self._events.log_lookup_missed(transaction_id, "update", correlation_id)
            return None

        updated = Transaction(id=existing.id, **fields)
        if not self._storage.update_transaction(updated):
            self._events.log_lookup_missed(transaction_id, "update", correlation_id)
            return None

        changed = [name for name in fields if getattr(existing, name) != getattr(updated, name)]
        self._events.log_transaction_updated(
            transaction_id=transaction_id,
            changed_fields=changed,
            correlation_id=correlation_id,
        )
        return updated

    # -------------------------------------------------------------------------
    # Row actions
    # -------------------------------------------------------------------------

    def start_edit(self, transaction_id: UUID) -> bool:
        """Load a record into the form. Unknown ids are ignored."""
        transaction = self._storage.get_transaction(transaction_id)
        if transaction is None:
            self._events.log_lookup_missed(transaction_id, "edit")
            return False

        self.state.editing_id = transaction_id
        self.state.confirm_delete_id = None
        self.state.form = TransactionForm.from_transaction(
            transaction, generation=self._next_generation()
        )
        return True

    def cancel_edit(self) -> None:
        self.state.editing_id = None
        self.reset_form()

    def request_delete(self, transaction_id: UUID) -> None:
        """First click on delete: ask for confirmation."""
        self.state.confirm_delete_id = transaction_id

    def cancel_delete(self) -> None:
        self.state.confirm_delete_id = None

    def confirm_delete(
        self,
        transaction_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """
        Delete a record. Unknown ids are a silent no-op.

        If the record was being edited, the edit is abandoned and the form
        reset, so a later submit cannot resurrect it as a new record.
        """
        correlation_id = correlation_id or create_correlation_id()
        removed = self._storage.delete_transaction(transaction_id)

        if self.state.confirm_delete_id == transaction_id:
            self.state.confirm_delete_id = None
        if self.state.viewing_receipt_id == transaction_id:
            self.state.viewing_receipt_id = None
        if self.state.editing_id == transaction_id:
            self.state.editing_id = None
            self.reset_form()

        if not removed:
            self._events.log_lookup_missed(transaction_id, "delete", correlation_id)
            return False

        self._events.log_transaction_deleted(transaction_id, correlation_id)
        self._notify(MSG_DELETED)
        return True

    def view_receipt(self, transaction_id: UUID) -> None:
        self.state.viewing_receipt_id = transaction_id

    def close_receipt(self) -> None:
        self.state.viewing_receipt_id = None

    def receipt_bytes(self, transaction_id: UUID) -> Optional[bytes]:
        """Raw image of a record's receipt, or None if there is none."""
        transaction = self._storage.get_transaction(transaction_id)
        if transaction is None or not transaction.invoice_image:
            return None
        try:
            return self._receipts.decode_receipt(transaction.invoice_image)
        except ReceiptError as e:
            self._events.log_error("receipt_decode", str(e))
            return None

    # -------------------------------------------------------------------------
    # AI insights
    # -------------------------------------------------------------------------

    def _get_insight_agent(self) -> InsightAgent:
        if self._insight_agent is None:
            self._insight_agent = InsightAgent(currency=self._settings.currency)
        return self._insight_agent

    async def generate_insights(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> str:
        """
        Ask Gemini for insights on the current ledger.

        Reads the ledger, never mutates it. Concurrent clicks are not
        de-duplicated.
        """
        correlation_id = correlation_id or create_correlation_id()
        self.state.is_ai_loading = True
        try:
            text = await self._get_insight_agent().generate_insights(
                self._storage.list_transactions()
            )
        finally:
            self.state.is_ai_loading = False

        if text == INSIGHTS_FALLBACK:
            self._events.log_insights_failed(
                error_message="Fallback message returned",
                correlation_id=correlation_id,
            )
        self.state.insights = text
        return text


def create_ledger_session(
    seed_sample_data: Optional[bool] = None,
) -> LedgerSession:
    """
    Factory function to create a session with default components.

    Args:
        seed_sample_data: Override APP_SEED_SAMPLE_DATA for this session.
    """
    settings = get_settings().app
    if seed_sample_data is not None:
        settings = settings.model_copy(update={"seed_sample_data": seed_sample_data})
    return LedgerSession(settings=settings)
