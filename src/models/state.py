"""
Application State

DESIGN DECISION: All UI state lives in ONE explicit container.
Nothing is kept in module-level globals. The Streamlit front end keeps a
single LedgerSession (which owns an AppState) in st.session_state.
"""

import datetime as dt
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from src.models.transaction import TransactionForm
from src.models.views import DEFAULT_REPORT_TITLE


class Page(str, Enum):
    """Top-level pages of the app."""
    DASHBOARD = "dashboard"
    TRANSACTIONS = "transactions"
    REPORTS = "reports"
    SETTINGS = "settings"


class Notice(BaseModel):
    """A transient, user-visible message (toast)."""

    message: str
    kind: str = Field(
        default="success",
        pattern="^(success|error)$"
    )
    created_at: dt.datetime = Field(
        default_factory=dt.datetime.utcnow
    )

    def is_expired(self, seconds: int, now: Optional[dt.datetime] = None) -> bool:
        now = now or dt.datetime.utcnow()
        return (now - self.created_at).total_seconds() >= seconds


def first_of_month(today: Optional[dt.date] = None) -> dt.date:
    """Default start of the settlement period."""
    today = today or dt.date.today()
    return today.replace(day=1)


class AppState(BaseModel):
    """Everything the UI needs besides the ledger itself."""

    active_page: Page = Page.DASHBOARD
    search_query: str = ""

    # Entry form
    form: TransactionForm = Field(default_factory=TransactionForm)
    editing_id: Optional[UUID] = None
    # "<generation>:<name>:<size>" of the last receipt file read into the form
    last_upload_key: Optional[str] = None

    # Row actions
    confirm_delete_id: Optional[UUID] = None
    viewing_receipt_id: Optional[UUID] = None

    notice: Optional[Notice] = None

    # Insights panel
    insights: Optional[str] = None
    is_ai_loading: bool = False

    # Settlement report controls
    report_title: str = DEFAULT_REPORT_TITLE
    report_date_from: dt.date = Field(default_factory=first_of_month)
    report_date_to: dt.date = Field(default_factory=dt.date.today)
