"""
Data Models Package

This package contains all Pydantic models used by the petty-cash ledger.
All data flowing through the system must conform to these schemas.
"""

from src.models.transaction import (
    DEFAULT_CATEGORIES,
    DEFAULT_CATEGORY,
    Transaction,
    TransactionForm,
    TransactionType,
    ValidationIssue,
    ValidationResult,
)
from src.models.views import (
    DEFAULT_REPORT_TITLE,
    LedgerStats,
    LedgerViews,
    SettlementReport,
    SettlementSummary,
)
from src.models.state import AppState, Notice, Page
from src.models.events import (
    EventSeverity,
    LedgerEvent,
    LedgerEventBuilder,
    LedgerEventType,
)

__all__ = [
    # Transaction models
    "DEFAULT_CATEGORIES",
    "DEFAULT_CATEGORY",
    "Transaction",
    "TransactionForm",
    "TransactionType",
    "ValidationIssue",
    "ValidationResult",
    # Derived views
    "DEFAULT_REPORT_TITLE",
    "LedgerStats",
    "LedgerViews",
    "SettlementReport",
    "SettlementSummary",
    # UI state
    "AppState",
    "Notice",
    "Page",
    # Event models
    "EventSeverity",
    "LedgerEvent",
    "LedgerEventBuilder",
    "LedgerEventType",
]
