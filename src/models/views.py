"""
Derived-Data Models

Everything here is COMPUTED from the ledger on demand and never stored
independently. See src/queries/views.py for the functions that build them.
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field

from src.models.transaction import Transaction


DEFAULT_REPORT_TITLE = "3ohda Settlement Report / تقرير تسوية العهدة"


class LedgerStats(BaseModel):
    """Headline figures shown on the dashboard."""

    total_budget: Decimal = Field(
        default=Decimal("0"),
        description="Sum of all deposits"
    )
    total_expenses: Decimal = Field(
        default=Decimal("0"),
        description="Sum of all expenses"
    )
    balance: Decimal = Field(
        default=Decimal("0"),
        description="Deposits minus expenses (may be negative)"
    )
    count: int = Field(
        default=0,
        ge=0,
        description="Number of records, deposits and expenses"
    )


class SettlementSummary(BaseModel):
    """
    Expenses inside a settlement period.

    Expenses are ordered oldest first, because settlement reports read
    chronologically.
    """

    date_from: dt.date
    date_to: dt.date
    expenses: list[Transaction] = Field(default_factory=list)
    total_amount: Decimal = Decimal("0")
    total_invoices: int = Field(
        default=0,
        ge=0,
        description="How many of the expenses have a receipt attached"
    )

    @property
    def item_count(self) -> int:
        return len(self.expenses)

    @property
    def is_empty(self) -> bool:
        return not self.expenses


class LedgerViews(BaseModel):
    """All derived views, recomputed together from one ledger snapshot."""

    stats: LedgerStats
    category_totals: dict[str, Decimal] = Field(default_factory=dict)
    transactions: list[Transaction] = Field(
        default_factory=list,
        description="Search results, most recent first"
    )
    settlement: SettlementSummary


class SettlementReport(BaseModel):
    """A settlement summary dressed up for printing and sign-off."""

    title: str = Field(
        default=DEFAULT_REPORT_TITLE,
        max_length=200
    )
    reference: str = Field(
        ...,
        pattern=r"^SET-\d{6}$",
        description="Reference code derived from the generation timestamp"
    )
    generated_at: dt.datetime
    summary: SettlementSummary
