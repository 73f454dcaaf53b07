"""
Derived Views of the Ledger

DESIGN DECISION: Every figure the UI shows is COMPUTED from the current
ledger snapshot on each read. Nothing here keeps state, caches, or
mutates its input. That way balance and totals can never drift from the
records they summarize.

All functions take any iterable of transactions and are safe to call on
the list returned by storage.list_transactions().
"""

from datetime import date
from decimal import Decimal
from typing import Iterable

from src.models.transaction import Transaction
from src.models.views import LedgerStats, LedgerViews, SettlementSummary


def has_receipt(transaction: Transaction) -> bool:
    """
    Whether a receipt image is on file for this transaction.

    This is the ONE predicate for "receipt attached". The settlement
    report and the insight prompt both count receipts through it.
    """
    return bool(transaction.invoice_image)


def calculate_stats(transactions: Iterable[Transaction]) -> LedgerStats:
    """Totals for the dashboard cards."""
    total_budget = Decimal("0")
    total_expenses = Decimal("0")
    count = 0

    for transaction in transactions:
        count += 1
        if transaction.is_deposit:
            total_budget += transaction.amount
        elif transaction.is_expense:
            total_expenses += transaction.amount

    return LedgerStats(
        total_budget=total_budget,
        total_expenses=total_expenses,
        balance=total_budget - total_expenses,
        count=count,
    )


def category_totals(transactions: Iterable[Transaction]) -> dict[str, Decimal]:
    """
    Expense amount per category.

    Deposits are ignored. A category whose expenses add up to zero is
    left out entirely. Key order is first appearance, but callers should
    treat the result as unordered.
    """
    totals: dict[str, Decimal] = {}
    for transaction in transactions:
        if not transaction.is_expense:
            continue
        totals[transaction.category] = (
            totals.get(transaction.category, Decimal("0")) + transaction.amount
        )
    return {category: total for category, total in totals.items() if total != 0}


def matches_query(transaction: Transaction, query: str) -> bool:
    """Case-insensitive substring match on description, bill number or category."""
    needle = query.lower()
    return (
        needle in transaction.description.lower()
        or needle in transaction.bill_number.lower()
        or needle in transaction.category.lower()
    )


def search_transactions(
    transactions: Iterable[Transaction],
    query: str = "",
) -> list[Transaction]:
    """
    Records matching the search box, most recent first.

    An empty query matches everything. Records on the same date keep
    their ledger order (the sort is stable), but nothing should rely on it.
    """
    matches = [t for t in transactions if matches_query(t, query)]
    return sorted(matches, key=lambda t: t.date, reverse=True)


def settlement_summary(
    transactions: Iterable[Transaction],
    date_from: date,
    date_to: date,
) -> SettlementSummary:
    """
    Expenses between date_from and date_to, both inclusive, oldest first.

    A reversed range (date_from after date_to) is not an error; it simply
    matches nothing.
    """
    expenses = sorted(
        (
            t for t in transactions
            if t.is_expense and date_from <= t.date <= date_to
        ),
        key=lambda t: t.date,
    )

    return SettlementSummary(
        date_from=date_from,
        date_to=date_to,
        expenses=expenses,
        total_amount=sum((t.amount for t in expenses), Decimal("0")),
        total_invoices=sum(1 for t in expenses if has_receipt(t)),
    )


def build_views(
    transactions: Iterable[Transaction],
    search_query: str,
    date_from: date,
    date_to: date,
) -> LedgerViews:
    """Recompute every derived view from one snapshot."""
    snapshot = list(transactions)
    return LedgerViews(
        stats=calculate_stats(snapshot),
        category_totals=category_totals(snapshot),
        transactions=search_transactions(snapshot, search_query),
        settlement=settlement_summary(snapshot, date_from, date_to),
    )
