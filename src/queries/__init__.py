"""Derived ledger views package."""

from src.queries.views import (
    build_views,
    calculate_stats,
    category_totals,
    has_receipt,
    matches_query,
    search_transactions,
    settlement_summary,
)

__all__ = [
    "build_views",
    "calculate_stats",
    "category_totals",
    "has_receipt",
    "matches_query",
    "search_transactions",
    "settlement_summary",
]
