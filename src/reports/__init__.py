"""Reports and charts package."""

from src.reports.charts import category_bar_chart
from src.reports.settlement import (
    EMPTY_STATE_MESSAGE,
    SIGNATURE_BLOCKS,
    build_settlement_report,
    format_amount,
    make_reference,
    render_settlement_html,
)

__all__ = [
    "EMPTY_STATE_MESSAGE",
    "SIGNATURE_BLOCKS",
    "build_settlement_report",
    "category_bar_chart",
    "format_amount",
    "make_reference",
    "render_settlement_html",
]
