"""
Settlement Report

Builds the printable reimbursement document for a date range:
title, period, reference code, total, item and receipt counts, the
line-item table, and three signature blocks.

The output is one self-contained HTML page. Printing goes through the
browser's own print dialog, so there is no PDF or other file format here.
"""

import time
from datetime import date, datetime
from decimal import Decimal
from html import escape
from typing import Iterable, Optional

from src.models.transaction import Transaction
from src.models.views import DEFAULT_REPORT_TITLE, SettlementReport
from src.queries.views import has_receipt, settlement_summary


SIGNATURE_BLOCKS: tuple[tuple[str, str], ...] = (
    ("Prepared By / العهدة طرف", "Signature"),
    ("Verified By / المراجع المالي", "Reviewer"),
    ("Approved By / المدير المالي", "Final Approval"),
)

EMPTY_STATE_MESSAGE = "No expenses found for this period"


def make_reference(timestamp_ms: Optional[int] = None) -> str:
    """SET- followed by the last six digits of a millisecond timestamp."""
    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000
    return f"SET-{str(timestamp_ms)[-6:].zfill(6)}"


def build_settlement_report(
    transactions: Iterable[Transaction],
    date_from: date,
    date_to: date,
    title: str = DEFAULT_REPORT_TITLE,
    now: Optional[datetime] = None,
) -> SettlementReport:
    """Run the settlement filter and stamp the result with a reference."""
    now = now or datetime.now()
    return SettlementReport(
        title=title.strip() or DEFAULT_REPORT_TITLE,
        reference=make_reference(int(now.timestamp() * 1000)),
        generated_at=now,
        summary=settlement_summary(transactions, date_from, date_to),
    )


def format_amount(amount: Decimal) -> str:
    """Thousands separators, decimals only when there are any."""
    if amount == amount.to_integral_value():
        return f"{amount:,.0f}"
    return f"{amount:,.2f}"


_REPORT_CSS = """
body { font-family: -apple-system, "Segoe UI", Roboto, Arial, sans-serif; color: #0f172a; margin: 0; }
.report { padding: 48px; }
.header { display: flex; justify-content: space-between; align-items: flex-start;
          border-bottom: 4px solid #0f172a; padding-bottom: 32px; margin-bottom: 32px; }
.title { font-size: 26px; font-weight: 900; text-transform: uppercase; margin: 0; }
.subtitle { font-size: 13px; font-weight: 700; color: #64748b; margin: 4px 0 0; }
.meta { font-size: 11px; font-weight: 800; color: #94a3b8; text-transform: uppercase;
        letter-spacing: .08em; margin-top: 12px; }
.meta span { margin-right: 24px; }
.total-box { text-align: center; background: #ecfdf5; color: #047857; border: 2px solid #a7f3d0;
             border-radius: 16px; padding: 12px 24px; }
.total-box .label { font-size: 10px; font-weight: 900; text-transform: uppercase; }
.total-box .value { font-size: 28px; font-weight: 900; }
.counts { font-size: 10px; font-weight: 800; color: #94a3b8; text-transform: uppercase;
          text-align: right; margin-top: 8px; }
table { width: 100%; border-collapse: collapse; }
th { font-size: 10px; color: #94a3b8; text-transform: uppercase; text-align: left;
     padding: 14px 0; border-bottom: 2px solid #e2e8f0; }
td { padding: 14px 0; border-bottom: 1px solid #f1f5f9; font-size: 14px; }
tr { break-inside: avoid; }
.num { text-align: right; font-weight: 900; }
.receipt { display: block; font-size: 9px; font-weight: 900; color: #6366f1; text-transform: uppercase; }
.category { font-size: 10px; font-weight: 800; text-transform: uppercase; background: #f1f5f9;
            border-radius: 999px; padding: 3px 10px; color: #64748b; }
.empty { text-align: center; color: #94a3b8; font-weight: 700; text-transform: uppercase;
         font-size: 12px; padding: 64px 0; }
tfoot td { border-top: 4px solid #0f172a; border-bottom: none; font-weight: 900; padding: 24px 0; }
.signatures { display: grid; grid-template-columns: repeat(3, 1fr); gap: 48px; margin-top: 64px;
              padding-top: 32px; border-top: 1px solid #e2e8f0; text-align: center; }
.signatures .role { font-size: 10px; font-weight: 900; color: #94a3b8; text-transform: uppercase; }
.signatures .line { border-bottom: 2px solid #e2e8f0; width: 75%; margin: 40px auto 12px; }
.signatures .caption { font-size: 12px; font-weight: 900; text-transform: uppercase; }
.print-button { margin: 16px 48px 0; padding: 12px 28px; border: none; border-radius: 12px;
                background: #0f172a; color: #fff; font-weight: 800; cursor: pointer; }
@media print {
  .print-button { display: none; }
  .report { padding: 0; }
  @page { size: A4; margin: 16mm; }
}
"""


def _render_rows(expenses: list[Transaction]) -> str:
    if not expenses:
        return f'<tr><td colspan="4" class="empty">{EMPTY_STATE_MESSAGE}</td></tr>'

    rows = []
    for t in expenses:
        receipt_mark = (
            '<span class="receipt">&#10003; Receipt Archived</span>'
            if has_receipt(t) else ""
        )
        rows.append(
            "<tr>"
            f"<td>{t.date.isoformat()}</td>"
            f"<td><strong>{escape(t.description)}</strong>{receipt_mark}</td>"
            f'<td><span class="category">{escape(t.category)}</span></td>'
            f'<td class="num">{format_amount(t.amount)}</td>'
            "</tr>"
        )
    return "\n".join(rows)


def _render_signatures() -> str:
    blocks = [
        '<div>'
        f'<p class="role">{escape(role)}</p>'
        '<div class="line"></div>'
        f'<p class="caption">{escape(caption)}</p>'
        '</div>'
        for role, caption in SIGNATURE_BLOCKS
    ]
    return '<div class="signatures">' + "".join(blocks) + "</div>"


def render_settlement_html(
    report: SettlementReport,
    currency: str = "EGP",
    include_print_button: bool = True,
) -> str:
    """
    Render the report as a printable HTML page.

    The print button calls window.print() and is hidden in print media.
    """
    summary = report.summary
    total = format_amount(summary.total_amount)
    currency = escape(currency)
    print_button = (
        '<button class="print-button" onclick="window.print()">Print / طباعة</button>'
        if include_print_button else ""
    )

    return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{escape(report.title)}</title>
<style>{_REPORT_CSS}</style>
</head>
<body>
{print_button}
<div class="report" id="printable-report">
  <div class="header">
    <div>
      <h2 class="title">{escape(report.title)}</h2>
      <p class="subtitle">Financial Department / الإدارة المالية</p>
      <div class="meta">
        <span>Period: {summary.date_from.isoformat()} - {summary.date_to.isoformat()}</span>
        <span>Ref: {escape(report.reference)}</span>
      </div>
    </div>
    <div>
      <div class="total-box">
        <div class="label">Total / الإجمالي</div>
        <div class="value">{total} <small>{currency}</small></div>
      </div>
      <p class="counts">{summary.item_count} Items | {summary.total_invoices} Receipts Attached</p>
    </div>
  </div>
  <table>
    <thead>
      <tr>
        <th>Date / التاريخ</th>
        <th>Description / البيان</th>
        <th>Category</th>
        <th class="num">Amount / القيمة</th>
      </tr>
    </thead>
    <tbody>
{_render_rows(summary.expenses)}
    </tbody>
    <tfoot>
      <tr>
        <td colspan="3" class="num">Total Reimbursement Required / إجمالي مبلغ التسوية</td>
        <td class="num">{total} {currency}</td>
      </tr>
    </tfoot>
  </table>
  {_render_signatures()}
</div>
</body>
</html>"""
