"""
Streamlit Frontend for the Petty-Cash Ledger

This is the screen the custodian of a petty-cash float ("3ohda") uses
to record money in and out, attach receipt photos, and print the
settlement report for the finance department.

DESIGN PRINCIPLES:
1. One LedgerSession per browser session holds all state
2. Every button maps to one session handler
3. Every view is recomputed from the ledger on each rerun
4. Visual feedback (toast) for every save, update and delete

Widget keys include the form generation, so loading a record for
editing or resetting the form re-renders the inputs with fresh values.
"""

import asyncio
from datetime import date

import streamlit as st
import streamlit.components.v1 as components

from src.config import get_settings, validate_all_settings
from src.models import DEFAULT_CATEGORIES, Page, TransactionType
from src.orchestrator import LedgerSession, create_ledger_session
from src.queries import has_receipt
from src.reports import category_bar_chart, format_amount, render_settlement_html
from src.services.image import ReceiptImageService


# Page configuration
st.set_page_config(
    page_title="3ohda Manager",
    page_icon="💵",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
    }
    .kpi-box {
        padding: 18px;
        border-radius: 12px;
        margin: 6px 0;
        border-left: 5px solid #6366f1;
        background-color: #eef2ff;
    }
    .kpi-box.expense {
        border-left-color: #f43f5e;
        background-color: #fff1f2;
    }
    .kpi-box.balance {
        border-left-color: #10b981;
        background-color: #ecfdf5;
    }
    .kpi-box.negative {
        border-left-color: #dc3545;
        background-color: #f8d7da;
    }
    .kpi-label {
        font-size: 0.8em;
        text-transform: uppercase;
        color: #64748b;
    }
    .big-number {
        font-size: 2em;
        font-weight: bold;
        color: #2c3e50;
    }
    .deposit-amount { color: #059669; font-weight: bold; }
    .expense-amount { color: #e11d48; font-weight: bold; }
</style>
""", unsafe_allow_html=True)


PAGE_LABELS = {
    Page.DASHBOARD: "📊 Dashboard",
    Page.TRANSACTIONS: "🧾 Transactions",
    Page.REPORTS: "🖨️ Settlement Report",
    Page.SETTINGS: "⚙️ Settings",
}


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def get_session() -> LedgerSession:
    """Get or create this browser session's ledger."""
    if "ledger" not in st.session_state:
        st.session_state.ledger = create_ledger_session()
    return st.session_state.ledger


def show_notice(session: LedgerSession):
    """Flash the pending notice, if any, exactly once."""
    notice = session.take_notice()
    if notice is None:
        return
    icon = "✅" if notice.kind == "success" else "⚠️"
    st.toast(notice.message, icon=icon)


def main():
    """Main application entry point."""
    session = get_session()
    currency = get_settings().app.currency

    show_notice(session)

    # Sidebar navigation
    st.sidebar.title("💵 3ohda Manager")
    st.sidebar.caption("Petty-cash ledger / إدارة العهدة")
    st.sidebar.markdown("---")

    pages = list(PAGE_LABELS)
    page = st.sidebar.radio(
        "Navigate to:",
        pages,
        index=pages.index(session.state.active_page),
        format_func=lambda p: PAGE_LABELS[p],
    )
    if page != session.state.active_page:
        session.navigate(page)

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **How to use:**
        1. Record deposits into the float
        2. Record each expense with its receipt
        3. Print the settlement report for sign-off
        """
    )

    # Route to appropriate page
    if page == Page.DASHBOARD:
        render_dashboard_page(session, currency)
    elif page == Page.TRANSACTIONS:
        render_transactions_page(session, currency)
    elif page == Page.REPORTS:
        render_reports_page(session, currency)
    elif page == Page.SETTINGS:
        render_settings_page()


def kpi(label: str, value: str, style: str = ""):
    st.markdown(f"""
    <div class="kpi-box {style}">
        <div class="kpi-label">{label}</div>
        <div class="big-number">{value}</div>
    </div>
    """, unsafe_allow_html=True)


def render_dashboard_page(session: LedgerSession, currency: str):
    """Render the dashboard: KPIs, category chart and AI insights."""
    st.title("📊 Dashboard")
    views = session.views()
    stats = views.stats

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        kpi("Total Budget / إجمالي العهدة", f"{format_amount(stats.total_budget)} {currency}")
    with col2:
        kpi("Expenses / المصروفات", f"{format_amount(stats.total_expenses)} {currency}", "expense")
    with col3:
        kpi(
            "Balance / الرصيد",
            f"{format_amount(stats.balance)} {currency}",
            "negative" if stats.balance < 0 else "balance",
        )
    with col4:
        kpi("Records / السجلات", str(stats.count))

    st.markdown("---")

    col_chart, col_ai = st.columns([3, 2])

    with col_chart:
        st.subheader("Spending by Category")
        st.plotly_chart(
            category_bar_chart(views.category_totals, currency),
            use_container_width=True,
        )

    with col_ai:
        st.subheader("✨ AI Insights")
        if st.button("Generate Insights / تحليل ذكي", type="primary"):
            with st.spinner("Analyzing your spending..."):
                run_async(session.generate_insights())

        if session.state.insights:
            # Model output is plain markdown, never trusted HTML
            with st.container(border=True):
                st.markdown(session.state.insights)
        else:
            st.info("Click the button for a short analysis of your spending.")


def render_entry_form(session: LedgerSession):
    """Render the add/edit form."""
    form = session.state.form
    gen = form.generation
    editing = session.state.editing_id is not None

    st.subheader("✏️ Edit Record" if editing else "➕ New Record")

    tx_type = st.radio(
        "Type",
        list(TransactionType),
        index=list(TransactionType).index(form.type),
        format_func=lambda t: "💸 Expense / مصروف" if t == TransactionType.EXPENSE else "💰 Deposit / إيداع",
        horizontal=True,
        key=f"type_{gen}",
    )

    col1, col2 = st.columns(2)
    with col1:
        tx_date = st.date_input("Date *", value=form.date, key=f"date_{gen}")
        amount = st.text_input(
            "Amount *",
            value=form.amount,
            placeholder="e.g. 1500",
            key=f"amount_{gen}",
        )
    with col2:
        bill_number = st.text_input(
            "Bill Number",
            value=form.bill_number,
            placeholder="e.g. INV-102",
            key=f"bill_{gen}",
        )
        categories = list(DEFAULT_CATEGORIES)
        if form.category not in categories:
            categories.append(form.category)
        category = st.selectbox(
            "Category",
            categories,
            index=categories.index(form.category),
            key=f"category_{gen}",
        )
        custom_category = st.text_input(
            "Other category (optional)",
            placeholder="Overrides the list above",
            key=f"custom_category_{gen}",
        )

    description = st.text_area(
        "Description *",
        value=form.description,
        placeholder="What was the money for?",
        key=f"description_{gen}",
    )

    render_receipt_uploader(session, gen)

    col_save, col_cancel = st.columns([2, 1])
    with col_save:
        label = "💾 Update / تحديث" if editing else "💾 Save / حفظ"
        if st.button(label, type="primary", key=f"save_{gen}"):
            session.update_form(
                date=tx_date,
                description=description,
                amount=amount,
                bill_number=bill_number,
                category=custom_category.strip() or category,
                type=tx_type,
            )
            session.submit_form()
            st.rerun()
    with col_cancel:
        if editing and st.button("✖ Cancel", key=f"cancel_{gen}"):
            session.cancel_edit()
            st.rerun()


def render_receipt_uploader(session: LedgerSession, gen: int):
    """Receipt photo picker for the current form."""
    settings = get_settings().app
    uploaded = st.file_uploader(
        f"Receipt photo (max {settings.max_receipt_size_mb}MB)",
        type=settings.supported_formats_list,
        key=f"receipt_{gen}",
    )

    # Streamlit re-sends the same file on every rerun; read it once
    if uploaded is not None:
        if session.is_new_upload(uploaded.name, uploaded.size):
            run_async(session.attach_receipt(uploaded.getvalue()))
            st.rerun()

    if session.state.form.invoice_image:
        col_img, col_clear = st.columns([3, 1])
        with col_img:
            st.image(
                ReceiptImageService.decode_receipt(session.state.form.invoice_image),
                width=200,
            )
        with col_clear:
            if st.button("🗑 Remove receipt", key=f"clear_receipt_{gen}"):
                session.clear_receipt()
                st.rerun()


def render_transaction_row(session: LedgerSession, transaction, currency: str):
    tid = transaction.id
    cols = st.columns([2, 4, 2, 2, 1, 1, 1])

    cols[0].write(transaction.date.strftime("%d %b %Y"))
    # User text, shown as-is
    cols[1].text(
        f"{transaction.description}\n"
        f"{transaction.category} · {transaction.bill_number or '-'}"
    )
    css = "expense-amount" if transaction.is_expense else "deposit-amount"
    sign = "-" if transaction.is_expense else "+"
    cols[2].markdown(
        f'<span class="{css}">{sign}{format_amount(transaction.amount)} {currency}</span>',
        unsafe_allow_html=True,
    )
    cols[3].write(transaction.type.value)

    if has_receipt(transaction):
        if cols[4].button("📎", key=f"view_{tid}", help="View receipt"):
            session.view_receipt(tid)
            st.rerun()

    if cols[5].button("✏️", key=f"edit_{tid}", help="Edit"):
        session.start_edit(tid)
        st.rerun()

    if session.state.confirm_delete_id == tid:
        if cols[6].button("✔", key=f"confirm_{tid}", help="Confirm delete"):
            session.confirm_delete(tid)
            st.rerun()
        st.warning("Delete this record? / حذف السجل؟")
        if st.button("Keep it", key=f"keep_{tid}"):
            session.cancel_delete()
            st.rerun()
    elif cols[6].button("🗑", key=f"delete_{tid}", help="Delete"):
        session.request_delete(tid)
        st.rerun()


def render_receipt_viewer(session: LedgerSession):
    tid = session.state.viewing_receipt_id
    if tid is None:
        return
    image = session.receipt_bytes(tid)
    if image is None:
        session.close_receipt()
        return
    with st.container(border=True):
        st.markdown("#### 📎 Receipt")
        st.image(image, use_container_width=True)
        if st.button("Close", key="close_receipt"):
            session.close_receipt()
            st.rerun()


def render_transactions_page(session: LedgerSession, currency: str):
    """Render the entry form and the searchable ledger."""
    st.title("🧾 Transactions")

    col_form, col_list = st.columns([2, 3])

    with col_form:
        render_entry_form(session)

    with col_list:
        query = st.text_input(
            "🔍 Search",
            value=session.state.search_query,
            placeholder="Description, category or bill number",
        )
        if query != session.state.search_query:
            session.set_search_query(query)

        render_receipt_viewer(session)

        transactions = session.views().transactions
        if not transactions:
            st.info("No transactions found.")
        for transaction in transactions:
            render_transaction_row(session, transaction, currency)
            st.divider()


def render_reports_page(session: LedgerSession, currency: str):
    """Render the settlement report controls and the printable page."""
    st.title("🖨️ Settlement Report")

    col1, col2, col3 = st.columns([3, 1, 1])
    with col1:
        title = st.text_input("Report title", value=session.state.report_title, max_chars=200)
    with col2:
        date_from = st.date_input("From", value=session.state.report_date_from)
    with col3:
        date_to = st.date_input("To", value=session.state.report_date_to)

    session.set_report_title(title)
    if isinstance(date_from, date) and isinstance(date_to, date):
        session.set_report_period(date_from, date_to)

    report = session.settlement_report()
    html = render_settlement_html(report, currency=currency)

    st.download_button(
        "⬇️ Download HTML",
        data=html,
        file_name=f"{report.reference}.html",
        mime="text/html",
    )
    components.html(html, height=1100, scrolling=True)


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Connection Status")

    status = validate_all_settings()

    services = [
        ("Gemini (AI Insights)", "gemini"),
        ("Application", "app"),
    ]

    for name, key in services:
        if status.get(key, False):
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "To configure the application, create a `.env` file with your API keys. "
        "See `.env.example` for the required variables."
    )


if __name__ == "__main__":
    main()
