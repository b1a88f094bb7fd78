"""
Streamlit Frontend for Splitter

The dashboard the group uses day to day: record what was spent,
record repayments, see who owes whom, and ask questions in plain words.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Every number shown is computed from the ledger on the spot
3. Clear error messages in simple language
4. Visual feedback for all operations
"""

import asyncio
from decimal import Decimal

import streamlit as st

from splitter.audit import configure_logging
from splitter.config import get_settings, validate_all_settings
from splitter.formatting import html_text
from splitter.ledger import LedgerError
from splitter.models.expense import ExpenseCreate, SettlementRequest
from splitter.orchestrator import ChatFlow, LedgerFlow, create_app_components
from splitter.services.storage import StorageError
from splitter.validation import ExpenseValidationError


# Page configuration
st.set_page_config(
    page_title="Splitter",
    page_icon="💸",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .success-box {
        padding: 20px;
        background-color: #d4edda;
        border-radius: 10px;
        border-left: 5px solid #28a745;
        margin: 10px 0;
    }
    .info-box {
        padding: 20px;
        background-color: #cce5ff;
        border-radius: 10px;
        border-left: 5px solid #004085;
        margin: 10px 0;
    }
</style>
""", unsafe_allow_html=True)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    configure_logging(get_settings().app.log_level)
    return create_app_components()


def parse_names(raw: str) -> list[str]:
    """Split a comma-separated list of names."""
    return [name.strip() for name in raw.split(",") if name.strip()]


def main():
    """Main application entry point."""
    ledger_flow, chat_flow, backend = get_components()

    st.sidebar.title("💸 Splitter")
    st.sidebar.caption(f"Storage: {backend}")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["➕ Add Expense", "🤝 Settle Up", "⚖️ Balances", "💬 Ask", "📋 Expenses", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **Ask questions like:**
        - "What's the balance?"
        - "How much does Alice owe?"
        - "How much did John pay?"
        """
    )

    try:
        if page == "➕ Add Expense":
            render_add_expense_page(ledger_flow)
        elif page == "🤝 Settle Up":
            render_settle_page(ledger_flow)
        elif page == "⚖️ Balances":
            render_balances_page(ledger_flow)
        elif page == "💬 Ask":
            render_chat_page(chat_flow)
        elif page == "📋 Expenses":
            render_expenses_page(ledger_flow)
        elif page == "⚙️ Settings":
            render_settings_page()
    except StorageError:
        st.error("Could not reach the expense storage. Please try again later.")
    except LedgerError as e:
        st.error(f"The ledger contains an entry that cannot be processed: {e}")


def render_add_expense_page(ledger_flow: LedgerFlow):
    """Render the add-expense form."""
    st.title("➕ Add Expense")
    st.markdown("Who paid, how much, and who shares the cost?")

    with st.form("add_expense", clear_on_submit=True):
        description = st.text_input("Description *", placeholder="e.g., Groceries")
        amount = st.number_input("Amount *", min_value=0.0, step=0.01, format="%.2f")
        paid_by = st.text_input("Paid by *", placeholder="e.g., Alice")
        split_with = st.text_input(
            "Split with",
            placeholder="e.g., Bob, Carol",
            help="Comma-separated. The payer is included automatically.",
        )
        submitted = st.form_submit_button("💾 Save Expense", type="primary")

    if not submitted:
        return

    if not description or not paid_by:
        st.error("Please enter a description and who paid")
        return
    if amount <= 0:
        st.error("Please enter a valid amount")
        return

    try:
        record = run_async(ledger_flow.add_expense(ExpenseCreate(
            description=description,
            amount=Decimal(str(amount)),
            paid_by=paid_by,
            split_with=parse_names(split_with),
        )))
    except ExpenseValidationError as e:
        st.error(str(e))
        return

    st.markdown(f"""
    <div class="success-box">
        <h4>✅ Expense saved</h4>
        <p><strong>{html_text(record.description)}</strong>: {record.amount:,.2f} paid by {html_text(record.paid_by)}</p>
    </div>
    """, unsafe_allow_html=True)


def render_settle_page(ledger_flow: LedgerFlow):
    """Render the settle-up form."""
    st.title("🤝 Settle Up")
    st.markdown("Record money paid back from one person to another.")

    with st.form("settle", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            person_owes = st.text_input("Who is paying back? *")
        with col2:
            person_receives = st.text_input("Who receives it? *")
        amount = st.number_input("Amount *", min_value=0.0, step=0.01, format="%.2f")
        submitted = st.form_submit_button("✅ Record Settlement", type="primary")

    if not submitted:
        return

    if not person_owes or not person_receives or amount <= 0:
        st.error("Please fill in both names and a valid amount")
        return

    try:
        record = run_async(ledger_flow.record_settlement(SettlementRequest(
            person_owes=person_owes,
            person_receives=person_receives,
            amount=Decimal(str(amount)),
        )))
    except ExpenseValidationError as e:
        st.error(str(e))
        return

    st.success(f"{record.description} ({record.amount:,.2f})")


def render_balances_page(ledger_flow: LedgerFlow):
    """Render everyone's balance."""
    st.title("⚖️ Balances")

    balances = run_async(ledger_flow.get_balances())
    if not balances:
        st.info("No balances yet. Add some expenses first!")
        return

    symbol = get_settings().ledger.currency_symbol
    cols = st.columns(min(len(balances), 4))
    for idx, (name, amount) in enumerate(balances.items()):
        with cols[idx % len(cols)]:
            if amount > 0:
                label = "should receive"
            elif amount < 0:
                label = "owes"
            else:
                label = "is settled up"
            st.metric(label=f"{name} {label}", value=f"{symbol}{abs(amount):,.2f}")


def render_chat_page(chat_flow: ChatFlow):
    """Render the question page."""
    st.title("💬 Ask a Question")
    st.markdown("Ask about balances and expenses in plain words.")

    question = st.text_input(
        "Your question:",
        placeholder="e.g., How much does Bob owe?",
    )

    if st.button("🔍 Get Answer", type="primary") and question:
        with st.spinner("Looking up the ledger..."):
            reply = run_async(chat_flow.answer(question))

        st.markdown(f"""
        <div class="info-box">
            <p>{html_text(reply.response)}</p>
        </div>
        """, unsafe_allow_html=True)

        with st.expander("🔍 How I read your question"):
            st.markdown(f"**Intent:** {reply.query.intent.value}")
            st.markdown(f"**Name:** {reply.query.name or '-'}")


def render_expenses_page(ledger_flow: LedgerFlow):
    """Render the expense list, newest first."""
    st.title("📋 Expenses")

    show_all = st.toggle("Show all expenses", value=False)
    if show_all:
        records = list(reversed(run_async(ledger_flow.list_expenses())))
    else:
        records = run_async(ledger_flow.recent_expenses())

    if not records:
        st.info("You haven't added any expenses yet.")
        return

    st.dataframe(
        [
            {
                "Date": record.created_at.strftime("%d %b %Y %H:%M"),
                "Description": record.description,
                "Amount": float(record.amount),
                "Paid by": record.paid_by,
                "Split with": ", ".join(record.split_with) or "N/A",
            }
            for record in records
        ],
        use_container_width=True,
    )


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")

    status = validate_all_settings()

    sections = [
        ("Ledger", "ledger"),
        ("Google Sheets (Storage)", "google_sheets"),
        ("HTTP API", "api"),
        ("Application", "app"),
    ]

    for name, key in sections:
        if status.get(key, False):
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown(
        "To configure the application, create a `.env` file. "
        "Set `LEDGER_STORAGE_BACKEND=google_sheets` together with the "
        "`GOOGLE_SHEETS_*` variables to keep the ledger in a spreadsheet."
    )


if __name__ == "__main__":
    main()
