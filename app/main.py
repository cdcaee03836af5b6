"""
Streamlit Frontend for Household Expenses

Three pages:
1. Expenses - filter by date range and owner, per-owner totals, delete
2. Add Expense - the entry form
3. Settings - connection status

The UI only wires widgets to the flows in household_expenses.orchestrator.
Every rule (validation, what a failed load or delete leaves on screen)
lives in the flows.
"""

import asyncio
import re
from datetime import date
from decimal import Decimal, InvalidOperation

import streamlit as st

from household_expenses.audit import AuditLogger
from household_expenses.config import get_settings, validate_all_settings
from household_expenses.models.expense import ExpenseDraft, Owner, OwnerFilter
from household_expenses.orchestrator import (
    AddExpenseFlow,
    ExpenseListFlow,
    create_app_components,
    create_list_flow,
)
from household_expenses.services.storage import ExpenseStorageInterface, StorageError
from household_expenses.validation import ExpenseValidationError


st.set_page_config(
    page_title="Family Expenses",
    page_icon="💶",
    layout="wide",
)


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
    """Get or create the shared application components (cached)."""
    return create_app_components(use_storage=True)


def get_list_flow(
    storage: ExpenseStorageInterface,
    audit_logger: AuditLogger,
) -> ExpenseListFlow:
    """The list state belongs to one browser session."""
    if "list_flow" not in st.session_state:
        st.session_state.list_flow = create_list_flow(storage, audit_logger)
    return st.session_state.list_flow


def parse_amount(raw: str) -> Decimal:
    """
    Keep digits and dots, then read the leading number.

    "1.2.3" reads as 1.2; anything without a leading number counts as zero.
    """
    cleaned = re.sub(r"[^0-9.]", "", raw or "")
    leading = re.match(r"\d*(?:\.\d*)?", cleaned).group()
    try:
        return Decimal(leading)
    except InvalidOperation:
        return Decimal("0")


def format_currency(amount: Decimal) -> str:
    currency = get_settings().app.currency
    symbol = "€" if currency == "EUR" else f"{currency} "
    return f"{symbol}{amount:,.2f}"


def main():
    """Main application entry point."""
    add_flow, storage, audit_logger = get_components()
    list_flow = get_list_flow(storage, audit_logger)

    st.sidebar.title("💶 Family Expenses")
    page = st.sidebar.radio(
        "Navigate to:",
        ["📋 Expenses", "➕ Add Expense", "⚙️ Settings"],
        index=0,
    )

    try:
        if page == "📋 Expenses":
            render_list_page(list_flow)
        elif page == "➕ Add Expense":
            render_add_page(add_flow)
        else:
            render_settings_page()
    except Exception as e:
        if get_settings().app.debug_mode:
            st.exception(e)
        else:
            st.error("Something went wrong. Please try again.")


def render_add_page(add_flow: AddExpenseFlow):
    """Render the add-expense form."""
    st.title("➕ Add New Expense")

    with st.form("add_expense"):
        owner = st.selectbox(
            "Owner",
            options=list(Owner),
            format_func=lambda o: o.value,
        )
        expense_date = st.date_input("Date", value=date.today())
        description = st.text_input(
            "Description",
            placeholder="What was this expense for?",
            key="description",
        )
        amount_raw = st.text_input("Amount", placeholder="0.00", key="amount")
        comment = st.text_area("Comment (optional)")
        submitted = st.form_submit_button("Add Expense", type="primary")

    if not submitted:
        return

    try:
        draft = ExpenseDraft(
            owner=owner,
            date=expense_date,
            description=description,
            amount=parse_amount(amount_raw),
            comment=comment,
        )
    except ValueError as e:
        st.error(f"Invalid expense: {e}")
        return

    try:
        run_async(add_flow.submit(draft))
    except ExpenseValidationError as e:
        st.error(e.user_message)
        return
    except StorageError:
        st.error("Error adding expense")
        return

    st.session_state.list_stale = True
    st.success("Expense added successfully")


def render_list_page(list_flow: ExpenseListFlow):
    """Render the expense list with filters and totals."""
    st.title("📋 Family Expenses")

    first_visit = not list_flow.loaded and list_flow.last_error is None
    if first_visit or st.session_state.get("list_stale", False):
        st.session_state.list_stale = False
        if not run_async(list_flow.load()):
            st.error("Failed to load expenses")

    with st.expander("Filter & Search"):
        col1, col2, col3 = st.columns(3)
        with col1:
            start_date = st.date_input("From Date", value=None)
        with col2:
            end_date = st.date_input("To Date", value=None)
        with col3:
            owner = st.selectbox(
                "Owner",
                options=list(OwnerFilter),
                format_func=lambda o: "All owners" if o is OwnerFilter.ALL else o.value,
                key="owner_filter",
            )

        apply_col, clear_col = st.columns(2)
        with apply_col:
            if st.button("Apply", key="apply"):
                try:
                    query = list_flow.make_query(start_date, end_date, owner)
                except ValueError:
                    st.error("End date cannot be before start date")
                else:
                    if not run_async(list_flow.load(query)):
                        st.error("Failed to load expenses")
        with clear_col:
            if st.button("Clear", key="clear"):
                if not run_async(list_flow.clear_filters()):
                    st.error("Failed to load expenses")

    st.caption(list_flow.description)

    total_cols = st.columns(len(Owner))
    for col, member in zip(total_cols, Owner):
        col.metric(f"{member.value} Total", format_currency(list_flow.total_for(member)))

    if not list_flow.records:
        st.info("No expenses found. Start by adding your first expense.")
        return

    for expense in list_flow.records:
        cols = st.columns([1, 2, 2, 4, 2, 4, 1])
        cols[0].write(expense.id)
        cols[1].write(expense.owner.value)
        cols[2].write(expense.date.strftime("%d/%m/%Y"))
        cols[3].write(expense.description)
        cols[4].write(format_currency(expense.amount))
        cols[5].write(expense.comment or "-")
        if cols[6].button("🗑️", key=f"delete_{expense.id}", help="Delete expense"):
            if run_async(list_flow.delete(expense.id)):
                st.success("Expense deleted successfully")
                st.rerun()
            else:
                st.error("Failed to delete expense")


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Connection Status")

    status = validate_all_settings()

    services = [
        ("Supabase (Storage)", "supabase"),
        ("Application", "app"),
    ]

    for name, key in services:
        if status.get(key, False):
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    if status.get("app", False):
        app_settings = get_settings().app
        st.markdown("### Application")
        st.markdown(
            f"- Environment: `{app_settings.app_environment}`\n"
            f"- Debug mode: `{app_settings.debug_mode}`\n"
            f"- Recent expenses shown: `{app_settings.recent_limit}`\n"
            f"- Currency: `{app_settings.currency}`"
        )

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "Create a `.env` file with `SUPABASE_URL` and `SUPABASE_KEY`. "
        "See `.env.example` for the optional variables. "
        "Without Supabase the app keeps expenses in memory until it restarts."
    )


if __name__ == "__main__":
    main()
