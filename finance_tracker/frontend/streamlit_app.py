# frontend/streamlit_app.py

import logging
from datetime import date, datetime

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from finance_tracker import aggregation
from finance_tracker.backend.records import EXPENSE_CATEGORIES, INVESTMENT_TYPES
from finance_tracker.frontend import api_client
from finance_tracker.frontend.api_client import ApiError, SessionExpired

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("finance-frontend")

# ---------------- Page config ----------------
st.set_page_config(page_title="Finance Tracker", layout="wide", page_icon="💰")

WINDOW_OPTIONS = {label: window for window, label in aggregation.WINDOW_LABELS.items()}
WINDOW_OPTIONS["Custom range"] = None
SERIES_COLORS = {"Expenses": "rgb(239, 68, 68)", "Income": "rgb(34, 197, 94)", "Investments": "rgb(59, 130, 246)"}


# ---------------- Session State Management ----------------
def init_session_state():
    for key in ("token", "user"):
        if key not in st.session_state:
            st.session_state[key] = None


def logout(message=None):
    st.session_state.token = None
    st.session_state.user = None
    if message:
        st.warning(message)


def handle_auth(payload):
    st.session_state.token = payload.get("token")
    st.session_state.user = payload.get("user") or {}
    st.success("✅ Login successful!")


def load_records():
    """All three record lists, or None after forcing a logout on 401."""
    try:
        return api_client.fetch_all(st.session_state.token)
    except SessionExpired:
        logout("🔐 Session expired, please log in again.")
        return None
    except ApiError as e:
        st.error(f"❌ Could not load data: {e.message}")
        return {t: [] for t in api_client.RECORD_TYPES}


def call_authenticated(func, *args):
    try:
        func(*args)
        return True
    except SessionExpired:
        logout("🔐 Session expired, please log in again.")
    except ApiError as e:
        st.error(f"❌ {e.message}")
    return False


# ---------------- Sidebar ----------------
def render_sidebar():
    with st.sidebar:
        st.title("🔐 Account")

        if st.session_state.token:
            user = st.session_state.user or {}
            st.success(f"Logged in as **{user.get('username', '')}**")
            if st.button("🚪 Logout", use_container_width=True, key="logout_btn"):
                logout()
                st.rerun()
            return

        auth_tab = st.radio("Action", ["Login", "Register"], horizontal=True, key="auth_tab")
        username = st.text_input("👤 Username", key="username_input") if auth_tab == "Register" else None
        email = st.text_input("📧 Email", key="email_input")
        password = st.text_input("🔒 Password", type="password", key="password_input")

        if st.button("Submit", use_container_width=True, key="auth_submit"):
            if not email or not password or (auth_tab == "Register" and not username):
                st.warning("Please fill in every field")
                return
            try:
                if auth_tab == "Register":
                    payload = api_client.register(username, email, password)
                else:
                    payload = api_client.login(email, password)
            except ApiError as e:
                st.error(f"❌ {e.message}")
                return
            handle_auth(payload)
            st.rerun()


# ---------------- Window selector ----------------
def select_window():
    col1, col2, col3 = st.columns([2, 1, 1])
    with col1:
        label = st.selectbox("⏰ Time Period", list(WINDOW_OPTIONS), key="time_window")
    window = WINDOW_OPTIONS[label]
    if window is not None:
        return window

    with col2:
        start = st.date_input("From", value=None, key="range_start")
    with col3:
        end = st.date_input("To", value=None, key="range_end")
    return aggregation.CustomRange(start, end)


# ---------------- Dashboard ----------------
def chart_figure(chart):
    fig = go.Figure()
    for name, points in (("Expenses", chart.expenses), ("Income", chart.income), ("Investments", chart.investments)):
        fig.add_trace(go.Scatter(
            x=[d for d, _ in points],
            y=[y for _, y in points],
            mode="lines+markers",
            name=name,
            line=dict(color=SERIES_COLORS[name]),
        ))
    fig.update_layout(
        title="Financial Overview",
        xaxis_title="Date",
        yaxis_title="Amount (₹)",
        height=400,
    )
    return fig


def render_summary(summary):
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("💸 Expenses", f"₹{summary.total_expenses:,.2f}")
    col2.metric("💵 Income", f"₹{summary.total_income:,.2f}")
    col3.metric("📈 Investments", f"₹{summary.total_investments:,.2f}")
    col4.metric("🏦 Net Worth", f"₹{summary.net_worth:,.2f}")

    if summary.chart.labels:
        st.plotly_chart(chart_figure(summary.chart), use_container_width=True)
    else:
        st.info("💳 No records in this period.")

    col1, col2 = st.columns(2)
    with col1:
        if summary.expenses_by_category:
            st.subheader("Expenses by category")
            st.dataframe(
                pd.DataFrame(summary.expenses_by_category.items(), columns=["Category", "Amount"]),
                use_container_width=True, hide_index=True,
            )
    with col2:
        if summary.investments_by_type:
            st.subheader("Investments by type")
            st.dataframe(
                pd.DataFrame(summary.investments_by_type.items(), columns=["Type", "Amount"]),
                use_container_width=True, hide_index=True,
            )


# ---------------- Record tabs ----------------
def render_record_table(record_type, rows, columns):
    if not rows:
        st.info("Nothing recorded yet.")
        return

    header = st.columns([2] * len(columns) + [1])
    for col, (_, title) in zip(header, columns):
        col.markdown(f"**{title}**")

    for row in rows:
        cells = st.columns([2] * len(columns) + [1])
        for col, (key, _) in zip(cells, columns):
            value = row.get(key)
            col.write(f"₹{value:,.2f}" if key == "amount" else value)
        if cells[-1].button("🗑️", key=f"delete_{record_type}_{row['id']}", help="Delete"):
            if call_authenticated(api_client.delete_record, record_type, row["id"], st.session_state.token):
                st.rerun()


def submit_record(record_type, fields):
    if call_authenticated(api_client.add_record, record_type, st.session_state.token, fields):
        st.success("✅ Saved")
        st.rerun()


def render_expenses(rows):
    with st.form("add_expense", clear_on_submit=True):
        col_a, col_b, col_c, col_d = st.columns(4)
        description = col_a.text_input("Description")
        amount = col_b.number_input("Amount", min_value=0.0, format="%.2f", step=100.0)
        category = col_c.selectbox("Category", EXPENSE_CATEGORIES)
        when = col_d.date_input("Date", value=date.today())
        if st.form_submit_button("➕ Add Expense", use_container_width=True):
            submit_record("expenses", {
                "description": description, "amount": amount, "category": category, "date": when.isoformat(),
            })
    render_record_table("expenses", rows, [
        ("date", "Date"), ("description", "Description"), ("category", "Category"), ("amount", "Amount"),
    ])


def render_incomes(rows):
    with st.form("add_income", clear_on_submit=True):
        col_a, col_b, col_c = st.columns(3)
        source = col_a.text_input("Source")
        amount = col_b.number_input("Amount", min_value=0.0, format="%.2f", step=100.0)
        when = col_c.date_input("Date", value=date.today())
        if st.form_submit_button("➕ Add Income", use_container_width=True):
            submit_record("incomes", {"source": source, "amount": amount, "date": when.isoformat()})
    render_record_table("incomes", rows, [("date", "Date"), ("source", "Source"), ("amount", "Amount")])


def render_investments(rows):
    with st.form("add_investment", clear_on_submit=True):
        col_a, col_b, col_c, col_d = st.columns(4)
        name = col_a.text_input("Investment Name")
        amount = col_b.number_input("Amount", min_value=0.0, format="%.2f", step=100.0)
        kind = col_c.selectbox("Type", INVESTMENT_TYPES)
        when = col_d.date_input("Date", value=date.today())
        if st.form_submit_button("➕ Add Investment", use_container_width=True):
            submit_record("investments", {
                "name": name, "amount": amount, "type": kind, "date": when.isoformat(),
            })
    render_record_table("investments", rows, [
        ("date", "Date"), ("name", "Name"), ("type", "Type"), ("amount", "Amount"),
    ])


# ---------------- Main App ----------------
def main():
    init_session_state()
    st.title("💰 Finance Tracker")

    render_sidebar()

    if not st.session_state.token:
        st.info("🔐 Please login to view your finances")
        return

    data = load_records()
    if data is None:
        st.rerun()
        return

    window = select_window()
    # recomputed on every rerun
    summary = aggregation.summarize(
        data["expenses"], data["incomes"], data["investments"], window, datetime.now()
    )
    render_summary(summary)

    tab1, tab2, tab3 = st.tabs(["💸 Expenses", "💵 Income", "📈 Investments"])
    with tab1:
        render_expenses(data["expenses"])
    with tab2:
        render_incomes(data["incomes"])
    with tab3:
        render_investments(data["investments"])


if __name__ == "__main__":
    main()
