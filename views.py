import logging
import sqlite3
from typing import Dict, Optional

import pandas as pd
import plotly.express as px
import streamlit as st

from models import Expense
from services import ExpenseService
from summaries import TimeFilter, summarize

logger = logging.getLogger(__name__)

EDITING_KEY = "editing_id"
AMOUNT_KEY = "amount_input"
CATEGORY_KEY = "category_input"
NOTE_KEY = "note_input"


def format_amount(amount: Optional[float]) -> str:
    return f"${(amount or 0):.2f}"


def render_expense(expense: Expense) -> None:
    """Show a expense with streamlit display functions"""
    st.subheader(format_amount(expense.amount))
    st.write(expense.category)
    if expense.note:
        st.caption(expense.note)
    if expense.date:
        st.caption(f"Date: {expense.date}")


def clear_form() -> None:
    st.session_state[EDITING_KEY] = None
    st.session_state[AMOUNT_KEY] = ""
    st.session_state[CATEGORY_KEY] = ""
    st.session_state[NOTE_KEY] = ""


def start_edit(expense: Expense) -> None:
    """Streamlit callback filling the form with an existing expense"""
    st.session_state[EDITING_KEY] = expense.id
    st.session_state[AMOUNT_KEY] = str(expense.amount or "")
    st.session_state[CATEGORY_KEY] = expense.category
    st.session_state[NOTE_KEY] = expense.note or ""


def do_save(connection: sqlite3.Connection) -> None:
    """Streamlit callback for the form: create or update depending on edit state.
    Invalid input leaves everything as it is so it can be corrected"""
    editing_id = st.session_state.get(EDITING_KEY)
    amount = st.session_state.get(AMOUNT_KEY, "")
    category = st.session_state.get(CATEGORY_KEY, "")
    note = st.session_state.get(NOTE_KEY, "")
    try:
        if editing_id is None:
            saved = ExpenseService.create_expense(connection, amount, category, note) is not None
        else:
            saved = ExpenseService.update_expense(connection, editing_id, amount, category, note)
    except sqlite3.Error:
        logger.exception("Saving expense failed")
        st.error("Could not save the expense. Please try again.")
        return
    if saved:
        clear_form()


def do_delete(connection: sqlite3.Connection, expense_to_delete: Expense) -> None:
    """Streamlit callback for deleting a expense"""
    try:
        ExpenseService.delete_expense(connection, expense_to_delete.id)
    except sqlite3.Error:
        logger.exception(f"Deleting expense #{expense_to_delete.id} failed")
        st.error("Could not delete the expense. Please try again.")
        return
    if st.session_state.get(EDITING_KEY) == expense_to_delete.id:
        clear_form()


def render_totals(total: float, totals: Dict[str, float]) -> None:
    st.write("Total Spending:")
    st.subheader(format_amount(total))
    st.write("By Category:")
    if not totals:
        st.caption("No expenses for this filter.")
    for category, amount in totals.items():
        st.caption(f"{category}: {format_amount(amount)}")


def render_form(connection: sqlite3.Connection) -> None:
    """Show the form for creating a new Expense or changing the one being edited"""
    editing_id = st.session_state.get(EDITING_KEY)
    with st.form("expense_form"):
        st.text_input("Amount", key=AMOUNT_KEY, placeholder="Amount (e.g. 12.50)")
        st.text_input("Category", key=CATEGORY_KEY, placeholder="Category (Food, Books, Rent...)")
        st.text_input("Note", key=NOTE_KEY, placeholder="Note (optional)")
        st.form_submit_button(
            "Add Expense" if editing_id is None else "Save Changes",
            on_click=do_save,
            args=(connection,),
        )
    if editing_id is not None:
        st.caption(f"Editing Expense #{editing_id}")
        st.button("Cancel Edit", on_click=clear_form)


def render_expenses(connection: sqlite3.Connection) -> None:
    """Show the filter, totals, form and the feed of expenses"""
    st.session_state.setdefault(EDITING_KEY, None)

    mode = st.radio(
        "Show:",
        list(TimeFilter),
        format_func=lambda x: x.label,
        horizontal=True,
    )
    expenses = ExpenseService.list_all_expenses(connection)
    summary = summarize(expenses, mode)

    render_totals(summary.total, summary.category_totals)
    render_form(connection)

    st.header("Expense Feed")
    if not summary.expenses:
        st.info("No expenses yet for this filter.")
    for expense in summary.expenses:
        details, actions = st.columns([4, 1])
        with details:
            render_expense(expense)
        with actions:
            st.button("Edit", key=f"edit_{expense.id}", on_click=start_edit, args=(expense,))
            st.button("✕", key=f"delete_{expense.id}", on_click=do_delete, args=(connection, expense))

    st.caption("Enter your expenses and they'll be saved locally with SQLite.")


def render_chart(connection: sqlite3.Connection) -> None:
    """Show a bar chart of spending per category across all expenses"""
    st.header("Spending by Category")
    totals = ExpenseService.list_category_totals(connection)
    if not totals:
        st.info("No expense data available for chart.")
        return

    df = pd.DataFrame({"category": list(totals.keys()), "total": list(totals.values())})
    fig = px.bar(
        df,
        x="category",
        y="total",
        text_auto=".2f",
        labels={"category": "Category", "total": "Total Spent"},
        height=400,
    )
    st.plotly_chart(fig, use_container_width=True)
