"""Filtering and totals over the expense list shown on the Expenses page.

Everything here is a pure function of the expense list and the selected
time window, recomputed on every rerun.
"""
import datetime
import enum
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

import pandas as pd

from models import Expense

OTHER_CATEGORY = "Other"


class TimeFilter(str, enum.Enum):
    ALL = "ALL"
    WEEK = "WEEK"
    MONTH = "MONTH"

    @property
    def label(self) -> str:
        return {
            TimeFilter.ALL: "All",
            TimeFilter.WEEK: "This Week",
            TimeFilter.MONTH: "This Month",
        }[self]


class ExpenseSummary(NamedTuple):
    expenses: List[Expense]
    total: float
    category_totals: Dict[str, float]


def week_bounds(today: datetime.date) -> Tuple[datetime.date, datetime.date]:
    """Sunday and Saturday of the week containing today"""
    days_since_sunday = (today.weekday() + 1) % 7
    start = today - datetime.timedelta(days=days_since_sunday)
    return start, start + datetime.timedelta(days=6)


def is_this_week(expense_date: Optional[datetime.date], today: datetime.date) -> bool:
    if expense_date is None:
        return False
    start, end = week_bounds(today)
    return start <= expense_date <= end


def is_this_month(expense_date: Optional[datetime.date], today: datetime.date) -> bool:
    if expense_date is None:
        return False
    return (expense_date.year, expense_date.month) == (today.year, today.month)


def filter_expenses(
    expenses: Sequence[Expense],
    mode: TimeFilter,
    today: Optional[datetime.date] = None,
) -> List[Expense]:
    """Expenses falling in the selected time window, in their original order"""
    mode = TimeFilter(mode)
    if mode is TimeFilter.ALL:
        return list(expenses)

    today = today or datetime.date.today()
    predicate = is_this_week if mode is TimeFilter.WEEK else is_this_month
    return [e for e in expenses if predicate(e.date, today)]


def expenses_frame(expenses: Sequence[Expense]) -> pd.DataFrame:
    """One row per expense with numeric amounts (invalid ones as 0)
    and a category label (empty ones as Other)"""
    df = pd.DataFrame(
        [e.model_dump() for e in expenses],
        columns=["id", "amount", "category", "note", "date"],
    )
    df["amount"] = pd.to_numeric(df["amount"], errors="coerce").fillna(0.0)
    df["category"] = df["category"].fillna("").astype(str).str.strip()
    df.loc[df["category"] == "", "category"] = OTHER_CATEGORY
    return df


def total_spending(expenses: Sequence[Expense]) -> float:
    if not expenses:
        return 0.0
    return float(expenses_frame(expenses)["amount"].sum())


def category_totals(expenses: Sequence[Expense]) -> Dict[str, float]:
    """Summed amount per category, in order of first appearance"""
    if not expenses:
        return {}
    totals = expenses_frame(expenses).groupby("category", sort=False)["amount"].sum()
    return {str(category): float(total) for category, total in totals.items()}


def summarize(
    expenses: Sequence[Expense],
    mode: TimeFilter,
    today: Optional[datetime.date] = None,
) -> ExpenseSummary:
    filtered = filter_expenses(expenses, mode, today)
    return ExpenseSummary(filtered, total_spending(filtered), category_totals(filtered))
