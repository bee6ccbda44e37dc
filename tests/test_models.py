"""Tests for the expense models: strict form input, lenient stored rows."""
import math
from datetime import date

import pytest
from pydantic import ValidationError

from models import Expense, ExpenseInput


class TestExpenseInput:
    def test_valid_input(self):
        expense = ExpenseInput(amount=12.5, category="Books", note="used")
        assert expense.amount == 12.5
        assert expense.category == "Books"
        assert expense.note == "used"

    def test_amount_from_form_text(self):
        """Amounts typed into the form arrive as strings"""
        assert ExpenseInput(amount="12.50", category="Food").amount == 12.5

    def test_whitespace_is_stripped(self):
        expense = ExpenseInput(amount=3, category="  Food  ", note="  lunch ")
        assert expense.category == "Food"
        assert expense.note == "lunch"

    def test_empty_note_becomes_none(self):
        assert ExpenseInput(amount=3, category="Food", note="   ").note is None
        assert ExpenseInput(amount=3, category="Food").note is None

    @pytest.mark.parametrize(
        "amount",
        [0, -1, -0.01, math.nan, math.inf, "abc", "", None],
    )
    def test_rejects_invalid_amount(self, amount):
        with pytest.raises(ValidationError):
            ExpenseInput(amount=amount, category="Food")

    @pytest.mark.parametrize("category", ["", "   ", None])
    def test_rejects_empty_category(self, category):
        with pytest.raises(ValidationError):
            ExpenseInput(amount=5, category=category)


class TestExpense:
    def test_stored_row(self):
        expense = Expense(id=4, amount=12.5, category="Books", note="used", date="2026-03-02")
        assert expense.id == 4
        assert expense.date == date(2026, 3, 2)

    @pytest.mark.parametrize("stored_date", [None, ""])
    def test_missing_date_is_repaired_to_today(self, stored_date):
        expense = Expense(id=1, amount=1, category="Food", date=stored_date)
        assert expense.date == date.today()

    def test_date_defaults_to_today(self):
        assert Expense(id=1, amount=1, category="Food").date == date.today()

    def test_unparseable_date_is_unknown(self):
        assert Expense(id=1, amount=1, category="Food", date="last tuesday").date is None

    def test_malformed_amount_and_category_do_not_fail(self):
        expense = Expense(id=1, amount="oops", category=None, date="2026-01-01")
        assert expense.amount is None
        assert expense.category == ""
