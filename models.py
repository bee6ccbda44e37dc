import math
import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class BaseExpense(BaseModel):
    amount: Optional[float]
    category: str
    note: Optional[str] = None


class ExpenseInput(BaseExpense):
    """Amount, category and note as entered in the expense form"""

    amount: float = Field(gt=0, allow_inf_nan=False)
    category: str = Field(min_length=1)

    @field_validator("category", mode="before")
    @classmethod
    def strip_category(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("note", mode="before")
    @classmethod
    def empty_note_to_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip() or None
        return value


class Expense(BaseExpense):
    """A row read back from the expenses table.

    Reading is lenient so one malformed row never breaks the feed:
    - a missing date is repaired to today (not written back)
    - an unparseable date becomes None
    - a missing or non-numeric amount becomes None
    """

    id: int
    category: str = ""
    date: Optional[datetime.date] = Field(default_factory=datetime.date.today)

    @field_validator("amount", mode="before")
    @classmethod
    def lenient_amount(cls, value: Any) -> Optional[float]:
        try:
            amount = float(value)
        except (TypeError, ValueError):
            return None
        return amount if math.isfinite(amount) else None

    @field_validator("category", mode="before")
    @classmethod
    def lenient_category(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""

    @field_validator("date", mode="before")
    @classmethod
    def repair_date(cls, value: Any) -> Optional[datetime.date]:
        if value is None or value == "":
            return datetime.date.today()
        if isinstance(value, datetime.date):
            return value
        try:
            return datetime.date.fromisoformat(str(value))
        except ValueError:
            return None
