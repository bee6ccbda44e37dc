from datetime import date, timedelta
import logging
import random
import sqlite3
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from models import Expense, ExpenseInput
from summaries import OTHER_CATEGORY

logger = logging.getLogger(__name__)

DATABASE_DATE_FORMAT = "%Y-%m-%d"

SEED_CATEGORIES = ("Food", "Books", "Rent", "Transport", "Coffee")
SEED_NOTES = ("used", "weekly groceries", "bus pass", None, None)


def today_string() -> str:
    """Today's local date as stored in the date column"""
    return date.today().strftime(DATABASE_DATE_FORMAT)


def create_expenses_table(connection: sqlite3.Connection) -> None:
    """Create Expenses Table in the database if it doesn't already exist.
    Tables created before the date column existed get it added here"""
    logger.info("Creating expenses table")
    init_expenses_query = """CREATE TABLE IF NOT EXISTS expenses(
   id INTEGER PRIMARY KEY AUTOINCREMENT,
   amount REAL NOT NULL,
   category TEXT NOT NULL,
   note TEXT,
   date TEXT);"""
    execute_query(connection, init_expenses_query)

    try:
        execute_query(connection, "ALTER TABLE expenses ADD COLUMN date TEXT;")
    except sqlite3.OperationalError as e:
        # duplicate column name: date
        logger.debug(f"Skipping date column migration: {e}")


def seed_expenses_table(connection: sqlite3.Connection, count: int = 20) -> None:
    """Insert random sample Expense rows spread over the last two months"""
    logger.info(f"Seeding expenses table with {count} rows")

    for _ in range(count):
        seed_expense = {
            "amount": round(random.uniform(1, 120), 2),
            "category": random.choice(SEED_CATEGORIES),
            "note": random.choice(SEED_NOTES),
            "date": (date.today() - timedelta(days=random.randint(0, 60))).strftime(
                DATABASE_DATE_FORMAT
            ),
        }
        seed_expense_query = """INSERT into expenses(amount, category, note, date)
        VALUES(:amount, :category, :note, :date);"""
        execute_query(connection, seed_expense_query, seed_expense)


def execute_query(
    connection: sqlite3.Connection, query: str, args: Optional[dict] = None
) -> list:
    """Given sqlite3.Connection and a string query (and optionally necessary query args as a dict),
    Attempt to execute query with cursor, commit transaction, and return fetched rows"""
    cur = connection.cursor()
    if args is not None:
        cur.execute(query, args)
    else:
        cur.execute(query)
    connection.commit()
    results = cur.fetchall()
    cur.close()
    return results


def execute_write(
    connection: sqlite3.Connection, query: str, args: dict
) -> Tuple[Optional[int], int]:
    """Like execute_query for INSERT / UPDATE / DELETE, returning (lastrowid, rowcount)"""
    cur = connection.cursor()
    cur.execute(query, args)
    connection.commit()
    result = (cur.lastrowid, cur.rowcount)
    cur.close()
    return result


def validate_expense(
    amount: Any, category: Any, note: Any = None
) -> Optional[ExpenseInput]:
    """Return the cleaned form input, or None if it would make an invalid expense"""
    try:
        return ExpenseInput(amount=amount, category=category, note=note)
    except ValidationError as e:
        logger.info(f"Ignoring invalid expense input: {e.error_count()} error(s)")
        return None


class ExpenseService:
    """Namespace for Database Related Expense Operations"""

    def list_all_expenses(connection: sqlite3.Connection) -> List[Expense]:
        """Returns all expenses. Ordered in reverse creation order"""
        select = "SELECT id, amount, category, note, date FROM expenses ORDER BY id DESC;"
        expense_rows = execute_query(connection, select)
        return [Expense(**dict(row)) for row in expense_rows]

    def get_expense(
        connection: sqlite3.Connection, expense_id: int
    ) -> Optional[Expense]:
        select = "SELECT id, amount, category, note, date FROM expenses WHERE id = :id;"
        expense_rows = execute_query(connection, select, {"id": expense_id})
        if not expense_rows:
            return None
        return Expense(**dict(expense_rows[0]))

    def list_category_totals(connection: sqlite3.Connection) -> Dict[str, float]:
        """Sum of amounts per trimmed category over the whole table, blank categories as Other.
        Ordered like the first appearance of each category in the newest first feed"""
        select = """SELECT TRIM(category, :blank) AS category, SUM(amount) AS total FROM expenses
        GROUP BY TRIM(category, :blank) ORDER BY MAX(id) DESC;"""
        rows = execute_query(connection, select, {"blank": " \t\r\n"})
        return {(row["category"] or OTHER_CATEGORY): row["total"] or 0.0 for row in rows}

    def create_expense(
        connection: sqlite3.Connection,
        amount: Any,
        category: Any,
        note: Any = None,
    ) -> Optional[int]:
        """Create a Expense in the database dated today.
        Invalid input is silently ignored and returns None, otherwise the new id"""
        expense = validate_expense(amount, category, note)
        if expense is None:
            return None

        create_expense_query = """INSERT into expenses(amount, category, note, date)
    VALUES(:amount, :category, :note, :date);"""
        expense_id, _ = execute_write(
            connection,
            create_expense_query,
            {**expense.model_dump(), "date": today_string()},
        )
        logger.info(f"Created expense #{expense_id} ({expense.category})")
        return expense_id

    def update_expense(
        connection: sqlite3.Connection,
        expense_id: int,
        amount: Any,
        category: Any,
        note: Any = None,
    ) -> bool:
        """Overwrite amount, category and note of an existing Expense, keeping its date.
        Unknown ids and invalid input are ignored"""
        expense = validate_expense(amount, category, note)
        if expense is None:
            return False

        existing = ExpenseService.get_expense(connection, expense_id)
        if existing is None:
            logger.info(f"Not updating expense #{expense_id}: no such expense")
            return False

        # A repaired or unreadable date is rewritten as today
        if existing.date is not None:
            date_to_save = existing.date.strftime(DATABASE_DATE_FORMAT)
        else:
            date_to_save = today_string()

        update_expense_query = """UPDATE expenses SET amount=:amount, category=:category, note=:note, date=:date WHERE id=:id;"""
        execute_write(
            connection,
            update_expense_query,
            {**expense.model_dump(), "date": date_to_save, "id": expense_id},
        )
        logger.info(f"Updated expense #{expense_id}")
        return True

    def delete_expense(connection: sqlite3.Connection, expense_id: int) -> bool:
        """Delete a Expense in the database. Returns False if there was nothing to delete"""
        delete_expense_query = """DELETE from expenses WHERE id = :id;"""
        _, deleted = execute_write(connection, delete_expense_query, {"id": expense_id})
        if deleted:
            logger.info(f"Deleted expense #{expense_id}")
        return deleted > 0
