import sqlite3

import pytest

from services import create_expenses_table


@pytest.fixture
def connection():
    """In-memory expenses database, bootstrapped like the app does"""
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    create_expenses_table(conn)
    yield conn
    conn.close()


@pytest.fixture
def legacy_connection():
    """In-memory database holding an expenses table from before the date column"""
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    conn.execute(
        """CREATE TABLE expenses(
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        amount REAL NOT NULL,
        category TEXT NOT NULL,
        note TEXT);"""
    )
    conn.execute("INSERT INTO expenses(amount, category, note) VALUES (9.5, 'Coffee', NULL);")
    conn.commit()
    yield conn
    conn.close()
