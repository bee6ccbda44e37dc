import logging
import logging.config
import sqlite3

import streamlit as st

from config import get_settings
from services import create_expenses_table, seed_expenses_table
from views import render_chart, render_expenses

logger = logging.getLogger(__name__)


@st.cache_resource
def configure_logging(level: str = "INFO") -> None:
    """Send all application logs through a single rich console handler.
    Cached so reruns do not rebuild the handler"""
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {"format": "%(name)s - %(message)s"},
            },
            "handlers": {
                "default": {
                    "class": "rich.logging.RichHandler",
                    "formatter": "default",
                    "rich_tracebacks": True,
                    "show_time": True,
                    "show_path": False,
                    "log_time_format": "%Y-%m-%d %H:%M:%S",
                },
            },
            "root": {"handlers": ["default"], "level": level.upper()},
        }
    )


def main() -> None:
    """Main Streamlit App Entry"""
    settings = get_settings()
    configure_logging(settings.log_level)
    connection = get_connection(settings.database_uri)
    init_db(connection, settings.seed_demo_data, settings.seed_count)

    st.header("Student Expense Tracker")
    render_sidebar(connection)


def render_sidebar(connection: sqlite3.Connection) -> None:
    """Provides Radio Buttons for which view to render"""
    views = {
        "Expenses": render_expenses,  # Expenses first for display default
        "Chart": render_chart,
    }
    choice = st.sidebar.radio("Go To Page:", views.keys())
    render_func = views.get(choice)
    render_func(connection)


@st.cache_resource
def get_connection(connection_string: str = ":memory:") -> sqlite3.Connection:
    """Make a connection object to sqlite3 with key-value Rows as outputs
    Threading in Streamlit / Python with sqlite:
    - https://discuss.streamlit.io/t/prediction-analysis-and-creating-a-database/3504/2
    - https://stackoverflow.com/questions/48218065/programmingerror-sqlite-objects-created-in-a-thread-can-only-be-used-in-that-sa
    """
    logger.info(f"Opening expenses database {connection_string}")
    connection = sqlite3.connect(connection_string, check_same_thread=False)
    connection.row_factory = sqlite3.Row
    return connection


@st.cache_resource(hash_funcs={sqlite3.Connection: id})
def init_db(connection: sqlite3.Connection, seed: bool = False, seed_count: int = 20) -> None:
    """Create table and seed data as needed for initialization"""
    create_expenses_table(connection)
    if seed:
        seed_expenses_table(connection, seed_count)


if __name__ == "__main__":
    main()
