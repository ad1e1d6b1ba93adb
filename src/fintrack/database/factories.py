"""Database factory functions for creating database instances."""

from typing import Optional

from fintrack.config import default_database_path
from fintrack.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks FINTRACK_DB_PATH
            environment variable, then defaults to ~/.fintrack/fintrack.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = default_database_path()

    return SQLAlchemyDatabase(f"sqlite:///{database_path}")
