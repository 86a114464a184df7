"""
Database connection management.

Provides the SQLite connection backing the durable tracker store.
"""

import sqlite3
from pathlib import Path

DEFAULT_DB_PATH = "recycle_tracker.db"


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Create and return a SQLite database connection with foreign keys enabled.

    Args:
        db_path: Path to SQLite database file, or ":memory:"

    Returns:
        SQLite connection with foreign key constraints enabled
    """
    if db_path != ":memory:":
        path = Path(db_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        db_path = str(path)
    conn = sqlite3.connect(db_path)
    conn.execute("PRAGMA foreign_keys = ON")
    return conn
