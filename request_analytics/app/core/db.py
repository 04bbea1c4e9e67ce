"""
SQLite database integration.

This module provides functions for resolving the database path
(``get_database_path``), opening connections (``get_connection`` and
``get_cursor``) and creating the ``requests`` table (``init_db``).
It uses SQLite as a lightweight embedded database; to switch to
another DBMS you would replace connection logic and adapt SQL syntax
accordingly.

The schema is created idempotently with ``IF NOT EXISTS`` statements.
There is no migration history: the table layout is fixed.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .config import resolve_path

SCHEMA = """
CREATE TABLE IF NOT EXISTS requests (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    timestamp INTEGER NOT NULL,
    domain TEXT NOT NULL,
    method TEXT NOT NULL,
    path TEXT NOT NULL,
    country TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_requests_timestamp ON requests(timestamp);
"""


def get_database_path(database_url: str) -> str:
    """Compute the path to the SQLite database file.

    Absolute paths are used as is; relative paths are resolved
    against the project root.
    """
    return resolve_path(database_url)


def get_connection(database_path: str) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so that columns can be read
    by name.
    """
    conn = sqlite3.connect(database_path)
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_cursor(database_path: str) -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor and closes the connection on exit."""
    conn = get_connection(database_path)
    try:
        yield conn.cursor()
        conn.commit()
    finally:
        conn.close()


def init_db(database_path: str) -> None:
    """Create the ``requests`` table and its timestamp index if missing."""
    parent = Path(database_path).parent
    parent.mkdir(parents=True, exist_ok=True)
    with get_cursor(database_path) as cursor:
        cursor.executescript(SCHEMA)
