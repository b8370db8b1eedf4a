"""
SQLite plumbing for the snapshot backend.
"""

import sqlite3
from contextlib import contextmanager
from typing import Generator

from .config import ensure_db_directory


@contextmanager
def get_db(db_path: str) -> Generator[sqlite3.Connection, None, None]:
    """Get a SQLite database connection."""
    conn = sqlite3.connect(db_path)
    try:
        yield conn
    finally:
        conn.close()


def init_db(db_path: str):
    """Initialize the database with the documents table."""
    if db_path != ":memory:":
        ensure_db_directory(db_path)

    with get_db(db_path) as conn:
        cursor = conn.cursor()

        # One row per resident document; text is the natural key
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS documents (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                text TEXT NOT NULL UNIQUE,
                metadata TEXT,
                timestamp INTEGER NOT NULL,
                hits INTEGER NOT NULL DEFAULT 0,
                vector TEXT,
                vector_mag REAL
            )
        ''')

        cursor.execute('CREATE INDEX IF NOT EXISTS idx_documents_hits_ts ON documents(hits, timestamp)')

        conn.commit()


def health_check(db_path: str) -> bool:
    """Check that the documents table exists."""
    try:
        with get_db(db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT name FROM sqlite_master WHERE type='table';")
            table_names = [table[0] for table in cursor.fetchall()]
            return 'documents' in table_names
    except sqlite3.Error:
        return False
