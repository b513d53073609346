"""Database schema and connection management for SQLite."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Union


def init_database(database_path: Union[str, Path]) -> None:
    """
    Initialize database and create tables if they don't exist.
    """
    db_path = Path(database_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    with get_db_connection(db_path) as conn:
        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS contacts (
                identifier TEXT PRIMARY KEY,
                display_name TEXT NOT NULL,
                send_address TEXT,
                send_keypair_name TEXT,
                receive_address TEXT,
                send_list_hash TEXT,
                send_list_files TEXT NOT NULL DEFAULT '[]',
                receive_list_hash TEXT,
                receive_list_files TEXT NOT NULL DEFAULT '[]',
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_contacts_display_name ON contacts(display_name)
        """)

        conn.commit()


@contextmanager
def get_db_connection(database_path: Union[str, Path]) -> Generator[sqlite3.Connection, None, None]:
    """
    Context manager for database connections.
    """
    conn = sqlite3.connect(str(database_path))
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()
