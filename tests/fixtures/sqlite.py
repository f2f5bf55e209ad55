import sqlite3

import pytest


@pytest.fixture
def sqlite_conn():
    """Create an in-memory SQLite database with two test rows"""
    conn = sqlite3.connect(':memory:')

    create_table = """
    CREATE TABLE test (
        id INTEGER PRIMARY KEY,
        name TEXT NOT NULL UNIQUE,
        email_address TEXT,
        created_at TEXT,
        amount NUMERIC,
        is_active INTEGER NOT NULL
    )
    """
    conn.execute(create_table)

    insert_data = """
    INSERT INTO test (id, name, email_address, created_at, amount, is_active) VALUES
    (1, 'Alice', 'alice@example.com', '2023-05-15 14:30:45', 10.5, 1),
    (2, 'Bob', NULL, NULL, 20, 0)
    """
    conn.execute(insert_data)
    conn.commit()

    yield conn
    conn.close()
