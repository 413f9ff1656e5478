"""
Example 01: Basic Mapping

This example derives a row mapper for a dataclass, builds a SELECT from the
derived column list and converts SQLite rows into records.
"""

import sqlite3
from dataclasses import dataclass
from typing import Annotated

from pg_mapper import Ignore, postgres_mapper


@postgres_mapper(table="users")
@dataclass
class User:
    """User record; the password hash never leaves the database."""
    id: int
    name: str
    email: str
    password_hash: Annotated[str, Ignore] = ""


def main():
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    conn.execute("""
        CREATE TABLE users (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            email TEXT NOT NULL,
            password_hash TEXT
        )
    """)
    conn.executemany(
        "INSERT INTO users (name, email, password_hash) VALUES (?, ?, ?)",
        [("Alice", "alice@example.com", "x"), ("Bob", "bob@example.com", "y")],
    )

    print("=== Basic Mapping ===\n")

    print("1. Derived metadata:")
    print(f"   sql_table()        = {User.sql_table()!r}")
    print(f"   sql_fields()       = {User.sql_fields()!r}")
    print(f"   sql_table_fields() = {User.sql_table_fields()!r}\n")

    print("2. Rows to records:")
    sql = f"SELECT {User.sql_fields()} FROM {User.sql_table()} ORDER BY id"
    for row in conn.execute(sql):
        user = User.from_row(row)
        print(f"   - {user}")
    print()

    conn.close()


if __name__ == "__main__":
    main()
