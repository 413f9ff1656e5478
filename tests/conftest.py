"""Shared test fixtures."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator

import pytest


@pytest.fixture
def sqlite_conn() -> Iterator[sqlite3.Connection]:
    """SQLite in-memory connection returning ``sqlite3.Row`` rows."""
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture
def user_row() -> dict[str, object]:
    """A plain dict row for the users table."""
    return {"id": 1, "name": "Alice", "email": "alice@ex.com"}
