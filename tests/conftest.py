"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- An in-memory SQLite database behind the Database protocol
- A fixture manager wired to it
- Writing fixture files into a temporary directory
"""

import sqlite3
import textwrap
from collections.abc import Callable, Generator, Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest

from src.domain.fixtures import FixtureConfig, FixtureManager

sqlite3.register_adapter(datetime, lambda value: value.isoformat())

SCHEMA = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    created_at TEXT
);
CREATE TABLE memberships (
    user_id INTEGER NOT NULL,
    org_id INTEGER NOT NULL,
    role TEXT,
    PRIMARY KEY (user_id, org_id)
);
CREATE TABLE orders (
    id INTEGER PRIMARY KEY,
    user_id INTEGER NOT NULL,
    amount INTEGER NOT NULL
);
"""


class SQLiteTransaction:
    """Transaction protocol over a shared sqlite3 connection."""

    def __init__(self, database: "SQLiteDatabase") -> None:
        self._database = database
        self._conn = database.conn
        self._conn.execute("BEGIN")
        self.closed = False

    def execute(self, sql: str, params: Sequence[Any]) -> None:
        self._conn.execute(sql, tuple(params))

    def commit(self) -> None:
        if self._database.commit_error is not None:
            raise self._database.commit_error
        self._conn.execute("COMMIT")

    def rollback(self) -> None:
        self._conn.execute("ROLLBACK")
        if self._database.rollback_error is not None:
            raise self._database.rollback_error

    def close(self) -> None:
        self.closed = True


class SQLiteDatabase:
    """
    Database protocol over an in-memory sqlite3 connection.

    Set commit_error or rollback_error to make transactions fail.
    """

    placeholder = "?"

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn
        self.transactions: list[SQLiteTransaction] = []
        self.commit_error: Exception | None = None
        self.rollback_error: Exception | None = None

    def begin(self) -> SQLiteTransaction:
        tx = SQLiteTransaction(self)
        self.transactions.append(tx)
        return tx

    def rows(self, table: str, order_by: str = "rowid") -> list[tuple]:
        return self.conn.execute(f"SELECT * FROM {table} ORDER BY {order_by}").fetchall()


@pytest.fixture
def sqlite_conn() -> Generator[sqlite3.Connection, None, None]:
    """In-memory SQLite connection with the test schema, autocommit mode."""
    conn = sqlite3.connect(":memory:", isolation_level=None, check_same_thread=False)
    conn.executescript(SCHEMA)
    yield conn
    conn.close()


@pytest.fixture
def database(sqlite_conn: sqlite3.Connection) -> SQLiteDatabase:
    return SQLiteDatabase(sqlite_conn)


@pytest.fixture
def manager(database: SQLiteDatabase) -> FixtureManager:
    """Fixture manager with default configuration."""
    return FixtureManager(database, FixtureConfig())


@pytest.fixture
def fixtures_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "fixtures"
    directory.mkdir()
    return directory


@pytest.fixture
def write_fixture(fixtures_dir: Path) -> Callable[[str, str], Path]:
    """Write a fixture file (dedented) and return its path."""

    def _write(name: str, content: str) -> Path:
        path = fixtures_dir / name
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path

    return _write
