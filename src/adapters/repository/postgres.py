"""
PostgreSQL database adapter - Implements the Database protocol.

This module provides the PostgreSQL implementation of the fixture manager's
database port using psycopg3 with raw SQL and a psycopg_pool connection pool.

Each transaction checks a connection out of the pool and returns it when the
transaction is closed. psycopg connections are not in autocommit mode, so the
first statement opens the transaction and ``commit()``/``rollback()`` end it.
"""

import logging
from collections.abc import Sequence
from typing import Any

import psycopg
from psycopg_pool import ConnectionPool, PoolTimeout

from src.config.settings import Settings
from src.domain.exceptions import DatabaseConnectionError

logger = logging.getLogger(__name__)


class PostgresTransaction:
    """
    Implements Transaction protocol on one pooled psycopg connection.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, pool: ConnectionPool, conn: psycopg.Connection) -> None:
        self._pool = pool
        self._conn = conn

    def execute(self, sql: str, params: Sequence[Any]) -> None:
        with self._conn.cursor() as cursor:
            cursor.execute(sql, list(params))

    def commit(self) -> None:
        self._conn.commit()

    def rollback(self) -> None:
        self._conn.rollback()

    def close(self) -> None:
        """Return the connection to the pool (the pool discards broken ones)."""
        self._pool.putconn(self._conn)


class PostgresDatabase:
    """
    Implements Database protocol via psycopg3.

    The pool is borrowed from the caller and never closed here.
    All SQL uses parameterized queries with ``%s`` placeholders.
    """

    placeholder = "%s"

    def __init__(self, pool: ConnectionPool, timeout: float | None = None) -> None:
        """
        Initialize database with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
            timeout: Seconds to wait for a free connection (pool default if None)
        """
        self._pool = pool
        self._timeout = timeout

    def begin(self) -> PostgresTransaction:
        conn = self._pool.getconn(timeout=self._timeout)
        return PostgresTransaction(self._pool, conn)


def open_pool(settings: Settings) -> ConnectionPool:
    """
    Open a connection pool and wait until it is ready.

    Args:
        settings: Runner settings (database_url, pool sizes, connect_timeout)

    Returns:
        Open psycopg3 ConnectionPool, owned by the caller

    Raises:
        DatabaseConnectionError: If no connection can be established in time
    """
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
        open=False,
    )
    try:
        pool.open(wait=True, timeout=settings.connect_timeout)
    except (PoolTimeout, psycopg.Error) as e:
        pool.close()
        logger.error(f"Database connection failed: {e}")
        raise DatabaseConnectionError("failed to connect to database") from e

    logger.info("Database connection pool ready")
    return pool
