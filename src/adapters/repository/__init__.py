"""Repository adapters - Database implementations."""

from .postgres import PostgresDatabase, PostgresTransaction, open_pool

__all__ = ["PostgresDatabase", "PostgresTransaction", "open_pool"]
