"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the fixture manager and the
runner require from infrastructure. Adapters implement these protocols
structurally; no inheritance is needed.
"""

from collections.abc import Sequence
from typing import Any, Protocol


class Transaction(Protocol):
    """A single open database transaction."""

    def execute(self, sql: str, params: Sequence[Any]) -> None:
        """
        Execute one parameterized statement inside the transaction.

        Args:
            sql: Statement text using the database's positional placeholder
            params: Values bound positionally to the placeholders
        """
        ...

    def commit(self) -> None:
        """Commit the transaction."""
        ...

    def rollback(self) -> None:
        """Roll the transaction back."""
        ...

    def close(self) -> None:
        """
        Release the underlying connection.

        Called exactly once on every exit path, after commit or rollback.
        """
        ...


class Database(Protocol):
    """
    Port interface for the raw transactional SQL capability.

    The connection (or pool) behind it is borrowed from the caller; the
    fixture manager never closes it.
    """

    placeholder: str

    def begin(self) -> Transaction:
        """
        Open a new transaction.

        Returns:
            Transaction that must be committed or rolled back, then closed
        """
        ...


class AppStarter(Protocol):
    """Port interface for the application under test."""

    def start(self) -> None:
        """
        Start the application.

        May block for as long as the application serves requests; it is run
        on a supervised background worker.
        """
        ...

    def stop(self) -> None:
        """Stop the application."""
        ...
