"""
Fixture manager - transactional loading, tracking and cleanup of test data.

Loading
=======

Each fixture file is inserted inside one transaction. For every record the
configured key columns are tracked *before* the insert executes, so the
tracker reflects attempted inserts in processing order. If any insert fails
the file's transaction is rolled back and ``InsertError`` names the table;
tracked entries for that file are kept.

Cleanup
=======

One DELETE per tracked table, each matching exactly the tracked key tuples,
all inside a single transaction. Tracking is cleared only after that
transaction commits, so a failed cleanup can simply be retried.

Neither operation is safe for concurrent use on the same manager.
"""

import logging
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from .exceptions import CleanupError, InsertError, TransactionError
from .keys import TableKeyRegistry
from .ports import Database, Transaction
from .source import DEFAULT_EXTENSIONS, list_fixture_files, read_fixture_file
from .statements import build_delete, build_insert
from .tracker import InsertionTracker, KeyTuple
from .values import Record, bind_value

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class FixtureConfig:
    """Fixture loading options."""

    file_extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    clock: Callable[[], datetime] = field(default=_utc_now)


class FixtureManager:
    """
    Loads fixture files into a database and removes exactly what it loaded.

    The database is borrowed; the manager owns only the key registry and
    the insertion tracker.
    """

    def __init__(self, database: Database, config: FixtureConfig | None = None) -> None:
        """
        Initialize manager with a transactional database.

        Args:
            database: Database port implementation (connection borrowed)
            config: Loading options, defaults to FixtureConfig()
        """
        self._database = database
        self._config = config or FixtureConfig()
        self._keys = TableKeyRegistry()
        self._tracker = InsertionTracker()

    @property
    def config(self) -> FixtureConfig:
        return self._config

    @property
    def tracker(self) -> InsertionTracker:
        return self._tracker

    def configure_table(self, table: str, key_columns: Sequence[str]) -> None:
        """
        Set the key columns of a table whose primary key is not ``id``.

        Call during setup, before loading.
        """
        self._keys.configure(table, key_columns)

    def keys_for(self, table: str) -> tuple[str, ...]:
        return self._keys.keys_for(table)

    def load_from_directory(self, directory: str | Path) -> list[Path]:
        """
        Load every fixture file in a directory, in name order.

        Stops at the first failing file. Files loaded before it stay
        committed.

        Returns:
            Paths of the files that were loaded

        Raises:
            DirectoryError: If the directory cannot be enumerated
            LoadError: If a file fails to load
            TransactionError: If a file's transaction cannot begin or commit
        """
        files = list_fixture_files(directory, self._config.file_extensions)
        for path in files:
            self.load_from_file(path)
        logger.info("Loaded %d fixture file(s) from %s", len(files), directory)
        return files

    def load_from_file(self, path: str | Path) -> None:
        """
        Load one fixture file inside a single transaction.

        Raises:
            FixtureFileError: If the file cannot be read
            DecodeError: If the file content is malformed
            InsertError: If an insert fails; the file's transaction is rolled back
            TransactionError: If the transaction cannot begin or commit
        """
        fixtures = read_fixture_file(path)

        with self._transaction(f"load {path}") as tx:
            for table, records in fixtures.items():
                try:
                    self._insert_records(tx, table, records)
                except Exception as e:
                    raise InsertError(table, str(path)) from e

        logger.info(
            "Loaded fixture file %s (%d table(s), %d record(s))",
            path,
            len(fixtures),
            sum(len(records) for records in fixtures.values()),
        )

    def cleanup(self) -> None:
        """
        Delete every tracked row across all tables in one transaction.

        A no-op when nothing is tracked. Tracking is cleared only after a
        successful commit.

        Raises:
            CleanupError: If a table's delete fails; nothing is deleted
            TransactionError: If the transaction cannot begin or commit
        """
        if not self._tracker:
            logger.debug("No tracked fixtures to clean up")
            return

        tracked = len(self._tracker)
        with self._transaction("cleanup") as tx:
            for table, key_tuples in self._tracker.tables():
                try:
                    self._delete_tracked(tx, table, key_tuples)
                except Exception as e:
                    raise CleanupError(table) from e

        self._tracker.clear()
        logger.info("Cleaned up %d tracked fixture row(s)", tracked)

    def _insert_records(self, tx: Transaction, table: str, records: Sequence[Record]) -> None:
        key_columns = self._keys.keys_for(table)
        for record in records:
            sql = build_insert(table, list(record), self._database.placeholder)
            bound = {column: bind_value(value, self._config.clock) for column, value in record.items()}

            # Bound values are tracked so a NOW() key matches the stored timestamp.
            self._tracker.track(table, bound, key_columns)

            tx.execute(sql, list(bound.values()))

    def _delete_tracked(self, tx: Transaction, table: str, key_tuples: Sequence[KeyTuple]) -> None:
        statement = build_delete(table, self._keys.keys_for(table), key_tuples, self._database.placeholder)
        if statement is None:
            return
        sql, params = statement
        tx.execute(sql, params)

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[Transaction]:
        """
        Run a block in one transaction, committing on success.

        The transaction is rolled back if the block or the commit raises,
        and closed on every path.
        """
        try:
            tx = self._database.begin()
        except Exception as e:
            raise TransactionError(operation, f"failed to begin {operation} transaction") from e

        try:
            try:
                yield tx
            except BaseException:
                self._rollback(tx, operation)
                raise

            try:
                tx.commit()
            except Exception as e:
                self._rollback(tx, operation)
                raise TransactionError(operation, f"failed to commit {operation} transaction") from e
        finally:
            tx.close()

    def _rollback(self, tx: Transaction, operation: str) -> None:
        # The error that triggered the rollback is the one reported.
        try:
            tx.rollback()
        except Exception as e:
            logger.warning("Failed to rollback %s transaction: %s", operation, e)
