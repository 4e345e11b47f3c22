"""
Insertion tracker - key tuples of every attempted fixture insert.

Entries are recorded just before an insert executes and are not removed if
the surrounding transaction rolls back. Over-tracking only leads to a delete
that matches nothing, so it never removes data that was not loaded.

Key values are the bound parameters, so a ``NOW()`` key column holds the
timestamp that was actually inserted rather than the sentinel string.
"""

from collections.abc import Iterator, Mapping, Sequence

from .values import FixtureValue

KeyTuple = dict[str, FixtureValue]


class InsertionTracker:
    """Per-table, insertion-ordered record of key tuples."""

    def __init__(self) -> None:
        self._inserted: dict[str, list[KeyTuple]] = {}

    def track(self, table: str, record: Mapping[str, FixtureValue], key_columns: Sequence[str]) -> KeyTuple | None:
        """
        Record the key columns present in ``record``.

        Returns:
            The tracked key tuple, or None when the record carries none of
            the key columns (nothing is tracked then)
        """
        key_tuple = {column: record[column] for column in key_columns if column in record}
        if not key_tuple:
            return None
        self._inserted.setdefault(table, []).append(key_tuple)
        return key_tuple

    def tables(self) -> Iterator[tuple[str, list[KeyTuple]]]:
        """Iterate (table, key tuples) in first-tracked order."""
        return iter(list(self._inserted.items()))

    def snapshot(self) -> dict[str, list[KeyTuple]]:
        """Return a deep-enough copy of the tracked state."""
        return {table: [dict(t) for t in tuples] for table, tuples in self._inserted.items()}

    def clear(self) -> None:
        self._inserted = {}

    def __len__(self) -> int:
        return sum(len(tuples) for tuples in self._inserted.values())

    def __bool__(self) -> bool:
        return any(self._inserted.values())
