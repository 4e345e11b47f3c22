"""Table key registry - primary-key columns per table."""

from collections.abc import Sequence

DEFAULT_KEY_COLUMNS: tuple[str, ...] = ("id",)


class TableKeyRegistry:
    """
    Maps table names to the columns that identify their rows.

    Tables without an explicit entry use a single ``id`` column. Column
    names are not checked against the schema.
    """

    def __init__(self) -> None:
        self._keys: dict[str, tuple[str, ...]] = {}

    def configure(self, table: str, key_columns: Sequence[str]) -> None:
        """Override the key columns for a table."""
        self._keys[table] = tuple(key_columns)

    def keys_for(self, table: str) -> tuple[str, ...]:
        """Return the configured key columns, or the default ``("id",)``."""
        return self._keys.get(table, DEFAULT_KEY_COLUMNS)

    def __contains__(self, table: object) -> bool:
        return table in self._keys
