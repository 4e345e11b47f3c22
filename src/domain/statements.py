"""
SQL statement builders for fixture inserts and cleanup deletes.

Identifiers are checked against a strict pattern and double-quoted before
they are placed in SQL text. Values never appear in SQL text; they are
returned separately for positional binding.
"""

import re
from collections.abc import Mapping, Sequence
from typing import Any

from .exceptions import InvalidIdentifierError

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def quote_identifier(name: str) -> str:
    """
    Validate and quote a table or column name.

    Dot-qualified names (``schema.table``) are quoted part by part.

    Raises:
        InvalidIdentifierError: If any part falls outside the allowed pattern
    """
    if not isinstance(name, str):
        raise InvalidIdentifierError(str(name))
    parts = name.split(".")
    if not all(_IDENTIFIER.match(part) for part in parts):
        raise InvalidIdentifierError(name)
    return ".".join(f'"{part}"' for part in parts)


def build_insert(table: str, columns: Sequence[str], placeholder: str) -> str:
    """Build a positional INSERT for the given columns."""
    if not columns:
        return f"INSERT INTO {quote_identifier(table)} DEFAULT VALUES"
    quoted_columns = ", ".join(quote_identifier(column) for column in columns)
    placeholders = ", ".join(placeholder for _ in columns)
    return f"INSERT INTO {quote_identifier(table)} ({quoted_columns}) VALUES ({placeholders})"


def build_delete(
    table: str,
    key_columns: Sequence[str],
    key_tuples: Sequence[Mapping[str, Any]],
    placeholder: str,
) -> tuple[str, list[Any]] | None:
    """
    Build one DELETE covering every tracked key tuple of a table.

    Each tuple becomes an AND-group of ``column = value`` conditions over the
    key columns it carries; groups are joined with OR so composite keys are
    handled the same way as single keys.

    Returns:
        (sql, params), or None when no tuple carries any key column
    """
    conditions: list[str] = []
    params: list[Any] = []

    for key_tuple in key_tuples:
        group = []
        for column in key_columns:
            if column in key_tuple:
                group.append(f"{quote_identifier(column)} = {placeholder}")
                params.append(key_tuple[column])
        if group:
            conditions.append("(" + " AND ".join(group) + ")")

    if not conditions:
        return None

    sql = f"DELETE FROM {quote_identifier(table)} WHERE " + " OR ".join(conditions)
    return sql, params
