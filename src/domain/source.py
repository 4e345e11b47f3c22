"""
Fixture definition source - discovery and decoding of fixture files.

A fixture file is a YAML document whose top level maps table names to a
list of records. Records map column names to scalar values. The string
``NOW()`` is kept as-is here; it is resolved when the record is bound.

Example::

    users:
      - id: 1
        name: alice
        created_at: NOW()
    memberships:
      - user_id: 1
        org_id: 7
"""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from .exceptions import DecodeError, DirectoryError, FixtureFileError
from .values import FixtureSet, classify_value

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS: tuple[str, ...] = (".yml", ".yaml")


def is_fixture_file(path: Path, extensions: Iterable[str]) -> bool:
    """Check whether a path's extension is in the allow-list."""
    return path.suffix in tuple(extensions)


def list_fixture_files(directory: str | Path, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> list[Path]:
    """
    List fixture files directly inside a directory, sorted by name.

    Subdirectories and files with other extensions are skipped.

    Raises:
        DirectoryError: If the directory cannot be enumerated
    """
    directory = Path(directory)
    extensions = tuple(extensions)
    try:
        entries = sorted(directory.iterdir(), key=lambda entry: entry.name)
    except OSError as e:
        raise DirectoryError(str(directory)) from e

    files = []
    for entry in entries:
        if entry.is_file() and is_fixture_file(entry, extensions):
            files.append(entry)
        else:
            logger.debug("Skipping non-fixture entry: %s", entry.name)
    return files


def read_fixture_file(path: str | Path) -> FixtureSet:
    """
    Read and decode one fixture file.

    Raises:
        FixtureFileError: If the file cannot be read
        DecodeError: If the content is not a table -> record list mapping
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FixtureFileError(str(path)) from e
    return decode_fixtures(content, str(path))


def decode_fixtures(content: str, path: str = "<fixture>") -> FixtureSet:
    """Decode YAML fixture content into a FixtureSet."""
    try:
        document = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise DecodeError(path, str(e)) from e

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise DecodeError(path, "top level must be a mapping of table names")

    fixtures: FixtureSet = {}
    for table, records in document.items():
        if not isinstance(table, str):
            raise DecodeError(path, f"table name must be a string, got {table!r}")
        if records is None:
            records = []
        if not isinstance(records, list):
            raise DecodeError(path, f"records for table {table} must be a list")
        fixtures[table] = [_decode_record(record, table, path) for record in records]
    return fixtures


def _decode_record(record: Any, table: str, path: str) -> dict[str, Any]:
    if not isinstance(record, dict):
        raise DecodeError(path, f"record in table {table} must be a mapping")
    for column, value in record.items():
        if not isinstance(column, str):
            raise DecodeError(path, f"column name in table {table} must be a string, got {column!r}")
        classify_value(value, path)
    return dict(record)
