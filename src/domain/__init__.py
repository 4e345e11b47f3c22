"""
Domain layer - fixture loading, tracking and cleanup.

This package contains the core of the test-data lifecycle manager. It talks
to the database only through the port protocols in ``ports`` so that any
transactional SQL driver can be plugged in by an adapter.
"""

from .exceptions import (
    AppStartupError,
    CleanupError,
    DatabaseConnectionError,
    DecodeError,
    DirectoryError,
    FixtureError,
    FixtureFileError,
    HealthCheckTimeout,
    InsertError,
    InvalidIdentifierError,
    LoadError,
    TransactionError,
)
from .fixtures import FixtureConfig, FixtureManager
from .keys import TableKeyRegistry
from .ports import AppStarter, Database, Transaction
from .tracker import InsertionTracker
from .values import NOW_SENTINEL, FixtureSet, FixtureValue, Record, ValueKind

__all__ = [
    "AppStarter",
    "AppStartupError",
    "CleanupError",
    "Database",
    "DatabaseConnectionError",
    "DecodeError",
    "DirectoryError",
    "FixtureConfig",
    "FixtureError",
    "FixtureFileError",
    "FixtureManager",
    "FixtureSet",
    "FixtureValue",
    "HealthCheckTimeout",
    "InsertError",
    "InsertionTracker",
    "InvalidIdentifierError",
    "LoadError",
    "NOW_SENTINEL",
    "Record",
    "TableKeyRegistry",
    "Transaction",
    "TransactionError",
    "ValueKind",
]
