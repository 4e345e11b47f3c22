"""
Domain exceptions - Semantic error types for fixture loading and cleanup.

This module defines the error taxonomy of the fixture manager. Driver
exceptions are never raised directly; they are chained as ``__cause__``
of one of these types so callers can react without importing a driver.
"""


class FixtureError(Exception):
    """Base class for fixture domain errors."""

    pass


class DatabaseConnectionError(FixtureError):
    """The database handle or pool could not be opened."""

    pass


class LoadError(FixtureError):
    """Base class for failures while loading fixture files."""

    pass


class FixtureFileError(LoadError):
    """A fixture file could not be read."""

    def __init__(self, path: str) -> None:
        super().__init__(f"failed to read fixture file {path}")
        self.path = path


class DecodeError(LoadError):
    """Fixture content is not a table -> record list mapping."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"failed to decode fixture file {path}: {reason}")
        self.path = path
        self.reason = reason


class InsertError(LoadError):
    """An insert statement for a table failed."""

    def __init__(self, table: str, path: str | None = None) -> None:
        where = f" from {path}" if path else ""
        super().__init__(f"failed to insert records for table {table}{where}")
        self.table = table
        self.path = path


class DirectoryError(LoadError):
    """The fixtures directory could not be enumerated."""

    def __init__(self, path: str) -> None:
        super().__init__(f"failed to read fixtures directory {path}")
        self.path = path


class TransactionError(FixtureError):
    """Begin or commit of a transaction failed."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(message)
        self.operation = operation


class CleanupError(FixtureError):
    """A cleanup delete for a table failed."""

    def __init__(self, table: str) -> None:
        super().__init__(f"failed to cleanup table {table}")
        self.table = table


class InvalidIdentifierError(FixtureError, ValueError):
    """Table or column name outside the allowed identifier pattern."""

    def __init__(self, name: str) -> None:
        super().__init__(f"invalid SQL identifier: {name!r}")
        self.name = name


class HealthCheckTimeout(FixtureError):
    """Health endpoint did not answer 200 within the allowed attempts."""

    def __init__(self, url: str, attempts: int) -> None:
        super().__init__(f"server at {url} did not respond after {attempts} attempts")
        self.url = url
        self.attempts = attempts


class AppStartupError(FixtureError):
    """The supervised application failed to start."""

    pass
