"""
Fixture runner - test run orchestration around the fixture manager.

Lifecycle:
- Open the database pool and build the fixture manager
- Start the application under test (if any) on a supervised worker
- Wait for its health endpoint
- Load fixtures, run the tests
- Tear down in reverse order: fixtures, database pool, application

The runner is constructed once and passed to whatever needs it; there is no
module-level instance.
"""

import logging
import threading
import time
from collections.abc import Callable, Sequence
from concurrent.futures import Future
from pathlib import Path
from types import TracebackType

import httpx
from psycopg_pool import ConnectionPool

from src.adapters.http.health import HealthChecker
from src.adapters.repository.postgres import PostgresDatabase, open_pool
from src.config.env import load_env_files
from src.config.settings import Settings, get_settings
from src.domain.fixtures import FixtureConfig, FixtureManager
from src.domain.ports import AppStarter

logger = logging.getLogger(__name__)


def build_fixture_manager(pool: ConnectionPool, settings: Settings) -> FixtureManager:
    """Create a Postgres-backed fixture manager configured from settings."""
    manager = FixtureManager(
        PostgresDatabase(pool, timeout=settings.connect_timeout),
        FixtureConfig(file_extensions=tuple(settings.fixture_extensions)),
    )
    for table, key_columns in settings.primary_keys.items():
        manager.configure_table(table, key_columns)
    return manager


def start_supervised(app: AppStarter) -> Future:
    """
    Run app.start() on a daemon thread.

    Returns:
        Future resolved with the outcome of start()
    """
    startup: Future = Future()

    def _run() -> None:
        if not startup.set_running_or_notify_cancel():
            return
        try:
            app.start()
        except BaseException as e:
            startup.set_exception(e)
        else:
            startup.set_result(None)

    threading.Thread(target=_run, name="app-under-test", daemon=True).start()
    return startup


class FixtureRunner:
    """Owns the resources of one test run and guarantees their teardown."""

    def __init__(
        self,
        settings: Settings,
        fixtures: FixtureManager,
        http_client: httpx.Client,
        *,
        app: AppStarter | None = None,
        pool: ConnectionPool | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize runner from already-built parts.

        Args:
            settings: Runner settings
            fixtures: Fixture manager used for load and cleanup
            http_client: Client for health checks and tests (closed on teardown)
            app: Application under test, started by start_app()
            pool: Database pool owned by the runner (closed on teardown)
            sleep: Sleep function between health-check attempts
        """
        self._settings = settings
        self._fixtures = fixtures
        self._http_client = http_client
        self._app = app
        self._pool = pool
        self._sleep = sleep
        self._startup: Future | None = None
        self._closed = False

    @classmethod
    def start(
        cls,
        settings: Settings | None = None,
        app: AppStarter | None = None,
        env_files: Sequence[str] = (),
    ) -> "FixtureRunner":
        """
        Open the database, start the application and wait for it.

        Everything opened here is closed again if startup fails.

        Args:
            settings: Runner settings (read from the environment if None)
            app: Application under test
            env_files: Dotenv files loaded before settings are read

        Raises:
            DatabaseConnectionError: If the database cannot be reached
            HealthCheckTimeout: If the application never becomes healthy
            AppStartupError: If the application's start call fails
        """
        if env_files:
            load_env_files(*env_files)
            get_settings.cache_clear()
        settings = settings or get_settings()
        pool = open_pool(settings)
        runner = cls(
            settings,
            build_fixture_manager(pool, settings),
            httpx.Client(base_url=settings.base_url, timeout=settings.request_timeout),
            app=app,
            pool=pool,
        )
        try:
            runner.start_app()
        except BaseException:
            runner.close()
            raise
        return runner

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def fixtures(self) -> FixtureManager:
        return self._fixtures

    @property
    def http_client(self) -> httpx.Client:
        return self._http_client

    @property
    def base_url(self) -> str:
        return self._settings.base_url

    @property
    def pool(self) -> ConnectionPool | None:
        return self._pool

    def start_app(self) -> None:
        """
        Start the application on a background thread and wait for health.

        The start call resolves a Future, so a failure is reported to the
        health wait instead of being lost. The thread is a daemon: a start()
        that never returns cannot keep the process alive after close().
        """
        if self._app is None:
            return

        logger.info("Starting application under test...")
        self._startup = start_supervised(self._app)

        checker = HealthChecker(
            self._http_client,
            max_attempts=self._settings.max_wait_attempts,
            timeout=self._settings.request_timeout,
            interval=self._settings.wait_interval,
            sleep=self._sleep,
        )
        checker.wait_until_ready(self._settings.health_check_url, startup=self._startup)

    def load_fixtures(self) -> list[Path]:
        """Load every fixture file from the configured directory."""
        return self._fixtures.load_from_directory(self._settings.fixtures_dir)

    def run(self, tests: Callable[[], int]) -> int:
        """
        Load fixtures, then run the tests.

        Args:
            tests: Test entry point returning a process exit code

        Returns:
            The exit code returned by ``tests``
        """
        self.load_fixtures()
        return tests()

    def close(self) -> None:
        """
        Release everything in reverse order of acquisition.

        Each step runs even if an earlier one failed; failures are logged.
        Calling close() more than once is harmless.
        """
        if self._closed:
            return
        self._closed = True

        try:
            self._fixtures.cleanup()
        except Exception as e:
            logger.warning("Failed to cleanup fixtures: %s", e)

        if self._pool is not None:
            try:
                self._pool.close()
            except Exception as e:
                logger.warning("Failed to close database connection pool: %s", e)

        if self._app is not None and self._startup is not None:
            try:
                self._app.stop()
            except Exception as e:
                logger.warning("Failed to stop application: %s", e)

        self._http_client.close()
        logger.info("Fixture runner closed")

    def __enter__(self) -> "FixtureRunner":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
