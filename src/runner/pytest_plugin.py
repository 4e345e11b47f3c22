"""
pytest integration - run a test session inside a FixtureRunner.

Usage from a script::

    import sys
    from src.runner import run_with_pytest

    sys.exit(run_with_pytest(["tests/e2e"], app=MyApp()))

Tests receive the runner through session fixtures instead of a global.
"""

from collections.abc import Sequence

import httpx
import pytest

from src.config.settings import Settings
from src.domain.fixtures import FixtureManager
from src.domain.ports import AppStarter

from .runner import FixtureRunner


class FixtureRunnerPlugin:
    """pytest plugin exposing one runner to a test session."""

    def __init__(self, runner: FixtureRunner) -> None:
        self._runner = runner

    @pytest.fixture(scope="session")
    def fixture_runner(self) -> FixtureRunner:
        return self._runner

    @pytest.fixture(scope="session")
    def fixture_manager(self) -> FixtureManager:
        return self._runner.fixtures

    @pytest.fixture(scope="session")
    def http_client(self) -> httpx.Client:
        return self._runner.http_client

    @pytest.fixture(scope="session")
    def base_url(self) -> str:
        return self._runner.base_url


def run_pytest(runner: FixtureRunner, args: Sequence[str]) -> int:
    """Load fixtures and run pytest with the runner's plugin registered."""
    return runner.run(lambda: int(pytest.main(list(args), plugins=[FixtureRunnerPlugin(runner)])))


def run_with_pytest(
    args: Sequence[str],
    settings: Settings | None = None,
    app: AppStarter | None = None,
    env_files: Sequence[str] = (),
) -> int:
    """
    Start a runner, run pytest against it and always tear it down.

    Args:
        args: pytest command-line arguments
        settings: Runner settings (get_settings() if None)
        app: Application under test
        env_files: Dotenv files loaded before settings are read

    Returns:
        pytest's exit code
    """
    with FixtureRunner.start(settings, app, env_files) as runner:
        return run_pytest(runner, args)
