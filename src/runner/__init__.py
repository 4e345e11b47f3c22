"""Runner - orchestration of a test run around the fixture manager."""

from .pytest_plugin import FixtureRunnerPlugin, run_pytest, run_with_pytest
from .runner import FixtureRunner, build_fixture_manager

__all__ = [
    "FixtureRunner",
    "FixtureRunnerPlugin",
    "build_fixture_manager",
    "run_pytest",
    "run_with_pytest",
]
