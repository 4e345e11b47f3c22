"""
HTTP health checker - waits for the application under test to be ready.

Polls a health endpoint with a per-request timeout and a bounded number of
attempts, sleeping a fixed interval between attempts. Never retries forever.
"""

import logging
import time
from collections.abc import Callable
from concurrent.futures import Future

import httpx

from src.domain.exceptions import AppStartupError, HealthCheckTimeout

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 30
DEFAULT_TIMEOUT = 10.0
DEFAULT_INTERVAL = 1.0


class HealthChecker:
    """Bounded health polling over an httpx client."""

    def __init__(
        self,
        client: httpx.Client,
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        timeout: float = DEFAULT_TIMEOUT,
        interval: float = DEFAULT_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize checker.

        Args:
            client: httpx client used for requests (not closed here)
            max_attempts: Attempts before giving up; values < 1 mean the default
            timeout: Per-request timeout in seconds
            interval: Seconds slept between failed attempts
            sleep: Sleep function, replaceable in tests
        """
        self._client = client
        self._max_attempts = max_attempts if max_attempts > 0 else DEFAULT_MAX_ATTEMPTS
        self._timeout = timeout
        self._interval = interval
        self._sleep = sleep

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def is_ready(self, url: str) -> bool:
        """Issue one GET and report whether it answered 200."""
        try:
            response = self._client.get(url, timeout=self._timeout)
        except httpx.HTTPError as e:
            logger.debug("Health check request to %s failed: %s", url, e)
            return False
        return response.status_code == httpx.codes.OK

    def wait_until_ready(self, url: str, startup: Future | None = None) -> int:
        """
        Poll ``url`` until it answers 200.

        Args:
            url: Absolute health endpoint URL
            startup: Future of the application's start call; if it finishes
                with an exception, polling stops

        Returns:
            Number of attempts used

        Raises:
            HealthCheckTimeout: If no attempt answered 200
            AppStartupError: If the startup future failed
        """
        for attempt in range(1, self._max_attempts + 1):
            _raise_if_start_failed(startup)

            logger.debug("Waiting for server at %s (attempt %d/%d)", url, attempt, self._max_attempts)
            if self.is_ready(url):
                logger.info("Server is ready at %s", url)
                return attempt

            if attempt < self._max_attempts:
                self._sleep(self._interval)

        _raise_if_start_failed(startup)
        raise HealthCheckTimeout(url, self._max_attempts)


def _raise_if_start_failed(startup: Future | None) -> None:
    if startup is None or not startup.done() or startup.cancelled():
        return
    error = startup.exception()
    if error is not None:
        raise AppStartupError("failed to start application") from error
