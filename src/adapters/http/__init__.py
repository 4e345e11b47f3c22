"""HTTP adapters - health checking of the application under test."""

from .health import HealthChecker

__all__ = ["HealthChecker"]
