"""Custom exception types for the smoke-test bootstrapper."""

from __future__ import annotations


class SmokeTestError(RuntimeError):
    """Base class for bootstrapper failures."""


class ConfigurationError(SmokeTestError):
    """Raised when the build, server or platform under test cannot be resolved."""


class UnsupportedPlatformError(ConfigurationError):
    """Raised when the host platform has no known executable layout."""


class FixtureError(SmokeTestError):
    """Raised when cloning, refreshing or installing the fixture project fails."""


class ApplicationError(SmokeTestError):
    """Base class for failures reported by the application driver."""


class ApplicationStartError(ApplicationError):
    """Raised when the application under test exits before it becomes ready."""
