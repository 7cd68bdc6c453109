"""
Core exceptions - Errors raised by the domain and translation layers.

Per-entry anomalies (a bad health check port, an unparseable weight label)
are never raised. They are reported as TranslationWarning values instead.
"""

from __future__ import annotations


class Marathon2ConsulError(Exception):
    """Base exception for all marathon2consul errors."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class DefinitionError(Marathon2ConsulError):
    """The application definition is structurally unusable."""

    def __init__(
        self,
        message: str,
        app_id: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause)
        self.app_id = app_id


class ConfigError(Marathon2ConsulError):
    """Configuration could not be loaded or is invalid."""
