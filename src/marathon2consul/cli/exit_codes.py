"""
Exit Codes - Process exit codes of the marathon2consul CLI.

Scripts wrapping a Marathon task can branch on these values.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """
    Exit codes returned by the CLI.

    Attributes:
        SUCCESS: Operation completed.
        ERROR: Unexpected error or failed sync.
        CONFIG_ERROR: Missing or invalid configuration.
        CONNECTION_ERROR: Marathon or Consul unreachable, or credentials refused.
        PARTIAL_SUCCESS: Some registrations applied, some failed.
        CANCELLED: Interrupted by the user (SIGINT).
    """

    SUCCESS = 0
    ERROR = 1
    CONFIG_ERROR = 2
    CONNECTION_ERROR = 4
    PARTIAL_SUCCESS = 6
    CANCELLED = 130

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ExitCode":
        """
        Map an exception to the matching exit code.

        Args:
            exc: The exception that ended the run.

        Returns:
            The exit code for the exception type.
        """
        from marathon2consul.core.exceptions import ConfigError
        from marathon2consul.core.ports.orchestrator import (
            AuthenticationError,
            TransientError,
        )
        from marathon2consul.core.ports.service_registry import (
            RegistryAuthenticationError,
            RegistryTransientError,
        )

        if isinstance(exc, KeyboardInterrupt):
            return cls.CANCELLED
        if isinstance(exc, ConfigError):
            return cls.CONFIG_ERROR
        connection_errors = (
            AuthenticationError,
            TransientError,
            RegistryAuthenticationError,
            RegistryTransientError,
            ConnectionError,
        )
        if isinstance(exc, connection_errors):
            return cls.CONNECTION_ERROR
        return cls.ERROR
