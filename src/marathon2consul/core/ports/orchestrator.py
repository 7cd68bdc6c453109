"""
Orchestrator Port - Abstract interface for cluster orchestrators.

Implementations:
- MarathonAdapter: Mesosphere Marathon REST API
"""

from abc import ABC, abstractmethod

from ..domain.entities import ApplicationDefinition


class OrchestratorError(Exception):
    """Base exception for orchestrator errors."""

    def __init__(self, message: str, app_id: str | None = None, cause: Exception | None = None):
        super().__init__(message)
        self.app_id = app_id
        self.cause = cause


class AuthenticationError(OrchestratorError):
    """Authentication failed."""


class PermissionError(OrchestratorError):
    """Insufficient permissions."""


class NotFoundError(OrchestratorError):
    """Application not found."""


class RateLimitError(OrchestratorError):
    """Rate limit exceeded (HTTP 429)."""

    def __init__(
        self,
        message: str,
        retry_after: int | None = None,
        app_id: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, app_id, cause)
        self.retry_after = retry_after


class TransientError(OrchestratorError):
    """Transient server error (5xx) that may succeed on retry."""


class OrchestratorPort(ABC):
    """
    Abstract interface for orchestrators publishing application definitions.

    The sync orchestrator calls fetch() once per sync, before translation.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the orchestrator name (e.g., 'Marathon')."""
        ...

    @abstractmethod
    def test_connection(self) -> bool:
        """Test the connection to the orchestrator."""
        ...

    @abstractmethod
    def fetch(self, app_id: str) -> ApplicationDefinition:
        """
        Fetch an application definition.

        Args:
            app_id: The application id (e.g., '/prod/web')

        Returns:
            The parsed ApplicationDefinition

        Raises:
            NotFoundError: If the application doesn't exist
            OrchestratorError: On any other API failure
            DefinitionError: If the returned document is unusable
        """
        ...
