"""
Service Registry Port - Abstract interface for service discovery registries.

Implementations:
- ConsulAdapter: HashiCorp Consul agent API
"""

from abc import ABC, abstractmethod

from ..domain.entities import ServiceRegistration


class RegistryError(Exception):
    """Base exception for registry errors."""

    def __init__(
        self, message: str, service_id: str | None = None, cause: Exception | None = None
    ):
        super().__init__(message)
        self.service_id = service_id
        self.cause = cause


class RegistryAuthenticationError(RegistryError):
    """ACL token rejected."""


class RegistryPermissionError(RegistryError):
    """ACL token lacks the required permissions."""


class RegistryNotFoundError(RegistryError):
    """Service or endpoint not found."""


class RegistryTransientError(RegistryError):
    """Transient server error (5xx or 429) that may succeed on retry."""


class ServiceRegistryPort(ABC):
    """
    Abstract interface for service registries.

    Registration ids are stable, so registering the same id again updates
    the existing service instead of creating a duplicate.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the registry name (e.g., 'Consul')."""
        ...

    @abstractmethod
    def test_connection(self) -> bool:
        """Test the connection to the registry."""
        ...

    @abstractmethod
    def register(self, registration: ServiceRegistration) -> None:
        """
        Register (or update) a service.

        Raises:
            RegistryError: On API failure
        """
        ...

    @abstractmethod
    def deregister(self, service_id: str) -> None:
        """
        Deregister a service by id.

        Raises:
            RegistryNotFoundError: If the service is unknown
            RegistryError: On any other API failure
        """
        ...
