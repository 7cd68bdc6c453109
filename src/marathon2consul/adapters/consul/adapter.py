"""
Consul Adapter - Implementation of ServiceRegistryPort for Consul.
"""

import logging

from marathon2consul.core.domain.entities import ServiceRegistration
from marathon2consul.core.ports.config_provider import ConsulConfig
from marathon2consul.core.ports.service_registry import (
    RegistryNotFoundError,
    ServiceRegistryPort,
)

from .client import ConsulApiClient


class ConsulAdapter(ServiceRegistryPort):
    """
    Consul implementation of the ServiceRegistryPort.

    Registrations go to the local agent, which keeps them in sync with the
    catalog and runs the attached checks.
    """

    def __init__(
        self,
        config: ConsulConfig,
        dry_run: bool = True,
        client: ConsulApiClient | None = None,
    ):
        """
        Initialize the Consul adapter.

        Args:
            config: Consul configuration
            dry_run: If True, write operations are only logged
            client: Pre-built API client (mainly for tests)
        """
        self.config = config
        self.dry_run = dry_run
        self.logger = logging.getLogger("ConsulAdapter")
        self._client = client or ConsulApiClient(
            url=config.url,
            token=config.token,
            datacenter=config.datacenter,
            dry_run=dry_run,
            timeout=config.timeout,
        )

    @property
    def name(self) -> str:
        return "Consul"

    def test_connection(self) -> bool:
        return self._client.test_connection()

    def register(self, registration: ServiceRegistration) -> None:
        self.logger.debug(f"Registering {registration.id} ({registration.name})")
        self._client.register_service(registration.to_dict())

    def deregister(self, service_id: str) -> None:
        self.logger.debug(f"Deregistering {service_id}")
        try:
            self._client.deregister_service(service_id)
        except RegistryNotFoundError as e:
            raise RegistryNotFoundError(
                f"Service not registered: {service_id}", service_id=service_id, cause=e
            )
