"""
Marathon Adapter - Implementation of OrchestratorPort for Marathon.
"""

import logging

from marathon2consul.core.domain.entities import ApplicationDefinition
from marathon2consul.core.ports.config_provider import MarathonConfig
from marathon2consul.core.ports.orchestrator import NotFoundError, OrchestratorPort

from .client import MarathonApiClient


class MarathonAdapter(OrchestratorPort):
    """
    Marathon implementation of the OrchestratorPort.

    Fetches application definitions and parses them into domain entities.
    """

    def __init__(self, config: MarathonConfig, client: MarathonApiClient | None = None):
        """
        Initialize the Marathon adapter.

        Args:
            config: Marathon configuration
            client: Pre-built API client (mainly for tests)
        """
        self.config = config
        self.logger = logging.getLogger("MarathonAdapter")
        self._client = client or MarathonApiClient(
            url=config.url,
            username=config.username,
            password=config.password,
            token=config.token,
            timeout=config.timeout,
        )

    @property
    def name(self) -> str:
        return "Marathon"

    def test_connection(self) -> bool:
        return self._client.ping()

    def fetch(self, app_id: str) -> ApplicationDefinition:
        self.logger.debug(f"Fetching application {app_id}")
        try:
            data = self._client.get_app(app_id)
        except NotFoundError as e:
            raise NotFoundError(f"Application not found: {app_id}", app_id=app_id, cause=e)
        return ApplicationDefinition.from_dict(data)
