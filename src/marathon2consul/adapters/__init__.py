"""
Adapters - Concrete implementations of the core ports.

- marathon/: OrchestratorPort for the Marathon REST API
- consul/: ServiceRegistryPort for the Consul agent API
- config/: ConfigProviderPort for files and environment variables
"""

from .config import EnvironmentConfigProvider, FileConfigProvider
from .consul import ConsulAdapter, ConsulApiClient
from .marathon import MarathonAdapter, MarathonApiClient


__all__ = [
    "ConsulAdapter",
    "ConsulApiClient",
    "EnvironmentConfigProvider",
    "FileConfigProvider",
    "MarathonAdapter",
    "MarathonApiClient",
]
