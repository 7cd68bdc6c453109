"""
Ports - Abstract interfaces for external dependencies.

Ports define the contracts that adapters must implement.
This enables dependency inversion and easy testing.
"""

from .config_provider import (
    AppConfig,
    ConfigProviderPort,
    ConsulConfig,
    MarathonConfig,
    SyncConfig,
)
from .orchestrator import (
    AuthenticationError,
    NotFoundError,
    OrchestratorError,
    OrchestratorPort,
    PermissionError,
    RateLimitError,
    TransientError,
)
from .service_registry import (
    RegistryAuthenticationError,
    RegistryError,
    RegistryNotFoundError,
    RegistryPermissionError,
    RegistryTransientError,
    ServiceRegistryPort,
)


__all__ = [
    # Ports
    "OrchestratorPort",
    "ServiceRegistryPort",
    "ConfigProviderPort",
    # Configuration
    "AppConfig",
    "MarathonConfig",
    "ConsulConfig",
    "SyncConfig",
    # Orchestrator exceptions
    "OrchestratorError",
    "AuthenticationError",
    "PermissionError",
    "NotFoundError",
    "RateLimitError",
    "TransientError",
    # Registry exceptions
    "RegistryError",
    "RegistryAuthenticationError",
    "RegistryPermissionError",
    "RegistryNotFoundError",
    "RegistryTransientError",
]
