"""
Configuration Provider Port - Abstract interface for configuration.

Implementations:
- EnvironmentConfigProvider: Load from env vars, layered on a config file
- FileConfigProvider: Load from YAML/TOML config files
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass
class MarathonConfig:
    """Configuration for the Marathon API."""

    url: str = ""
    username: str | None = None
    password: str | None = None
    token: str | None = None  # DC/OS ACS token
    timeout: float = 30.0

    def is_valid(self) -> bool:
        """Check if configuration is valid."""
        return bool(self.url)


@dataclass
class ConsulConfig:
    """Configuration for the Consul agent API."""

    url: str = "http://127.0.0.1:8500"
    token: str | None = None  # ACL token
    datacenter: str | None = None
    timeout: float = 10.0

    def is_valid(self) -> bool:
        """Check if configuration is valid."""
        return bool(self.url)


@dataclass
class SyncConfig:
    """Configuration for sync operations."""

    app_id: str = ""
    port_overrides: dict[int, int] = field(default_factory=dict)  # port index -> port
    dry_run: bool = True
    verbose: bool = False


@dataclass
class AppConfig:
    """Complete application configuration."""

    marathon: MarathonConfig = field(default_factory=MarathonConfig)
    consul: ConsulConfig = field(default_factory=ConsulConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)

    def validate(self) -> list[str]:
        """
        Validate configuration.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not self.marathon.url:
            errors.append("Missing Marathon URL (MARATHON_URL)")
        if not self.consul.url:
            errors.append("Missing Consul address (CONSUL_HTTP_ADDR)")
        if not self.sync.app_id:
            errors.append("Missing application id (MARATHON_APP_ID)")
        for index, port in self.sync.port_overrides.items():
            if index < 0:
                errors.append(f"Invalid port override index: {index}")
            if not 0 < port < 65536:
                errors.append(f"Invalid port override for index {index}: {port}")

        return errors


class ConfigProviderPort(ABC):
    """
    Abstract interface for configuration providers.

    Configuration can come from various sources:
    - Environment variables
    - YAML/TOML config files
    - Command line arguments
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the provider name."""
        ...

    @abstractmethod
    def load(self) -> AppConfig:
        """
        Load configuration from source.

        Returns:
            Complete application configuration
        """
        ...

    @abstractmethod
    def validate(self) -> list[str]:
        """
        Validate loaded configuration.

        Returns:
            List of validation errors
        """
        ...
