"""
Environment Configuration Provider - Load configuration from env vars.

Precedence (highest first):
1. CLI arguments
2. Environment variables
3. .env file in the working directory
4. Config file (.marathon2consul.yaml/.toml, pyproject.toml)
"""

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import dotenv_values

from marathon2consul.core.exceptions import ConfigError
from marathon2consul.core.ports.config_provider import AppConfig, ConfigProviderPort

from .file_provider import (
    FileConfigProvider,
    build_app_config,
    cli_layer,
    merge_settings,
    set_dotted,
)


# Environment variable -> dotted config key
ENV_KEY_MAP = {
    "MARATHON_URL": "marathon.url",
    "MARATHON_USERNAME": "marathon.username",
    "MARATHON_PASSWORD": "marathon.password",
    "MARATHON_TOKEN": "marathon.token",
    "MARATHON_APP_ID": "sync.app_id",
    "CONSUL_HTTP_ADDR": "consul.url",
    "CONSUL_HTTP_TOKEN": "consul.token",
    "CONSUL_DATACENTER": "consul.datacenter",
    "PORT_OVERRIDES": "sync.port_overrides",
    "MARATHON2CONSUL_VERBOSE": "sync.verbose",
    "MARATHON2CONSUL_EXECUTE": "sync.execute",
}

_BOOL_KEYS = {"sync.verbose", "sync.execute"}


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def read_env_file(path: Path) -> dict[str, str]:
    """Read the variables of a .env file; keys without a value are skipped."""
    if not path.is_file():
        return {}
    return {k: v for k, v in dotenv_values(path).items() if v is not None}


class EnvironmentConfigProvider(ConfigProviderPort):
    """
    Configuration provider reading environment variables.

    Environment values are layered on top of an optional config file and
    below CLI overrides.
    """

    def __init__(
        self,
        config_file: Path | None = None,
        env_file: Path | None = None,
        cli_overrides: dict[str, Any] | None = None,
    ):
        """
        Initialize the environment provider.

        Args:
            config_file: Explicit config file; searched for when None
            env_file: .env file; defaults to .env in the working directory
            cli_overrides: Parsed CLI arguments
        """
        self.logger = logging.getLogger("EnvironmentConfigProvider")
        self._file_provider = FileConfigProvider(config_path=config_file)
        self._env_file = env_file if env_file is not None else Path.cwd() / ".env"
        self._cli_overrides = cli_overrides or {}
        self._data: dict[str, Any] | None = None

    @property
    def name(self) -> str:
        if self.config_file_path:
            return f"Environment + {self.config_file_path.name}"
        return "Environment"

    @property
    def config_file_path(self) -> Path | None:
        """Path of the layered config file, if any."""
        return self._file_provider.config_file_path

    def _env_layer(self) -> dict[str, Any]:
        environ = {**read_env_file(self._env_file), **os.environ}
        layer: dict[str, Any] = {}
        for env_key, config_key in ENV_KEY_MAP.items():
            value = environ.get(env_key)
            if value is None or value == "":
                continue
            set_dotted(layer, config_key, _parse_bool(value) if config_key in _BOOL_KEYS else value)
        return layer

    def settings(self) -> dict[str, Any]:
        """Merged settings of all layers."""
        if self._data is None:
            data = self._file_provider.read_file()
            data = merge_settings(data, self._env_layer())
            self._data = merge_settings(data, cli_layer(self._cli_overrides))
        return self._data

    def load(self) -> AppConfig:
        return build_app_config(self.settings())

    def validate(self) -> list[str]:
        try:
            config = self.load()
        except ConfigError as e:
            return [str(e)]

        return config.validate()
