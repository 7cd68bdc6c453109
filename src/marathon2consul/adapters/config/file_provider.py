"""
File Configuration Provider - Load configuration from YAML/TOML files.

Supported files (searched in the working directory, then the home directory):
- .marathon2consul.yaml / .marathon2consul.yml
- .marathon2consul.toml
- pyproject.toml ([tool.marathon2consul] section, working directory only)

Example .marathon2consul.yaml:

    marathon:
      url: http://marathon.mesos:8080
      token: acs-token

    consul:
      url: http://127.0.0.1:8500
      token: acl-token

    sync:
      app_id: /prod/web
      port_overrides:
        0: 31000
      execute: false
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml


try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # Fallback for older Python

from marathon2consul.core.exceptions import ConfigError
from marathon2consul.core.ports.config_provider import (
    AppConfig,
    ConfigProviderPort,
    ConsulConfig,
    MarathonConfig,
    SyncConfig,
)


CONFIG_FILE_NAMES = (
    ".marathon2consul.yaml",
    ".marathon2consul.yml",
    ".marathon2consul.toml",
)

# CLI argument name -> dotted config key
CLI_KEY_MAP = {
    "marathon_url": "marathon.url",
    "consul_url": "consul.url",
    "consul_token": "consul.token",
    "app_id": "sync.app_id",
    "port_overrides": "sync.port_overrides",
    "verbose": "sync.verbose",
    "execute": "sync.execute",
}


def parse_port_overrides(value: Any) -> dict[int, int]:
    """
    Parse port overrides into an index -> port mapping.

    Accepts a mapping ({0: 9999}), a list of "INDEX=PORT" strings or a
    comma separated string ("0=9999,1=8081").

    Raises:
        ConfigError: On malformed entries
    """
    if value is None or value == "":
        return {}

    if isinstance(value, Mapping):
        items = list(value.items())
    else:
        entries = value.split(",") if isinstance(value, str) else list(value)
        items = []
        for entry in entries:
            entry = str(entry).strip()
            if not entry:
                continue
            if "=" not in entry:
                raise ConfigError(f"Invalid port override '{entry}', expected INDEX=PORT")
            index, port = entry.split("=", 1)
            items.append((index.strip(), port.strip()))

    overrides: dict[int, int] = {}
    for index, port in items:
        try:
            overrides[int(index)] = int(port)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid port override {index}={port}: not an integer", cause=e)
    return overrides


def get_dotted(data: Mapping[str, Any], key: str) -> Any:
    current: Any = data
    for part in key.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return None
        current = current[part]
    return current


def set_dotted(data: dict[str, Any], key: str, value: Any) -> None:
    parts = key.split(".")
    current = data
    for part in parts[:-1]:
        current = current.setdefault(part, {})
    current[parts[-1]] = value


def merge_settings(base: dict[str, Any], overlay: Mapping[str, Any]) -> dict[str, Any]:
    """Deep merge overlay into a copy of base."""
    result = dict(base)
    for key, value in overlay.items():
        if isinstance(value, Mapping) and isinstance(result.get(key), Mapping):
            result[key] = merge_settings(dict(result[key]), value)
        else:
            result[key] = value
    return result


def cli_layer(cli_overrides: Mapping[str, Any]) -> dict[str, Any]:
    """Settings layer of the CLI arguments that were actually given."""
    layer: dict[str, Any] = {}
    for cli_key, config_key in CLI_KEY_MAP.items():
        value = cli_overrides.get(cli_key)
        # argparse leaves unset options as None and unset flags as False
        if value is None or value is False or value == [] or value == "":
            continue
        set_dotted(layer, config_key, value)
    return layer


def build_app_config(data: Mapping[str, Any]) -> AppConfig:
    """
    Build an AppConfig from a nested settings mapping.

    Raises:
        ConfigError: If port overrides are malformed
    """
    marathon = data.get("marathon") or {}
    consul = data.get("consul") or {}
    sync = data.get("sync") or {}

    dry_run = True
    if "execute" in sync:
        dry_run = not bool(sync["execute"])
    elif "dry_run" in sync:
        dry_run = bool(sync["dry_run"])

    return AppConfig(
        marathon=MarathonConfig(
            url=str(marathon.get("url") or ""),
            username=marathon.get("username"),
            password=marathon.get("password"),
            token=marathon.get("token"),
            timeout=float(marathon.get("timeout", MarathonConfig.timeout)),
        ),
        consul=ConsulConfig(
            url=str(consul.get("url") or ConsulConfig.url),
            token=consul.get("token"),
            datacenter=consul.get("datacenter"),
            timeout=float(consul.get("timeout", ConsulConfig.timeout)),
        ),
        sync=SyncConfig(
            app_id=str(sync.get("app_id") or ""),
            port_overrides=parse_port_overrides(sync.get("port_overrides")),
            dry_run=dry_run,
            verbose=bool(sync.get("verbose", False)),
        ),
    )


class FileConfigProvider(ConfigProviderPort):
    """
    Configuration provider reading a YAML or TOML file.

    CLI overrides (argparse names, see CLI_KEY_MAP) win over file values.
    """

    def __init__(
        self,
        config_path: Path | None = None,
        cli_overrides: dict[str, Any] | None = None,
    ):
        """
        Initialize the file provider.

        Args:
            config_path: Explicit config file; searched for when None
            cli_overrides: Parsed CLI arguments
        """
        self.logger = logging.getLogger("FileConfigProvider")
        self._explicit_path = config_path
        self._cli_overrides = cli_overrides or {}
        self._config_file_path: Path | None = None
        self._data: dict[str, Any] | None = None

    @property
    def name(self) -> str:
        if self.config_file_path:
            return f"File ({self.config_file_path.name})"
        return "File"

    @property
    def config_file_path(self) -> Path | None:
        """Path of the config file that was (or will be) loaded."""
        if self._config_file_path is None:
            self._config_file_path = self._find_config_file()
        return self._config_file_path

    def _find_config_file(self) -> Path | None:
        if self._explicit_path is not None:
            return self._explicit_path

        for directory in (Path.cwd(), Path.home()):
            for file_name in CONFIG_FILE_NAMES:
                candidate = directory / file_name
                if candidate.is_file():
                    return candidate

        pyproject = Path.cwd() / "pyproject.toml"
        if pyproject.is_file() and get_dotted(self._read_toml(pyproject), "tool.marathon2consul"):
            return pyproject
        return None

    def _read_toml(self, path: Path) -> dict[str, Any]:
        try:
            return tomllib.loads(path.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError):
            return {}

    def read_file(self) -> dict[str, Any]:
        """
        Read the raw settings mapping of the config file.

        Returns:
            Settings mapping, empty when no config file exists

        Raises:
            ConfigError: If the file is missing or has a syntax error
        """
        path = self.config_file_path
        if path is None:
            return {}
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")

        content = path.read_text(encoding="utf-8")
        if path.suffix in (".yaml", ".yml"):
            try:
                data = yaml.safe_load(content)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML syntax in {path}: {e}", cause=e)
        else:
            try:
                data = tomllib.loads(content)
            except tomllib.TOMLDecodeError as e:
                raise ConfigError(f"Invalid TOML syntax in {path}: {e}", cause=e)
            if path.name == "pyproject.toml":
                data = get_dotted(data, "tool.marathon2consul")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file root must be a mapping: {path}")

        self.logger.debug(f"Loaded config file {path}")
        return data

    def settings(self) -> dict[str, Any]:
        """Merged settings of the file and the CLI overrides."""
        if self._data is None:
            self._data = merge_settings(self.read_file(), cli_layer(self._cli_overrides))
        return self._data

    def load(self) -> AppConfig:
        return build_app_config(self.settings())

    def validate(self) -> list[str]:
        try:
            return self.load().validate()
        except ConfigError as e:
            return [str(e)]
