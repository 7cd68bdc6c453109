"""
Configuration Adapters - Config file and environment providers.
"""

from .environment import EnvironmentConfigProvider, read_env_file
from .file_provider import FileConfigProvider, build_app_config, parse_port_overrides


__all__ = [
    "EnvironmentConfigProvider",
    "FileConfigProvider",
    "build_app_config",
    "parse_port_overrides",
    "read_env_file",
]
