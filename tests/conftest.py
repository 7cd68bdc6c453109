"""
Shared pytest fixtures for the marathon2consul test suite.

Fixture Categories:
- Time: frozen clocks
- Data: Marathon application documents
- Domain: parsed ApplicationDefinition instances
- Configuration: SyncConfig, AppConfig
- Mocks: mock orchestrator and registry ports
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from unittest.mock import Mock

import pytest

from marathon2consul.core.domain import ApplicationDefinition
from marathon2consul.core.ports import (
    AppConfig,
    ConsulConfig,
    MarathonConfig,
    OrchestratorPort,
    ServiceRegistryPort,
    SyncConfig,
)
from marathon2consul.core.translation import frozen_clock


# =============================================================================
# Time
# =============================================================================


FROZEN_MOMENT = datetime(2024, 3, 5, 14, 7, 9, tzinfo=timezone.utc)
FROZEN_STAMP = "20240305T140709Z"


@pytest.fixture
def clock():
    """A clock frozen at FROZEN_MOMENT."""
    return frozen_clock(FROZEN_MOMENT)


# =============================================================================
# Marathon Documents
# =============================================================================


@pytest.fixture
def web_app_data() -> dict[str, Any]:
    """
    Marathon document of a web application.

    Contains:
    - id "prod.myapp" (second dot segment "myapp")
    - one unnamed port 8080 with an HTTP health check on portIndex 0
    - a weight label of 5
    """
    return {
        "id": "prod.myapp",
        "user": "deploy",
        "version": "2024-03-01T10:00:00.000Z",
        "requirePorts": True,
        "labels": {"weight": "5", "team": "web"},
        "portDefinitions": [{"port": 8080, "name": ""}],
        "healthChecks": [
            {
                "protocol": "HTTP",
                "portIndex": 0,
                "path": "/health",
                "timeoutSeconds": 10,
                "intervalSeconds": 30,
            }
        ],
    }


@pytest.fixture
def multi_port_app_data() -> dict[str, Any]:
    """
    Marathon document with several ports.

    Contains:
    - unnamed port 31000 (main service)
    - named port "admin" 31001 with a TCP check
    - a second unnamed port 31002, skipped as a duplicate main service
    - port "metrics" 31003 opted out of registration
    """
    return {
        "id": "/shop/cart",
        "version": "v7",
        "labels": {"consul_service_name": "cart", "ctags": "shop,cart"},
        "portDefinitions": [
            {"port": 31000},
            {"port": 31001, "name": "admin", "labels": {"ctags": "internal"}},
            {"port": 31002},
            {"port": 31003, "name": "metrics", "labels": {"consul_registration": "no"}},
        ],
        "healthChecks": [
            {"protocol": "TCP", "portIndex": 1, "timeoutSeconds": 5, "intervalSeconds": 15},
        ],
    }


@pytest.fixture
def web_app(web_app_data) -> ApplicationDefinition:
    """Parsed web application."""
    return ApplicationDefinition.from_dict(web_app_data)


@pytest.fixture
def multi_port_app(multi_port_app_data) -> ApplicationDefinition:
    """Parsed multi port application."""
    return ApplicationDefinition.from_dict(multi_port_app_data)


# =============================================================================
# Configuration
# =============================================================================


@pytest.fixture
def sync_config() -> SyncConfig:
    """Sync config in execute mode without overrides."""
    return SyncConfig(app_id="prod.myapp", dry_run=False)


@pytest.fixture
def app_config(sync_config) -> AppConfig:
    """Complete, valid application config."""
    return AppConfig(
        marathon=MarathonConfig(url="http://marathon.mesos:8080"),
        consul=ConsulConfig(url="http://127.0.0.1:8500"),
        sync=sync_config,
    )


# =============================================================================
# Mock Ports
# =============================================================================


@pytest.fixture
def mock_orchestrator(web_app) -> Mock:
    """Orchestrator port returning the web application."""
    orchestrator = Mock(spec=OrchestratorPort)
    orchestrator.name = "Marathon"
    orchestrator.fetch.return_value = web_app
    orchestrator.test_connection.return_value = True
    return orchestrator


@pytest.fixture
def mock_registry() -> Mock:
    """Service registry port accepting every operation."""
    registry = Mock(spec=ServiceRegistryPort)
    registry.name = "Consul"
    registry.test_connection.return_value = True
    return registry
